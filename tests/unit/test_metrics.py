"""Tests for Prometheus metrics."""

from __future__ import annotations

import pytest

from vault_config_operator.metrics import (
    api_call_duration_seconds,
    api_call_total,
    ca_transitions_total,
    drift_detected_total,
    error_total,
    reconcile_duration_seconds,
    reconcile_total,
    resource_status_total,
    vault_operation_duration_seconds,
    vault_operations_total,
)


class TestMetricsExist:
    """Test that all expected metrics are defined."""

    @pytest.mark.parametrize(
        "metric,name",
        [
            # Prometheus counters don't include "_total" in their _name attribute
            (reconcile_total, "vault_config_operator_reconcile"),
            (reconcile_duration_seconds, "vault_config_operator_reconcile_duration_seconds"),
            (error_total, "vault_config_operator_error"),
            (resource_status_total, "vault_config_operator_resource_status"),
            (vault_operations_total, "vault_config_operator_vault_operations"),
            (vault_operation_duration_seconds, "vault_config_operator_vault_operation_duration_seconds"),
            (ca_transitions_total, "vault_config_operator_ca_transitions"),
            (drift_detected_total, "vault_config_operator_drift_detected"),
            (api_call_total, "vault_config_operator_api_call"),
            (api_call_duration_seconds, "vault_config_operator_api_call_duration_seconds"),
        ],
    )
    def test_metric_names(self, metric, name):
        """Test every metric carries the operator prefix."""
        assert metric._name == name


class TestMetricLabels:
    """Test metric label sets."""

    def test_reconcile_total_labels(self):
        """Test reconcile_total labels."""
        assert reconcile_total._labelnames == ("kind", "result")

    def test_vault_operations_total_labels(self):
        """Test vault_operations_total labels."""
        assert vault_operations_total._labelnames == ("operation", "result")

    def test_ca_transitions_total_labels(self):
        """Test ca_transitions_total labels."""
        assert ca_transitions_total._labelnames == ("ca_type", "state")

    def test_drift_detected_total_labels(self):
        """Test drift_detected_total labels."""
        assert drift_detected_total._labelnames == ("kind",)


class TestMetricOperations:
    """Test metric operations."""

    def test_counter_increment(self):
        """Test that counters can be incremented."""
        initial = reconcile_total.labels(kind="TestCounter", result="test")._value.get()

        reconcile_total.labels(kind="TestCounter", result="test").inc()

        assert reconcile_total.labels(kind="TestCounter", result="test")._value.get() == initial + 1

    def test_histogram_observe(self):
        """Test that histograms can observe values."""
        vault_operation_duration_seconds.labels(operation="read").observe(0.05)
        reconcile_duration_seconds.labels(kind="TestHistogram").observe(1.5)

    def test_different_label_values_independent(self):
        """Test that metrics with different labels are independent."""
        vault_operations_total.labels(operation="test-read", result="success").inc(3)
        vault_operations_total.labels(operation="test-write", result="success").inc(5)

        assert vault_operations_total.labels(operation="test-read", result="success")._value.get() == 3
        assert vault_operations_total.labels(operation="test-write", result="success")._value.get() == 5
