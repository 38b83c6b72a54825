"""Tests for Kubernetes event utilities."""

from __future__ import annotations

from unittest.mock import patch

from vault_config_operator.utils.events import (
    emit_awaiting_signature,
    emit_ca_generated,
    emit_ca_signed,
    emit_event,
    emit_reconcile_failed,
    emit_reconcile_started,
    emit_validate_failed,
    emit_validate_succeeded,
    emit_vault_created,
    emit_vault_deleted,
    emit_vault_updated,
)

META = {"name": "test-resource", "namespace": "default"}


class TestEmitEvent:
    """Test cases for emit_event function."""

    @patch("vault_config_operator.utils.events.kopf.event")
    def test_emit_event_normal(self, mock_event):
        """Test emitting normal event."""
        emit_event(META, "TestReason", "Test message")

        mock_event.assert_called_once_with(META, reason="TestReason", message="Test message", type="Normal")

    @patch("vault_config_operator.utils.events.kopf.event")
    def test_emit_event_warning(self, mock_event):
        """Test emitting warning event."""
        emit_event(META, "ErrorReason", "Error occurred", type_="Warning")

        mock_event.assert_called_once_with(META, reason="ErrorReason", message="Error occurred", type="Warning")


class TestReconcileEvents:
    """Test cases for reconciliation events."""

    @patch("vault_config_operator.utils.events.kopf.event")
    def test_emit_reconcile_started(self, mock_event):
        """Test emitting reconcile started event."""
        emit_reconcile_started(META)

        mock_event.assert_called_once_with(
            META, reason="ReconcileStarted", message="Reconciliation started", type="Normal"
        )

    @patch("vault_config_operator.utils.events.kopf.event")
    def test_emit_reconcile_failed(self, mock_event):
        """Test emitting reconcile failed event."""
        emit_reconcile_failed(META, "Vault unreachable")

        mock_event.assert_called_once_with(
            META, reason="ReconcileFailed", message="Vault unreachable", type="Warning"
        )

    @patch("vault_config_operator.utils.events.kopf.event")
    def test_emit_validate_events(self, mock_event):
        """Test emitting validation events."""
        emit_validate_succeeded(META)
        emit_validate_failed(META, "spec.path is required")

        assert mock_event.call_args_list[0].kwargs["reason"] == "ValidateSucceeded"
        assert mock_event.call_args_list[1].kwargs["reason"] == "ValidateFailed"
        assert mock_event.call_args_list[1].kwargs["type"] == "Warning"


class TestVaultEvents:
    """Test cases for Vault object events."""

    @patch("vault_config_operator.utils.events.kopf.event")
    def test_emit_vault_created(self, mock_event):
        """Test emitting Vault object created event."""
        emit_vault_created(META, "sys/policy/reader")

        mock_event.assert_called_once_with(
            META, reason="VaultResourceCreated", message="Vault object sys/policy/reader created", type="Normal"
        )

    @patch("vault_config_operator.utils.events.kopf.event")
    def test_emit_vault_updated(self, mock_event):
        """Test emitting Vault object updated event."""
        emit_vault_updated(META, "db/roles/app")

        assert mock_event.call_args.kwargs["reason"] == "VaultResourceUpdated"
        assert "db/roles/app" in mock_event.call_args.kwargs["message"]

    @patch("vault_config_operator.utils.events.kopf.event")
    def test_emit_vault_deleted(self, mock_event):
        """Test emitting Vault object deleted event."""
        emit_vault_deleted(META, "sys/mounts/kv")

        assert mock_event.call_args.kwargs["reason"] == "VaultResourceDeleted"


class TestCertificateAuthorityEvents:
    """Test cases for CA lifecycle events."""

    @patch("vault_config_operator.utils.events.kopf.event")
    def test_emit_ca_generated_and_signed(self, mock_event):
        """Test CA generation and signing events."""
        emit_ca_generated(META, "intermediate")
        emit_ca_signed(META, "intermediate")

        assert mock_event.call_args_list[0].kwargs["reason"] == "CertificateAuthorityGenerated"
        assert mock_event.call_args_list[1].kwargs["message"] == "intermediate certificate authority signed"

    @patch("vault_config_operator.utils.events.kopf.event")
    def test_emit_awaiting_signature(self, mock_event):
        """Test the awaiting signature event names the secret."""
        emit_awaiting_signature(META, "signed-cert")

        assert mock_event.call_args.kwargs["reason"] == "AwaitingSignature"
        assert "signed-cert" in mock_event.call_args.kwargs["message"]
