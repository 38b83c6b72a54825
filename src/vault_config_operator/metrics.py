"""Prometheus metrics for the Vault Config Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "vault_config_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "vault_config_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

error_total = Counter(
    "vault_config_operator_error_total",
    "Total number of reconciliation errors",
    ["kind", "error_type"],
)

resource_status_total = Counter(
    "vault_config_operator_resource_status_total",
    "Resource readiness reported after reconciliation",
    ["kind", "status"],
)

# Vault operation metrics
vault_operations_total = Counter(
    "vault_config_operator_vault_operations_total",
    "Total number of Vault API operations",
    ["operation", "result"],
)

vault_operation_duration_seconds = Histogram(
    "vault_config_operator_vault_operation_duration_seconds",
    "Duration of Vault API operations in seconds",
    ["operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

# Certificate authority lifecycle
ca_transitions_total = Counter(
    "vault_config_operator_ca_transitions_total",
    "Certificate authority lifecycle transitions",
    ["ca_type", "state"],
)

# Configuration drift detection metrics
drift_detected_total = Counter(
    "vault_config_operator_drift_detected_total",
    "Total number of configuration drift detections",
    ["kind"],
)

# API call metrics
api_call_total = Counter(
    "vault_config_operator_api_call_total",
    "Total number of Kubernetes API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "vault_config_operator_api_call_duration_seconds",
    "Duration of Kubernetes API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)
