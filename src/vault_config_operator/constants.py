"""Constants for the Vault Config Operator."""

# API Group
API_GROUP = "redhatcop.redhat.io"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_SECRET_ENGINE_MOUNT = "SecretEngineMount"
KIND_POLICY = "Policy"
KIND_DATABASE_SECRET_ENGINE_CONFIG = "DatabaseSecretEngineConfig"
KIND_DATABASE_SECRET_ENGINE_ROLE = "DatabaseSecretEngineRole"
KIND_RANDOM_SECRET = "RandomSecret"
KIND_LDAP_AUTH_ENGINE_CONFIG = "LDAPAuthEngineConfig"
KIND_PKI_SECRET_ENGINE_CONFIG = "PKISecretEngineConfig"

# Plurals (custom objects API)
PLURAL_RANDOM_SECRET = "randomsecrets"
PLURAL_PKI_SECRET_ENGINE_CONFIG = "pkisecretengineconfigs"

# Labels
LABEL_PKI_SECRET = f"{API_GROUP}/pkisecretengineconfigs"

# Finalizers
FINALIZER = f"{API_GROUP}/finalizer"

# Field Manager
FIELD_MANAGER = "vault-config-operator"

# Controller name used in structured logs
CONTROLLER_NAME = "vault-config-operator"

# Vault defaults
DEFAULT_AUTH_PATH = "kubernetes"
DEFAULT_SERVICE_ACCOUNT = "default"
DEFAULT_USERNAME_KEY = "username"
DEFAULT_PASSWORD_KEY = "password"
DEFAULT_CERTIFICATE_KEY = "tls.crt"
DEFAULT_CRL_EXPIRY = "72h"

# TLS secret keys
TLS_CA_KEY = "ca.crt"
TLS_CERT_KEY = "tls.crt"
TLS_KEY_KEY = "tls.key"

# Condition Types
COND_READY = "Ready"
COND_VALIDATED = "Validated"
COND_SIGNED = "Signed"

# Condition Reasons
REASON_RECONCILE_SUCCESSFUL = "ReconcileSuccessful"
REASON_RECONCILE_FAILED = "ReconcileFailed"
REASON_VALIDATION_FAILED = "ValidationFailed"
REASON_VALIDATION_SUCCEEDED = "ValidationSucceeded"
REASON_CREDENTIAL_NOT_FOUND = "CredentialNotFound"
REASON_AWAITING_SIGNATURE = "AwaitingSignature"
REASON_SIGNED = "Signed"

# Event Reasons
EVENT_REASON_RECONCILE_STARTED = "ReconcileStarted"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_VALIDATE_SUCCEEDED = "ValidateSucceeded"
EVENT_REASON_VALIDATE_FAILED = "ValidateFailed"
EVENT_REASON_VAULT_CREATED = "VaultResourceCreated"
EVENT_REASON_VAULT_UPDATED = "VaultResourceUpdated"
EVENT_REASON_VAULT_DELETED = "VaultResourceDeleted"
EVENT_REASON_CA_GENERATED = "CertificateAuthorityGenerated"
EVENT_REASON_CA_SIGNED = "CertificateAuthoritySigned"
EVENT_REASON_AWAITING_SIGNATURE = "AwaitingSignature"
