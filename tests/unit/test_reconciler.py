"""Tests for the reconciliation engine."""

from __future__ import annotations

from unittest.mock import patch

from vault_config_operator.reconcilers.base import Phase, pass_lock
from vault_config_operator.resources import (
    DatabaseSecretEngineConfig,
    DatabaseSecretEngineRole,
    LDAPAuthEngineConfig,
    Policy,
    SecretEngineMount,
)
from vault_config_operator.utils.errors import (
    CredentialNotFoundError,
    RemoteTransientError,
    ValidationError,
)

POLICY_DOC = 'path "secret/*" { capabilities = ["read"] }'


class TestReconcile:
    """Test cases for the create/update/unchanged flow."""

    def test_create(self, engine, vault, connector, make_body):
        """Test an absent object is created."""
        result = engine.reconcile(Policy(make_body({"policy": POLICY_DOC}, name="reader")))

        assert result.phase is Phase.SYNCED
        assert result.action == "created"
        assert result.ready
        assert vault.writes == [("sys/policy/reader", {"policy": POLICY_DOC})]
        assert connector.logins[0][2] == "default"

    def test_unchanged(self, engine, vault, make_body):
        """Test an equivalent object is left alone."""
        vault.data["sys/policy/reader"] = {"name": "reader", "rules": POLICY_DOC}

        result = engine.reconcile(Policy(make_body({"policy": POLICY_DOC}, name="reader")))

        assert result.action == "unchanged"
        assert vault.writes == []

    @patch("vault_config_operator.reconcilers.base.metrics")
    def test_update_on_drift(self, mock_metrics, engine, vault, make_body):
        """Test a drifted object is rewritten and the drift counted."""
        vault.data["sys/policy/reader"] = {"name": "reader", "rules": "old"}

        result = engine.reconcile(Policy(make_body({"policy": POLICY_DOC}, name="reader")))

        assert result.action == "updated"
        assert vault.written_paths() == ["sys/policy/reader"]
        mock_metrics.drift_detected_total.labels.assert_called_once_with(kind="Policy")

    def test_second_pass_is_unchanged(self, engine, vault, make_body):
        """Test applying the same spec twice writes once."""
        body = make_body({"type": "rgp", "policy": POLICY_DOC}, name="reader")

        engine.reconcile(Policy(body))
        # Typed policy reads echo the name next to the document
        vault.data["sys/policies/rgp/reader"] = {"name": "reader", "policy": POLICY_DOC}
        result = engine.reconcile(Policy(body))

        assert result.action == "unchanged"
        assert vault.written_paths() == ["sys/policies/rgp/reader"]

    def test_validation_failure(self, engine, vault, connector, make_body):
        """Test an invalid spec never opens a Vault session."""
        result = engine.reconcile(DatabaseSecretEngineRole(make_body({"path": "db"}, name="app")))

        assert result.phase is Phase.UNVALIDATED
        assert isinstance(result.error, ValidationError)
        assert result.message == "DatabaseSecretEngineRole default/app: spec.dBName is required"
        assert connector.logins == []
        assert not result.ready

    def test_missing_role_is_validation_error(self, engine, make_body):
        """Test the Vault role is required to log in."""
        body = make_body({"policy": POLICY_DOC})
        body["spec"]["authentication"] = {}

        result = engine.reconcile(Policy(body))

        assert result.phase is Phase.UNVALIDATED
        assert "authentication.role is required" in result.message

    def test_invalid_connection_is_validation_error(self, engine, make_body):
        """Test malformed connection settings fail validation."""
        body = make_body({"policy": POLICY_DOC})
        body["spec"]["connection"]["timeOut"] = "soon"

        result = engine.reconcile(Policy(body))

        assert result.phase is Phase.UNVALIDATED
        assert "invalid connection settings" in result.message

    def test_login_failure(self, engine, connector, vault, make_body):
        """Test a login failure stops the pass before any write."""
        connector.error = RemoteTransientError("permission denied")

        result = engine.reconcile(Policy(make_body({"policy": POLICY_DOC}, name="reader")))

        assert result.phase is Phase.PREPARED
        assert isinstance(result.error, RemoteTransientError)
        assert result.message == "Policy default/reader: permission denied"
        assert vault.writes == []

    def test_credential_not_found(self, engine, vault, make_body):
        """Test a missing credential source stops the pass before any write."""
        body = make_body(
            {
                "path": "database",
                "pluginName": "postgresql-database-plugin",
                "rootCredentials": {"secret": {"name": "db-root"}},
            },
            name="app-db",
        )

        result = engine.reconcile(DatabaseSecretEngineConfig(body))

        assert result.phase is Phase.PREPARED
        assert isinstance(result.error, CredentialNotFoundError)
        assert vault.writes == []

    def _database_body(self, make_body, connection_url="postgresql://{{username}}:{{password}}@db:5432/app"):
        return make_body(
            {
                "path": "database",
                "pluginName": "postgresql-database-plugin",
                "connectionURL": connection_url,
                "rootRotationStatements": ["ALTER USER \"{{name}}\" WITH PASSWORD '{{password}}'"],
                "rootCredentials": {"secret": {"name": "db-root"}},
            },
            name="app-db",
        )

    def _database_read(self, connection_url="postgresql://{{username}}:{{password}}@db:5432/app"):
        return {
            "plugin_name": "postgresql-database-plugin",
            "plugin_version": "",
            "allowed_roles": [],
            "password_policy": "",
            "root_credentials_rotate_statements": ["ALTER USER \"{{name}}\" WITH PASSWORD '{{password}}'"],
            "verify_connection": True,
            "connection_details": {
                "connection_url": connection_url,
                "username": "root",
                "max_open_connections": 4,
                "max_connection_lifetime": "0s",
            },
        }

    def test_database_config_with_resolved_credentials(self, engine, vault, object_store, make_body):
        """Test root credentials are resolved into the written payload and a read back is in sync."""
        object_store.secrets[("default", "db-root")] = {"username": "root", "password": "s3cret"}

        first = engine.reconcile(DatabaseSecretEngineConfig(self._database_body(make_body)))
        written = dict(vault.writes[0][1])
        vault.data["database/config/app-db"] = self._database_read()
        second = engine.reconcile(DatabaseSecretEngineConfig(self._database_body(make_body)))

        assert first.action == "created"
        assert written["username"] == "root"
        assert written["password"] == "s3cret"
        assert written["root_rotation_statements"] == ["ALTER USER \"{{name}}\" WITH PASSWORD '{{password}}'"]
        assert second.action == "unchanged"
        assert len(vault.writes) == 1

    def test_database_config_connection_drift(self, engine, vault, object_store, make_body):
        """Test a changed connection URL nested in connection_details is rewritten."""
        object_store.secrets[("default", "db-root")] = {"username": "root", "password": "s3cret"}
        vault.data["database/config/app-db"] = self._database_read("postgresql://old-db:5432/app")

        result = engine.reconcile(DatabaseSecretEngineConfig(self._database_body(make_body)))

        assert result.action == "updated"
        assert vault.writes[0][1]["connection_url"] == "postgresql://{{username}}:{{password}}@db:5432/app"

    def test_database_role_ttls_read_back_in_seconds(self, engine, vault, make_body):
        """Test role TTLs given as durations match the seconds Vault reports."""
        body = make_body(
            {
                "path": "database",
                "dBName": "app-db",
                "defaultTTL": "1h",
                "maxTTL": "24h",
                "creationStatements": ["CREATE ROLE \"{{name}}\""],
            },
            name="app-reader",
        )
        vault.data["database/roles/app-reader"] = {
            "db_name": "app-db",
            "default_ttl": 3600,
            "max_ttl": 86400,
            "creation_statements": ["CREATE ROLE \"{{name}}\""],
            "revocation_statements": [],
            "rollback_statements": [],
            "renew_statements": [],
            "credential_type": "password",
            "credential_config": {},
        }

        result = engine.reconcile(DatabaseSecretEngineRole(body))

        assert result.action == "unchanged"
        assert vault.writes == []

    def test_ldap_config_ignores_vault_defaults(self, engine, vault, make_body):
        """Test fields Vault fills in on its own do not count as drift."""
        body = make_body({"path": "ldap", "url": "ldaps://ldap.example", "tokenTtl": "1h"})

        engine.reconcile(LDAPAuthEngineConfig(body))
        written = dict(vault.writes[0][1])
        vault.data["auth/ldap/config"] = {
            **written,
            "token_ttl": 3600,
            "connection_timeout": 30,
            "dereference_aliases": "never",
            "max_page_size": 0,
            "use_token_groups": False,
            "request_timeout": 90,
        }
        second = engine.reconcile(LDAPAuthEngineConfig(body))

        assert second.action == "unchanged"
        assert len(vault.writes) == 1

    def test_ldap_anonymous_bind(self, engine, vault, make_body):
        """Test LDAP config without bind credentials is written without bind keys."""
        body = make_body({"path": "ldap", "url": "ldaps://ldap.example"})

        result = engine.reconcile(LDAPAuthEngineConfig(body))

        assert result.action == "created"
        path, payload = vault.writes[0]
        assert path == "auth/ldap/config"
        assert "bindpass" not in payload


class TestMountReconcile:
    """Test cases for secret engine mounts."""

    def _body(self, make_body, config=None):
        spec = {"type": "kv", "path": "team", "options": {"version": "2"}}
        if config is not None:
            spec["config"] = config
        return make_body(spec, name="kv")

    def test_create_enables_mount(self, engine, vault, make_body):
        """Test an absent mount is enabled with its config."""
        result = engine.reconcile(SecretEngineMount(self._body(make_body, {"maxLeaseTTL": "24h"})))

        assert result.action == "created"
        path, payload = vault.writes[0]
        assert path == "sys/mounts/team/kv"
        assert payload["type"] == "kv"
        assert payload["config"]["max_lease_ttl"] == "24h"

    def test_ttls_compared_in_seconds(self, engine, vault, make_body):
        """Test a duration string matches the seconds Vault reports."""
        vault.data["sys/mounts"] = {"team/kv/": {"type": "kv", "accessor": "kv_1234"}}
        vault.data["sys/mounts/team/kv/tune"] = {
            "default_lease_ttl": 2764800,
            "max_lease_ttl": 86400,
            "force_no_cache": False,
            "description": "",
        }

        result = engine.reconcile(SecretEngineMount(self._body(make_body, {"maxLeaseTTL": "24h"})))

        assert result.action == "unchanged"
        assert result.status["accessor"] == "kv_1234"
        assert vault.writes == []

    def test_drift_tunes_mount(self, engine, vault, make_body):
        """Test a changed TTL is applied through the tune endpoint."""
        vault.data["sys/mounts"] = {"team/kv/": {"type": "kv", "accessor": "kv_1234"}}
        vault.data["sys/mounts/team/kv/tune"] = {"max_lease_ttl": 3600, "force_no_cache": False}

        result = engine.reconcile(SecretEngineMount(self._body(make_body, {"maxLeaseTTL": "24h"})))

        assert result.action == "updated"
        assert vault.written_paths() == ["sys/mounts/team/kv/tune"]

    def test_invalid_ttl(self, engine, make_body):
        """Test an unparseable TTL fails validation."""
        result = engine.reconcile(SecretEngineMount(self._body(make_body, {"defaultLeaseTTL": "1 day"})))

        assert result.phase is Phase.UNVALIDATED
        assert "spec.config.defaultLeaseTTL" in result.message


class TestDelete:
    """Test cases for deletion."""

    def test_delete(self, engine, vault, make_body):
        """Test the object is deleted from Vault."""
        result = engine.delete(Policy(make_body({"policy": POLICY_DOC}, name="reader")))

        assert result.phase is Phase.DELETED
        assert result.action == "deleted"
        assert vault.deletes == ["sys/policy/reader"]

    def test_delete_mount_disables_it(self, engine, vault, make_body):
        """Test deleting a mount disables it at its sys/mounts path."""
        engine.delete(SecretEngineMount(make_body({"type": "kv", "path": "team"}, name="kv")))

        assert vault.deletes == ["sys/mounts/team/kv"]

    def test_non_deletable_kind_skipped(self, engine, vault, connector, make_body):
        """Test kinds the operator does not own in Vault are released untouched."""
        result = engine.delete(LDAPAuthEngineConfig(make_body({"path": "ldap", "url": "ldaps://ldap"})))

        assert result.phase is Phase.DELETED
        assert result.action == "skipped"
        assert connector.logins == []
        assert vault.deletes == []

    def test_delete_without_usable_connection(self, engine, connector, make_body):
        """Test a resource that can never log in is released without deleting."""
        body = make_body({"policy": POLICY_DOC})
        body["spec"]["authentication"] = {}

        result = engine.delete(Policy(body))

        assert result.phase is Phase.DELETED
        assert result.action == "skipped"
        assert connector.logins == []

    def test_delete_failure(self, engine, vault, make_body):
        """Test a failed delete stays in the deleting phase."""
        vault.errors["sys/policy/reader"] = RemoteTransientError("vault sealed")

        result = engine.delete(Policy(make_body({"policy": POLICY_DOC}, name="reader")))

        assert result.phase is Phase.DELETING
        assert result.message == "Policy default/reader: vault sealed"
        assert not result.ready


class TestPassLock:
    """Test cases for per-object pass serialisation."""

    def test_same_object_shares_lock(self, make_body):
        """Test two views of one object share a lock and other objects do not."""
        first = Policy(make_body({"policy": POLICY_DOC}, name="reader"))
        second = Policy(make_body({"policy": POLICY_DOC}, name="reader"))
        other = Policy(make_body({"policy": POLICY_DOC}, name="writer"))

        assert pass_lock(first) is pass_lock(second)
        assert pass_lock(first) is not pass_lock(other)

    def test_lock_held_during_pass(self, engine, vault, make_body):
        """Test the object's lock is held while Vault is written."""
        resource = Policy(make_body({"policy": POLICY_DOC}, name="locked"))
        held = []
        write = vault.write

        def recording_write(path, payload):
            held.append(pass_lock(resource).locked())
            return write(path, payload)

        vault.write = recording_write
        engine.reconcile(resource)

        assert held == [True]
        assert not pass_lock(resource).locked()

    def test_lock_dropped_after_delete(self, engine, make_body):
        """Test a deleted object's lock is forgotten."""
        resource = Policy(make_body({"policy": POLICY_DOC}, name="gone"))
        before = pass_lock(resource)

        engine.delete(resource)

        assert pass_lock(resource) is not before
