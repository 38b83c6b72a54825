"""Tests for Kubernetes secrets utilities."""

from __future__ import annotations

import base64
from unittest.mock import Mock

import pytest
from kubernetes import client

from vault_config_operator.utils.secrets import (
    create_secret,
    decode_secret_data,
    owner_reference,
    read_secret_data,
)


def _b64(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("utf-8")


class TestReadSecretData:
    """Test cases for read_secret_data function."""

    def test_read_secret_data_success(self):
        """Test successfully reading all secret data."""
        mock_api = Mock()
        mock_secret = Mock()
        mock_secret.data = {"username": _b64("admin"), "password": _b64("s3cret")}
        mock_api.read_namespaced_secret.return_value = mock_secret

        result = read_secret_data(mock_api, "default", "db-creds")

        assert result == {"username": "admin", "password": "s3cret"}
        mock_api.read_namespaced_secret.assert_called_once_with(name="db-creds", namespace="default")

    def test_read_secret_data_bytes_values(self):
        """Test reading secret data with bytes values."""
        mock_api = Mock()
        mock_secret = Mock()
        mock_secret.data = {"key1": b"value1"}
        mock_api.read_namespaced_secret.return_value = mock_secret

        assert read_secret_data(mock_api, "default", "test-secret") == {"key1": "value1"}

    def test_read_secret_data_empty(self):
        """Test reading empty secret data."""
        mock_api = Mock()
        mock_secret = Mock()
        mock_secret.data = None
        mock_api.read_namespaced_secret.return_value = mock_secret

        assert read_secret_data(mock_api, "default", "test-secret") == {}

    def test_read_secret_data_not_found(self):
        """Test that a missing secret reads as None."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.side_effect = client.exceptions.ApiException(status=404)

        assert read_secret_data(mock_api, "default", "test-secret") is None

    def test_read_secret_data_api_error(self):
        """Test that other API errors propagate."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.side_effect = client.exceptions.ApiException(status=500)

        with pytest.raises(client.exceptions.ApiException):
            read_secret_data(mock_api, "default", "test-secret")


class TestDecodeSecretData:
    """Test cases for decode_secret_data function."""

    def test_plain_string_kept(self):
        """Test a value that is not base64 is returned as-is."""
        secret = Mock()
        secret.data = {"tls.crt": "plain-value!@#"}

        assert decode_secret_data(secret) == {"tls.crt": "plain-value!@#"}


class TestCreateSecret:
    """Test cases for create_secret function."""

    def test_create_secret_success(self):
        """Test successfully creating a secret."""
        mock_api = Mock()

        create_secret(mock_api, "default", "root-ca", {"certificate": "PEM"})

        call_args = mock_api.create_namespaced_secret.call_args
        assert call_args[1]["namespace"] == "default"
        assert call_args[1]["field_manager"] == "vault-config-operator"
        secret = call_args[1]["body"]
        assert secret.metadata.name == "root-ca"
        assert secret.type == "Opaque"
        assert secret.immutable is False
        assert secret.data["certificate"] == _b64("PEM")

    def test_create_immutable_secret_with_labels_and_owner(self):
        """Test creating an immutable owned secret."""
        mock_api = Mock()
        body = {
            "apiVersion": "redhatcop.redhat.io/v1alpha1",
            "kind": "PKISecretEngineConfig",
            "metadata": {"name": "root-ca", "namespace": "default", "uid": "1234"},
        }
        owner_refs = [owner_reference(body)]

        create_secret(
            mock_api,
            "default",
            "root-ca",
            {"csr": "CSR"},
            owner_references=owner_refs,
            labels={"app": "ca"},
            immutable=True,
        )

        secret = mock_api.create_namespaced_secret.call_args[1]["body"]
        serialized = client.ApiClient().sanitize_for_serialization(secret)
        assert serialized["metadata"]["ownerReferences"] == owner_refs
        assert secret.metadata.labels == {"app": "ca"}
        assert secret.immutable is True


class TestOwnerReference:
    """Test cases for owner_reference function."""

    def test_owner_reference(self):
        """Test the owner reference points at the custom resource."""
        body = {
            "apiVersion": "redhatcop.redhat.io/v1alpha1",
            "kind": "PKISecretEngineConfig",
            "metadata": {"name": "root-ca", "uid": "1234"},
        }

        ref = owner_reference(body)

        assert ref == {
            "apiVersion": "redhatcop.redhat.io/v1alpha1",
            "kind": "PKISecretEngineConfig",
            "name": "root-ca",
            "uid": "1234",
            "controller": True,
            "blockOwnerDeletion": True,
        }
