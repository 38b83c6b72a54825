"""hvac backed Vault client implementation."""

from __future__ import annotations

import logging
import os
import tempfile
import time
from typing import Any

import hvac
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ... import metrics
from ...constants import TLS_CA_KEY, TLS_CERT_KEY, TLS_KEY_KEY
from ...models.connection import AuthConfig, ConnectionConfig
from ...utils.errors import CredentialNotFoundError, RemoteNotFoundError, RemoteTransientError
from ...utils.rate_limit import rate_limit_vault
from ..kube import ObjectStore

logger = logging.getLogger(__name__)

_VAULT_ERRORS = (hvac.exceptions.VaultError, requests.exceptions.RequestException)


class VaultClient:
    """Logical Vault operations over an authenticated hvac client."""

    def __init__(self, client: hvac.Client) -> None:
        self.client = client

    def _call(self, operation: str, path: str, fn: Any, *args: Any, **kwargs: Any) -> Any:
        start_time = time.time()
        try:
            result = rate_limit_vault(fn)(*args, **kwargs)
            metrics.vault_operations_total.labels(operation=operation, result="success").inc()
            return result
        except hvac.exceptions.InvalidPath as e:
            metrics.vault_operations_total.labels(operation=operation, result="not_found").inc()
            raise RemoteNotFoundError(f"nothing found at {path}") from e
        except _VAULT_ERRORS as e:
            metrics.vault_operations_total.labels(operation=operation, result="error").inc()
            raise RemoteTransientError(f"Vault {operation} at {path} failed: {e}") from e
        finally:
            duration = time.time() - start_time
            metrics.vault_operation_duration_seconds.labels(operation=operation).observe(duration)

    def read(self, path: str) -> dict[str, Any] | None:
        """Read the data at a path.

        Returns:
            The ``data`` section of the response, or None when nothing exists
        """
        try:
            response = self._call("read", path, self.client.read, path)
        except RemoteNotFoundError:
            return None
        if not response:
            return None
        return response.get("data")

    def write(self, path: str, payload: dict[str, Any]) -> dict[str, Any] | None:
        """Write a payload to a path and return the response data, if any."""
        response = self._call("write", path, self.client.write_data, path, data=payload)
        if isinstance(response, dict):
            return response.get("data")
        return None

    def delete(self, path: str) -> None:
        """Delete the object at a path, tolerating a missing object."""
        try:
            self._call("delete", path, self.client.delete, path)
        except RemoteNotFoundError:
            logger.debug(f"Nothing to delete at {path}")

    def list(self, path: str) -> list[str]:
        """List the keys under a path."""
        try:
            response = self._call("list", path, self.client.list, path)
        except RemoteNotFoundError:
            return []
        if not response:
            return []
        return list(response.get("data", {}).get("keys", []))


class VaultConnector:
    """Builds authenticated Vault clients with the Kubernetes auth method."""

    def __init__(self, object_store: ObjectStore) -> None:
        self.object_store = object_store
        self._tls_dirs: dict[tuple[str, str], str] = {}

    def _materialize_tls(self, namespace: str, secret_name: str) -> dict[str, str]:
        data = self.object_store.read_secret(namespace, secret_name)
        if data is None:
            raise CredentialNotFoundError(f"TLS secret {namespace}/{secret_name} not found")

        directory = self._tls_dirs.get((namespace, secret_name))
        if directory is None:
            directory = tempfile.mkdtemp(prefix="vault-tls-")
            self._tls_dirs[(namespace, secret_name)] = directory

        files = {}
        for key in (TLS_CA_KEY, TLS_CERT_KEY, TLS_KEY_KEY):
            if key in data:
                file_path = os.path.join(directory, key)
                with open(file_path, "w") as handle:
                    handle.write(data[key])
                os.chmod(file_path, 0o600)
                files[key] = file_path
        return files

    def _session(self, connection: ConnectionConfig) -> requests.Session:
        session = requests.Session()
        retries = Retry(
            total=connection.max_retries,
            backoff_factor=0.5,
            status_forcelist=(500, 502, 503, 504),
            allowed_methods=None,
        )
        adapter = HTTPAdapter(max_retries=retries)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def build_client(self, connection: ConnectionConfig, auth: AuthConfig, namespace: str) -> hvac.Client:
        """Create an unauthenticated hvac client for a connection."""
        verify: bool | str = True
        cert = None
        if connection.tls.skip_verify:
            verify = False
        elif connection.tls.ca_cert:
            verify = connection.tls.ca_cert

        if connection.tls.tls_secret:
            files = self._materialize_tls(namespace, connection.tls.tls_secret)
            if TLS_CA_KEY in files and not connection.tls.skip_verify:
                verify = files[TLS_CA_KEY]
            if TLS_CERT_KEY in files and TLS_KEY_KEY in files:
                cert = (files[TLS_CERT_KEY], files[TLS_KEY_KEY])

        return hvac.Client(
            url=connection.address,
            namespace=auth.namespace,
            verify=verify,
            cert=cert,
            timeout=connection.timeout,
            session=self._session(connection),
        )

    def login(self, connection: ConnectionConfig, auth: AuthConfig, namespace: str) -> VaultClient:
        """Log in with a fresh service account token and return a ready client.

        Raises:
            RemoteTransientError: If the token request or the login fails
        """
        jwt = self.object_store.create_service_account_token(namespace, auth.service_account)
        client = self.build_client(connection, auth, namespace)
        try:
            client.auth.kubernetes.login(role=auth.role, jwt=jwt, mount_point=auth.login_path)
        except _VAULT_ERRORS as e:
            raise RemoteTransientError(
                f"Vault login at auth/{auth.login_path}/login with role {auth.role} failed: {e}"
            ) from e
        logger.debug(f"Logged in to {connection.address} with role {auth.role}")
        return VaultClient(client)
