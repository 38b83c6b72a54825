"""Kubernetes object access for the operator."""

from __future__ import annotations

import os
import time
from typing import Any

from kubernetes import client

from .. import metrics
from ..constants import API_GROUP, API_VERSION
from ..utils.errors import RemoteTransientError, SecretConflictError
from ..utils.rate_limit import is_rate_limit_error, rate_limit_k8s
from ..utils.secrets import create_secret, read_secret_data

_TOKEN_TTL_SECONDS = int(os.getenv("SERVICE_ACCOUNT_TOKEN_TTL_SECONDS", "600"))


class ObjectStore:
    """Reads and writes the Kubernetes objects a reconciliation pass needs."""

    def __init__(self, core_api: client.CoreV1Api, custom_api: client.CustomObjectsApi) -> None:
        self.core_api = core_api
        self.custom_api = custom_api

    def _call(self, operation: str, fn: Any, *args: Any, **kwargs: Any) -> Any:
        start_time = time.time()
        try:
            result = rate_limit_k8s(fn)(*args, **kwargs)
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="success").inc()
            return result
        except client.exceptions.ApiException as e:
            result = "rate_limited" if is_rate_limit_error(e) else "error"
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result=result).inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation=operation).observe(duration)

    def read_secret(self, namespace: str, name: str) -> dict[str, str] | None:
        """Return the decoded data of a secret, None if it does not exist."""
        try:
            return self._call("read_secret", read_secret_data, self.core_api, namespace, name)
        except client.exceptions.ApiException as e:
            raise RemoteTransientError(f"unable to read secret {namespace}/{name}: {e.reason}") from e

    def create_secret(
        self,
        namespace: str,
        name: str,
        data: dict[str, str],
        owner_references: list[dict[str, Any]] | None = None,
        labels: dict[str, str] | None = None,
        immutable: bool = False,
    ) -> None:
        """Create a secret. An existing secret with the same data is left untouched.

        Raises:
            SecretConflictError: If a secret with that name holds other data
        """
        try:
            self._call(
                "create_secret",
                create_secret,
                self.core_api,
                namespace,
                name,
                data,
                owner_references=owner_references,
                labels=labels,
                immutable=immutable,
            )
        except client.exceptions.ApiException as e:
            if e.status == 409:
                self._check_existing_secret(namespace, name, data)
                return
            raise RemoteTransientError(f"unable to create secret {namespace}/{name}: {e.reason}") from e

    def _check_existing_secret(self, namespace: str, name: str, data: dict[str, str]) -> None:
        existing = self.read_secret(namespace, name)
        if existing is not None and existing != data:
            differing = sorted(k for k in set(existing) | set(data) if existing.get(k) != data.get(k))
            raise SecretConflictError(
                f"secret {namespace}/{name} already exists with different values for {', '.join(differing)}, "
                "delete it to let the operator recreate it"
            )

    def get_custom_object(self, namespace: str, plural: str, name: str) -> dict[str, Any] | None:
        """Return a custom resource of this operator's API group, None if absent."""
        try:
            return self._call(
                "get_custom_object",
                self.custom_api.get_namespaced_custom_object,
                group=API_GROUP,
                version=API_VERSION,
                namespace=namespace,
                plural=plural,
                name=name,
            )
        except client.exceptions.ApiException as e:
            if e.status == 404:
                return None
            raise RemoteTransientError(f"unable to read {plural} {namespace}/{name}: {e.reason}") from e

    def create_service_account_token(self, namespace: str, service_account: str) -> str:
        """Request a short-lived token for a service account."""
        request = client.AuthenticationV1TokenRequest(
            spec=client.V1TokenRequestSpec(audiences=[], expiration_seconds=_TOKEN_TTL_SECONDS),
        )
        try:
            response = self._call(
                "create_token",
                self.core_api.create_namespaced_service_account_token,
                name=service_account,
                namespace=namespace,
                body=request,
            )
        except client.exceptions.ApiException as e:
            raise RemoteTransientError(
                f"unable to request a token for service account {namespace}/{service_account}: {e.reason}"
            ) from e
        return response.status.token


def get_object_store() -> ObjectStore:
    """Create an ObjectStore from in-cluster or local kube config."""
    from kubernetes import config

    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()

    return ObjectStore(client.CoreV1Api(), client.CustomObjectsApi())
