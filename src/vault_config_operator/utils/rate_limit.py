"""Rate limiting utilities for API calls."""

from __future__ import annotations

import os
import threading
import time
from functools import wraps
from typing import Any, Callable, TypeVar

from kubernetes.client.exceptions import ApiException

_F = TypeVar("_F", bound=Callable[..., Any])

# Rate limit configuration
_K8S_RATE_LIMIT_PER_SECOND = float(os.getenv("K8S_RATE_LIMIT_PER_SECOND", "10.0"))
_VAULT_RATE_LIMIT_PER_SECOND = float(os.getenv("VAULT_RATE_LIMIT_PER_SECOND", "20.0"))


class _Throttle:
    """Minimum-interval limiter shared by every caller of one API."""

    def __init__(self, per_second: float) -> None:
        self.min_interval = 1.0 / per_second
        self.last_call_time = 0.0
        self._lock = threading.Lock()

    def wait(self) -> None:
        with self._lock:
            elapsed = time.time() - self.last_call_time
            if elapsed < self.min_interval:
                time.sleep(self.min_interval - elapsed)
            self.last_call_time = time.time()


_k8s_throttle = _Throttle(_K8S_RATE_LIMIT_PER_SECOND)
_vault_throttle = _Throttle(_VAULT_RATE_LIMIT_PER_SECOND)


def rate_limit_k8s(func: _F) -> _F:
    """Decorator to rate limit Kubernetes API calls.

    Operator worker threads share one limiter so the API server never sees
    more than ``K8S_RATE_LIMIT_PER_SECOND`` calls from this process.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        _k8s_throttle.wait()
        return func(*args, **kwargs)

    return wrapper  # type: ignore


def rate_limit_vault(func: _F) -> _F:
    """Decorator to rate limit Vault API calls."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        _vault_throttle.wait()
        return func(*args, **kwargs)

    return wrapper  # type: ignore


def is_rate_limit_error(e: Exception) -> bool:
    """Check if a Kubernetes API exception is a rate limit error."""
    if not isinstance(e, ApiException):
        return False
    return e.status == 429 or (e.status == 503 and "rate limit" in str(e).lower())
