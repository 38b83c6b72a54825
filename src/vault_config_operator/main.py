"""Main entry point for the Vault Config Operator."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any

import kopf

from . import handlers  # noqa: F401
from . import health
from . import logging as structured_logging
from .tracing import initialize_tracing

logger = logging.getLogger(__name__)


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, **_: Any) -> None:
    """Configure the operator."""
    # Set up structured JSON logging
    structured_logging.setup_structured_logging()

    # Use AnnotationsProgressStorage to avoid conflicts with status updates
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()

    settings.posting.level = 0
    settings.networking.request_timeout = 30.0
    settings.execution.max_workers = int(os.getenv("MAX_WORKERS", "4"))

    # Exponential backoff: 1s, 2s, 4s, 8s, 16s, 32s, 60s (max)
    settings.execution.min_retry_delay = 1.0
    settings.execution.max_retry_delay = 60.0
    settings.execution.retry_backoff = 2.0
    settings.execution.max_retries = 5
    settings.execution.backoff_jitter = 0.1

    initialize_tracing()

    # Metrics plus /healthz and /readyz on one port
    metrics_port = int(os.getenv("METRICS_PORT", "8080"))
    health.start_metrics_server(metrics_port)
    health.set_ready(True)
    logger.info(f"Operator configured, metrics served on port {metrics_port}")


@kopf.on.cleanup()
def shutdown(**_: Any) -> None:
    """Mark the operator as not ready while it stops."""
    health.set_ready(False)


def run() -> None:
    """Run the operator in the current process."""
    namespace = os.getenv("WATCH_NAMESPACE")
    asyncio.run(
        kopf.operator(
            standalone=True,
            clusterwide=not namespace,
            namespaces=[namespace] if namespace else (),
        )
    )


if __name__ == "__main__":
    run()
