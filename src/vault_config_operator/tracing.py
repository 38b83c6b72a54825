"""OpenTelemetry tracing for reconciliation passes.

Tracing is off unless ``OTEL_TRACES_ENABLED=true``; until then every span
helper is a no-op so callers never need to check.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, Tracer

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "vault-config-operator"
DEFAULT_OTLP_ENDPOINT = "http://localhost:4317"

_tracer: Tracer | None = None


def tracing_enabled() -> bool:
    return os.getenv("OTEL_TRACES_ENABLED", "false").lower() == "true"


def _build_provider(service_name: str) -> TracerProvider:
    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": os.getenv("OTEL_SERVICE_VERSION", "unknown"),
        }
    )
    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", DEFAULT_OTLP_ENDPOINT))
    provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider


def initialize_tracing() -> None:
    """Install the OTLP tracer provider when tracing is enabled.

    Environment Variables:
        OTEL_TRACES_ENABLED: Turn tracing on (default: false)
        OTEL_SERVICE_NAME: Service name (default: vault-config-operator)
        OTEL_SERVICE_VERSION: Service version attribute (default: unknown)
        OTEL_EXPORTER_OTLP_ENDPOINT: Collector endpoint (default: http://localhost:4317)
    """
    global _tracer

    if not tracing_enabled():
        logger.debug("Tracing disabled")
        return

    service_name = os.getenv("OTEL_SERVICE_NAME", DEFAULT_SERVICE_NAME)
    try:
        trace.set_tracer_provider(_build_provider(service_name))
    except Exception as e:
        # The operator keeps reconciling without traces
        logger.warning(f"Failed to initialize tracing: {e}")
        return
    _tracer = trace.get_tracer(service_name)
    logger.info(f"Tracing enabled for {service_name}")


@contextmanager
def trace_span(
    name: str,
    kind: str | None = None,
    attributes: dict[str, Any] | None = None,
) -> Iterator[Span | None]:
    """Run the block inside a span named ``vault.<name>``.

    Args:
        name: Step name, e.g. "reconcile" or "pki_sign"
        kind: Resource kind recorded as ``resource.kind``
        attributes: Additional span attributes

    Yields:
        The span, or None while tracing is disabled
    """
    if _tracer is None:
        yield None
        return

    span_attributes = dict(attributes or {})
    if kind:
        span_attributes["resource.kind"] = kind

    with _tracer.start_as_current_span(f"vault.{name}", attributes=span_attributes) as span:
        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
            raise


def add_span_attribute(key: str, value: Any) -> None:
    """Set an attribute on the current span, if one is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attribute(key, value)
