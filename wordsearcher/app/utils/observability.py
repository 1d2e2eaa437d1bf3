"""OpenTelemetry tracing setup and the tracer used around store calls."""

from __future__ import annotations

import logging

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

_logger = logging.getLogger(__name__)

_provider: TracerProvider | None = None


def parse_otlp_headers(header_str: str) -> dict[str, str]:
    """Parse ``key=value,key2=value2`` into a header dict."""
    headers: dict[str, str] = {}
    for pair in header_str.split(","):
        key, _, value = pair.partition("=")
        if key.strip():
            headers[key.strip()] = value.strip()
    return headers


def configure_tracing(
    settings,
    service_name: str,
    service_version: str | None = None,
) -> TracerProvider | None:
    """Register an OTLP tracer provider when tracing is enabled.

    Returns ``None`` when tracing is disabled or the exporter cannot be built;
    spans then go to the API's no-op tracer.
    """

    global _provider

    if _provider is not None:
        return _provider

    if not settings.TRACING_ENABLED:
        return None

    attributes = {
        "service.name": service_name,
        "deployment.environment": settings.APP_ENV,
    }
    if service_version:
        attributes["service.version"] = service_version

    provider = TracerProvider(
        resource=Resource.create(attributes),
        sampler=TraceIdRatioBased(settings.TRACING_SAMPLE_RATE),
    )

    headers = parse_otlp_headers(settings.OTEL_EXPORTER_OTLP_HEADERS)
    try:
        exporter = OTLPSpanExporter(
            endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT,
            insecure=settings.OTEL_EXPORTER_OTLP_INSECURE,
            headers=headers or None,
        )
    except Exception:  # noqa: BLE001
        _logger.exception(
            "failed_to_configure_tracing_exporter",
            extra={"endpoint": settings.OTEL_EXPORTER_OTLP_ENDPOINT},
        )
        return None

    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    _provider = provider
    return provider


def get_tracer(name: str = "wordsearcher") -> trace.Tracer:
    return trace.get_tracer(name)


__all__ = ["configure_tracing", "get_tracer", "parse_otlp_headers"]
