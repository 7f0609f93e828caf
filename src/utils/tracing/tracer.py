"""
Tracer initialization for OpenTelemetry.

Exporters are opt-in: OTLP when an endpoint is given or
OTEL_EXPORTER_OTLP_ENDPOINT is set, console when requested or TRACE_CONSOLE
is true. Without either, spans are created by the SDK and dropped.
"""

import logging
import os

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

logger = logging.getLogger(__name__)

_tracer: trace.Tracer | None = None
_provider: TracerProvider | None = None


def initialize_tracing(
    service_name: str = "db-fixture-sync",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
    sampling_rate: float = 1.0,
) -> trace.Tracer:
    """
    Initialize tracing with OpenTelemetry.

    Args:
        service_name: Service name reported on every span
        otlp_endpoint: OTLP collector endpoint (e.g. "localhost:4317")
        console_export: Also print finished spans to stdout
        sampling_rate: Fraction of traces to keep, 0.0 to 1.0

    Returns:
        Configured tracer instance
    """
    global _tracer, _provider

    if _tracer is not None:
        logger.debug("Tracing already initialized, returning existing tracer")
        return _tracer

    provider = TracerProvider(
        resource=Resource(attributes={SERVICE_NAME: service_name}),
        sampler=TraceIdRatioBased(sampling_rate),
    )

    exporters = []

    otlp_endpoint = otlp_endpoint or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
        exporters.append("OTLP")

    if console_export or os.getenv("TRACE_CONSOLE", "").lower() == "true":
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        exporters.append("Console")

    _provider = provider
    _tracer = provider.get_tracer(service_name)

    logger.debug(
        f"Tracing initialized: {service_name} "
        f"(exporters: {', '.join(exporters) or 'none'}, sampling: {sampling_rate})"
    )

    return _tracer


def get_tracer() -> trace.Tracer:
    """
    Get the module tracer, initializing it with defaults on first use.

    Returns:
        Configured tracer instance
    """
    if _tracer is None:
        return initialize_tracing()
    return _tracer


def shutdown_tracing() -> None:
    """Flush pending spans and forget the tracer."""
    global _tracer, _provider

    if _provider is not None:
        _provider.shutdown()
        logger.debug("Tracing shutdown complete")

    _tracer = None
    _provider = None
