"""
OpenTelemetry tracing for fixture operations.

Spans wrap each fixture operation, each generated statement and each
verification run. Tracing is a no-op until an exporter is configured.
"""

from .context import add_span_attributes, add_span_event, trace_operation
from .database import trace_database_query
from .tracer import get_tracer, initialize_tracing, shutdown_tracing

__all__ = [
    "initialize_tracing",
    "get_tracer",
    "shutdown_tracing",
    "trace_operation",
    "add_span_attributes",
    "add_span_event",
    "trace_database_query",
]
