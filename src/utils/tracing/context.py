"""
Span context managers and helpers for the current span.
"""

from contextlib import contextmanager

from opentelemetry import trace

from .tracer import get_tracer


@contextmanager
def trace_operation(
    operation_name: str,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
    **attributes,
):
    """
    Run a block inside a new span.

    Attribute values are stringified. An exception escaping the block is
    recorded on the span and re-raised.

    Args:
        operation_name: Span name
        kind: Span kind
        **attributes: Attributes set on the span

    Yields:
        The active span

    Example:
        >>> with trace_operation("fixture.execute", operation="INSERT") as span:
        ...     span.set_attribute("tables", "3")
    """
    tracer = get_tracer()

    with tracer.start_as_current_span(
        operation_name,
        kind=kind,
        record_exception=False,
    ) as span:
        for key, value in attributes.items():
            span.set_attribute(key, str(value))

        try:
            yield span
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            span.record_exception(e)
            raise


def add_span_attributes(**attributes) -> None:
    """Set attributes on the current span, if one is recording."""
    current_span = trace.get_current_span()
    if current_span.is_recording():
        for key, value in attributes.items():
            current_span.set_attribute(key, str(value))


def add_span_event(name: str, **attributes) -> None:
    """Add an event to the current span, if one is recording."""
    current_span = trace.get_current_span()
    if current_span.is_recording():
        current_span.add_event(name, attributes={k: str(v) for k, v in attributes.items()})
