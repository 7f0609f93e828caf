"""Unit tests for Prometheus metric registration helpers."""

import pytest
from prometheus_client import CollectorRegistry, Counter, Histogram

from src.utils.metrics import get_or_create_metric


class TestGetOrCreateMetric:
    """Test idempotent metric registration."""

    def setup_method(self):
        self.registry = CollectorRegistry()

    def test_creates_metric(self):
        counter = get_or_create_metric(
            lambda: Counter("fixture_runs_total", "Runs", registry=self.registry),
            "fixture_runs_total",
            self.registry,
        )

        counter.inc()

        assert self.registry.get_sample_value("fixture_runs_total") == 1.0

    def test_second_registration_returns_existing_counter(self):
        def factory():
            return Counter("fixture_runs_total", "Runs", ["status"], registry=self.registry)

        first = get_or_create_metric(factory, "fixture_runs_total", self.registry)
        second = get_or_create_metric(factory, "fixture_runs_total", self.registry)

        assert second is first

    def test_counter_found_without_total_suffix(self):
        def factory():
            return Counter("fixture_rows", "Rows", registry=self.registry)

        first = get_or_create_metric(factory, "fixture_rows", self.registry)

        assert get_or_create_metric(factory, "fixture_rows_total", self.registry) is first

    def test_histogram_reused(self):
        def factory():
            return Histogram("fixture_seconds", "Duration", registry=self.registry)

        first = get_or_create_metric(factory, "fixture_seconds", self.registry)

        assert get_or_create_metric(factory, "fixture_seconds", self.registry) is first

    def test_unrelated_value_error_propagates(self):
        def factory():
            raise ValueError("bad label name")

        with pytest.raises(ValueError, match="bad label name"):
            get_or_create_metric(factory, "fixture_missing", self.registry)

    def test_module_metrics_registered(self):
        from prometheus_client import REGISTRY

        import src.operation.executor  # noqa: F401

        assert "dbfixture_operations_total" in REGISTRY._names_to_collectors
        assert "dbfixture_operation_duration_seconds" in REGISTRY._names_to_collectors
