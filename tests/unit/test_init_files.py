"""
Unit tests for __init__.py files

Ensures the version attribute is defined, every name in ``__all__`` exists
and the packages import without errors.
"""

import importlib

import pytest

PACKAGES = [
    "src.dataset",
    "src.binding",
    "src.ordering",
    "src.operation",
    "src.assertion",
    "src.utils.logging",
    "src.utils.tracing",
    "src.utils.metrics",
]


class TestUtilsInit:
    """Test src/utils/__init__.py"""

    def test_version_attribute_exists(self):
        import src.utils

        assert isinstance(src.utils.__version__, str)
        assert src.utils.__version__ == "0.3.0"


class TestPackageExports:
    """Test __all__ of every public package"""

    @pytest.mark.parametrize("package", PACKAGES)
    def test_all_names_resolve(self, package):
        module = importlib.import_module(package)

        assert isinstance(module.__all__, list)
        for name in module.__all__:
            assert hasattr(module, name), f"{package} exports missing name {name}"

    def test_facades_are_callable(self):
        from src.assertion import compare
        from src.binding import bind
        from src.operation import execute
        from src.ordering import resolve_order

        assert all(callable(f) for f in (compare, bind, execute, resolve_order))
