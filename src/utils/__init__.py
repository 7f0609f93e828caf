"""
Shared utilities for fixture preparation and verification

Provides:
- database_types: dialect detection and dialect-specific SQL
- sql_safety: identifier validation for generated SQL
- errors: exception hierarchy
- logging, tracing, metrics: observability
"""

__version__ = "0.3.0"
__all__ = ["database_types", "sql_safety", "errors", "logging", "tracing", "metrics"]
