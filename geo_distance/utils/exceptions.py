"""
Custom exception hierarchy for geo-distance.

All custom exceptions inherit from GeoDistanceError for easy catching.
Setup failures (ConfigurationError) and per-query failures
(InvalidArgumentError) are separate classes so callers can branch on them
without inspecting messages.
"""
from typing import Any, Optional


class GeoDistanceError(Exception):
    """Base exception for all geo-distance errors."""
    pass


class ConfigurationError(GeoDistanceError):
    """Fatal setup-time errors.

    Raised when a table binding cannot be created: unsupported database
    dialect, or latitude/longitude column missing from the table schema.
    Not retryable for that binding.

    Attributes:
        table: Name of the table being bound, if known
        details: Dictionary with error details

    Example:
        >>> raise ConfigurationError("Only MySQL and Postgres are supported", table="foo")
    """

    def __init__(self, message: str, table: Optional[str] = None, details: dict = None):
        super().__init__(message)
        self.table = table
        self.details = details or {}

    def __str__(self):
        base = super().__str__()
        if self.table:
            return f"{base} (table={self.table})"
        return base


class InvalidArgumentError(GeoDistanceError, ValueError):
    """Per-query validation errors.

    Raised before any SQL is built when caller supplied options are missing
    or out of range. The caller may correct the input and retry.

    Attributes:
        parameter: Name of the offending option
        value: The rejected value

    Example:
        >>> raise InvalidArgumentError("latitude out of range or missing", parameter="latitude", value=91)
    """

    def __init__(self, message: str, parameter: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.parameter = parameter
        self.value = value


class QueryBuildError(GeoDistanceError):
    """Raised when a queryable source receives conflicting instructions."""
    pass
