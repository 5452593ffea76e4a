"""Mapper-specific exceptions."""

from typing import Any


class MapperError(Exception):
    """Base exception for mapper errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MapperConfigurationError(MapperError):
    """Raised when a mapping or schema cannot be configured.

    Covers types without any mappable property, invalid table definitions
    and unknown naming presets.
    """

    pass


class UnsupportedTypeError(MapperError):
    """Raised when a Python type has no storage column type."""

    def __init__(self, message: str, python_type: Any = None) -> None:
        super().__init__(message)
        self.python_type = python_type


class ShapeExtractionError(MapperError):
    """Raised when the shape of a target type cannot be determined."""

    def __init__(self, message: str, target: Any = None) -> None:
        super().__init__(message)
        self.target = target
