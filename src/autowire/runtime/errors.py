"""
Exception hierarchy for the autowire runtime.
"""

from __future__ import annotations

from typing import Any


def type_name(value: Any) -> str:
    """Readable name for a type hint or key."""
    if value is None:
        return "None"
    return getattr(value, "__qualname__", None) or getattr(value, "__name__", None) or str(value)


class ContainerError(Exception):
    """Base class for all errors raised by the container."""


class BindingError(ContainerError):
    """Raised when a concrete value cannot be classified into a binding."""


class BindingResolutionError(ContainerError):
    """Raised when a binding fails to produce a value of the requested type."""

    def __init__(self, message: str, key: Any = None):
        super().__init__(message)
        self.key = key


class ArgumentTypeError(ContainerError, TypeError):
    """Raised when a caller-supplied argument conflicts with the declared parameter type."""

    def __init__(self, parameter: str, expected: Any, actual: Any):
        super().__init__(
            f"Argument provided for {parameter} has incorrect type. "
            f"Expected {type_name(expected)} got {type_name(actual)}"
        )
        self.parameter = parameter
        self.expected = expected
        self.actual = actual


class UnresolvableArgumentError(ContainerError, ValueError):
    """Raised when no source can satisfy a required parameter."""

    def __init__(self, parameter: str, expected: Any):
        super().__init__(f"Unable to resolve argument {parameter} of type {type_name(expected)}")
        self.parameter = parameter
        self.expected = expected


class IntrospectionError(ContainerError):
    """Raised by a reflector when a type or callable cannot be reflected on."""
