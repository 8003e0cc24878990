"""
Error handling utilities for consistent, component-prefixed error messages.
"""

from __future__ import annotations

from typing import Callable


class MeasurementError(RuntimeError):
    """A measurement of one URL failed; the message is already fully formatted."""


def get_error_message(error: BaseException | object) -> str:
    """
    Safely extract an error message from an unknown error type.

    Falls back to the exception class name when the message is empty.
    """
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return "Unknown error"


def build_error_message(component: str) -> Callable[[str], str]:
    """Return a formatter that prefixes messages with *component*.

    Example:
        >>> build_error_message("WebpageImpact")("Error during measurement: boom")
        'WebpageImpact: Error during measurement: boom'
    """

    def _format(message: str) -> str:
        return f"{component}: {message}"

    return _format
