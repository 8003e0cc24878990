"""Shared serialization helpers for camelCase conversion.

Provides the ``snake_to_camel`` alias generator used by the Pydantic
model configs and the SSE event payloads.
"""

from __future__ import annotations


def snake_to_camel(name: str) -> str:
    """Convert a snake_case string to camelCase.

    Args:
        name: A snake_case identifier such as
            ``"transfer_size"``.

    Returns:
        The camelCase equivalent, e.g. ``"transferSize"``.
    """
    parts = name.split("_")
    return parts[0] + "".join(w.capitalize() for w in parts[1:])
