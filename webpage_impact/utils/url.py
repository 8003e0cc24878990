"""
URL helpers for scheme detection, log naming and report file names.
"""

from __future__ import annotations

import re
from urllib import parse

_UNSAFE_FILE_CHARS = re.compile(r'[/\\?%*:|"<>]')


def extract_domain(url: str) -> str:
    """Extract the hostname from a URL string."""
    try:
        parsed = parse.urlparse(url)
        return parsed.hostname or "unknown"
    except ValueError:
        return "unknown"


def has_scheme(url: str, scheme: str) -> bool:
    """Return True when *url* starts with ``<scheme>:``."""
    return url.startswith(f"{scheme}:")


def escape_file_name(name: str) -> str:
    """Replace characters that are unsafe in file names with ``_``.

    Args:
        name: A candidate file name, possibly containing a URL.

    Returns:
        The name with ``/ \\ ? % * : | " < >`` replaced.
    """
    return _UNSAFE_FILE_CHARS.sub("_", name)
