"""
Predicates that decide whether a response counts as real network traffic.

Scheme list follows Lighthouse's url-utils ``NON_NETWORK_SCHEMES``.
"""

from __future__ import annotations

from webpage_impact.utils import url as url_mod

NON_NETWORK_SCHEMES = (
    "blob",  # in-memory object URLs (URL.createObjectURL)
    "data",  # inline data URIs
    "intent",  # Android intent links
    "file",
    "filesystem",
    "chrome-extension",
)

NO_BODY_STATUSES = frozenset({204, 304})


def is_from_non_network_request(request_url: str) -> bool:
    """Return True when the originating request URL uses a non-network scheme."""
    return any(url_mod.has_scheme(request_url, scheme) for scheme in NON_NETWORK_SCHEMES)


def has_no_response_body(status: int, method: str) -> bool:
    """Return True for 204/304 responses to anything but an OPTIONS request.

    Only consulted when ``skip_bodyless_responses`` is enabled; by
    default these responses are kept and counted.
    """
    return status in NO_BODY_STATUSES and method.upper() != "OPTIONS"
