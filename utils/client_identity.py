"""Client identification for quota accounting.

The key is taken from a forwarding header set by the fronting proxy. That header
is caller-controlled when no proxy rewrites it, so the key is a best-effort abuse
deterrent and never an authentication mechanism.
"""

from typing import Optional

from fastapi import Request

UNKNOWN_CLIENT = "unknown"


def first_forwarded_address(header_value: Optional[str]) -> Optional[str]:
    """Return the left-most address of a comma-separated forwarding header."""
    if not header_value:
        return None
    first = header_value.split(",", 1)[0].strip()
    return first or None


def client_key_from_request(request: Request, header: str = "X-Forwarded-For") -> str:
    """Derive the quota key for a request.

    Order: first value of the trusted forwarding header, then the socket peer
    address, then a shared fallback key.
    """
    forwarded = first_forwarded_address(request.headers.get(header))
    if forwarded:
        return forwarded
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT
