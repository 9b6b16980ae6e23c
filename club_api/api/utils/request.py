"""Client details recorded with login sessions."""
from typing import Optional, Tuple
from fastapi import Request

# Width of sessions.ip_address (fits IPv6)
_MAX_IP_LENGTH = 45


def client_ip(request: Request) -> Optional[str]:
    """Address of the connected client, or None when the server cannot tell."""
    if not request.client or not request.client.host:
        return None
    return request.client.host[:_MAX_IP_LENGTH]


def extract_client_metadata(request: Request) -> Tuple[Optional[str], Optional[str]]:
    """
    Client address and user agent for a new session.

    Returns:
        Tuple of (ip_address, user_agent)
    """
    return client_ip(request), request.headers.get("user-agent")
