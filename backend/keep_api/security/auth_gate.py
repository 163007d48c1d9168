"""
Keep API — Auth Gate
======================

What:  The single gate in front of every /admin route.
How:   Per request:

           no token                  → MissingTokenError  (403)
           token present, invalid    → InvalidTokenError  (401)
           token present, valid      → identity attached, request proceeds

Token extraction:
    The token is the second whitespace-separated word of the Authorization
    header ("Bearer <token>"). The first word is discarded without checking
    the scheme. A missing header, or a header with nothing after the first
    word, counts as "no token".

The gate knows nothing about the resource being accessed: any valid token
grants every admin route.
"""

import logging
from typing import Optional

from fastapi import Request

from keep_api.exceptions import MissingTokenError
from keep_api.security.tokens import TokenIdentity, TokenService

logger = logging.getLogger(__name__)


def extract_token(raw_header: Optional[str]) -> Optional[str]:
    """Return the second whitespace-separated word of the header, if any."""
    if not raw_header:
        return None
    parts = raw_header.split()
    if len(parts) < 2:
        return None
    return parts[1]


class AuthGate:
    def __init__(self, token_service: TokenService):
        self.token_service = token_service

    def authorize(self, raw_header: Optional[str]) -> TokenIdentity:
        """
        Resolve the Authorization header value into a verified identity.

        Raises:
            MissingTokenError: no token could be extracted
            InvalidTokenError: the token failed verification
        """
        token = extract_token(raw_header)
        if token is None:
            raise MissingTokenError()
        return self.token_service.verify(token)


async def require_admin(request: Request) -> TokenIdentity:
    """
    FastAPI dependency guarding the admin routers.

    Uses the AuthGate built by the app factory (app.state.auth_gate) and
    exposes the verified identity on request.state for handlers and logs.
    """
    gate: AuthGate = request.app.state.auth_gate
    try:
        identity = gate.authorize(request.headers.get("Authorization"))
    except MissingTokenError:
        logger.warning("No token on %s %s", request.method, request.url.path)
        raise
    request.state.user_id = identity.id
    request.state.username = identity.username
    return identity
