"""
Keep API — Token Service
==========================

What:  Issues and verifies the signed, time-limited bearer tokens used by
       the admin routes.
How:   PyJWT, symmetric HMAC (HS256 by default). Claims:
           id        user id
           username  user name
           iat       issued-at (epoch seconds)
           exp       expiry (epoch seconds)

Tokens are stateless: nothing is persisted and there is no revocation list.
A token stays valid until `exp` even if the user would want it withdrawn.

The service is constructed once by the app factory with the signing secret
from settings and handed to the AuthGate. Nothing reads the secret from
global state at verification time.

Expiry is checked against the injected clock (not PyJWT's own), so a token
is rejected as soon as `now >= exp`.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import jwt as pyjwt

from keep_api.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600


@dataclass(frozen=True)
class TokenIdentity:
    """The verified identity carried by a token."""
    id: int
    username: str


class TokenService:
    """
    Issue and verify admin bearer tokens.

    Args:
        secret: Shared HMAC signing secret
        ttl_seconds: Lifetime of issued tokens (default: 1 hour)
        algorithm: JWT signing algorithm
        clock: Returns the current time as epoch seconds (injectable for tests)
    """

    REQUIRED_CLAIMS = ["id", "username", "exp"]

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        algorithm: str = "HS256",
        clock: Optional[Callable[[], float]] = None,
    ):
        if not secret:
            raise ValueError("TokenService requires a non-empty signing secret")
        self._secret = secret
        self._algorithm = algorithm
        self._clock = clock or time.time
        self.ttl_seconds = ttl_seconds

    def issue(self, user_id: int, username: str) -> str:
        """Return a signed token for the user, valid for `ttl_seconds`."""
        now = int(self._clock())
        payload = {
            "id": user_id,
            "username": username,
            "iat": now,
            "exp": now + self.ttl_seconds,
        }
        return pyjwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenIdentity:
        """
        Decode and validate a token.

        Returns:
            TokenIdentity with the embedded user id and username.

        Raises:
            InvalidTokenError: bad signature, malformed token, missing or
                mistyped claims, or expired. Callers cannot tell these apart.
        """
        try:
            payload = pyjwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={
                    "require": self.REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except pyjwt.PyJWTError as e:
            logger.debug("Token rejected: %s", type(e).__name__)
            raise InvalidTokenError(context={"reason": type(e).__name__})

        user_id = payload["id"]
        username = payload["username"]
        exp = payload["exp"]
        if (
            not isinstance(user_id, int)
            or isinstance(user_id, bool)
            or not isinstance(username, str)
            or not isinstance(exp, (int, float))
        ):
            logger.debug("Token rejected: malformed claims")
            raise InvalidTokenError(context={"reason": "malformed_claims"})

        if self._clock() >= exp:
            logger.debug("Token rejected: expired")
            raise InvalidTokenError(context={"reason": "expired"})

        return TokenIdentity(id=user_id, username=username)
