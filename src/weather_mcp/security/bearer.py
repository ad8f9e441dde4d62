"""
Bearer-token authentication gate.

The gate runs before any message parsing. It holds the expected token as an
immutable value handed over at construction; there is no runtime mutation.
"""

from __future__ import annotations

import hmac
from typing import TYPE_CHECKING

from weather_mcp.context import CallerInfo
from weather_mcp.errors import AuthenticationError

if TYPE_CHECKING:
    from weather_mcp.config import SecurityConfig


BEARER_SCHEME = "Bearer"

MISSING_HEADER_MESSAGE = "Missing Authorization header"
INVALID_SCHEME_MESSAGE = "Invalid authentication scheme. Expected Bearer token."
INVALID_TOKEN_MESSAGE = "Invalid bearer token"


class BearerAuthenticator:
    """
    Validates ``Authorization: Bearer <token>`` headers.

    Example:
        >>> auth = BearerAuthenticator("s3cret")
        >>> auth.authenticate("Bearer s3cret").auth_method
        'bearer'
    """

    __slots__ = ("_token",)

    def __init__(self, token: str) -> None:
        """
        Initialize the authenticator.

        Args:
            token: The expected bearer token.

        Raises:
            ValueError: If the token is empty.
        """
        if not token:
            raise ValueError("Bearer token must not be empty")
        self._token = token

    @classmethod
    def from_config(cls, config: SecurityConfig) -> BearerAuthenticator:
        """Create a BearerAuthenticator from configuration."""
        return cls(token=config.bearer_token)

    def authenticate(
        self,
        authorization: str | None,
        ip_address: str | None = None,
    ) -> CallerInfo:
        """
        Check an Authorization header value.

        The scheme is the text before the first space and must be exactly
        "Bearer"; the remainder must equal the configured token exactly.

        Args:
            authorization: Raw header value, or None if the header is absent.
            ip_address: Client address, recorded on the returned CallerInfo.

        Returns:
            CallerInfo for the authenticated client.

        Raises:
            AuthenticationError: If the header is missing, uses another
                scheme, or carries the wrong token.
        """
        if not authorization:
            raise AuthenticationError(
                message=MISSING_HEADER_MESSAGE,
                details={"reason": "missing_header"},
            )

        scheme, _, token = authorization.partition(" ")

        if scheme != BEARER_SCHEME:
            raise AuthenticationError(
                message=INVALID_SCHEME_MESSAGE,
                details={"reason": "invalid_scheme"},
            )

        if not hmac.compare_digest(token.encode(), self._token.encode()):
            raise AuthenticationError(
                message=INVALID_TOKEN_MESSAGE,
                details={"reason": "invalid_token"},
            )

        return CallerInfo(ip_address=ip_address, auth_method="bearer")

    def __repr__(self) -> str:
        return "BearerAuthenticator(token=***)"
