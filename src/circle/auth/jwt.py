"""JWT access token handling."""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError as PyJWTInvalidTokenError

from circle.config import Settings, get_settings
from circle.shared.exceptions import InvalidTokenError, TokenExpiredError
from circle.shared.logging import get_logger

logger = get_logger(__name__)


class JWTHandler:
    """Handler for creating and validating access tokens."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def create_access_token(
        self,
        user_id: UUID,
        email: str,
        additional_claims: dict[str, Any] | None = None,
    ) -> str:
        """Create a new access token."""
        now = datetime.now(timezone.utc)
        expires = now + timedelta(minutes=self._settings.jwt_access_token_expire_minutes)

        payload = {
            "sub": str(user_id),
            "user_id": str(user_id),
            "email": email,
            "type": "access",
            "iat": now,
            "exp": expires,
        }

        if additional_claims:
            payload.update(additional_claims)

        return jwt.encode(
            payload,
            self._settings.jwt_secret_key,
            algorithm=self._settings.jwt_algorithm,
        )

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decode and validate a JWT token."""
        try:
            return jwt.decode(
                token,
                self._settings.jwt_secret_key,
                algorithms=[self._settings.jwt_algorithm],
            )
        except ExpiredSignatureError as e:
            logger.warning("Token expired")
            raise TokenExpiredError() from e
        except PyJWTInvalidTokenError as e:
            logger.warning("Invalid token", extra={"error": str(e)})
            raise InvalidTokenError(details={"error": str(e)}) from e

    def validate_access_token(self, token: str) -> dict[str, Any]:
        """Validate an access token and return its payload."""
        payload = self.decode_token(token)

        if payload.get("type") != "access":
            raise InvalidTokenError(
                "Invalid token type",
                details={"expected": "access", "got": payload.get("type")},
            )

        return payload

    @staticmethod
    def owner_id(payload: dict[str, Any]) -> UUID:
        """Resolve the contact owner from a validated payload.

        ``user_id`` is preferred; ``sub`` is accepted for tokens minted by
        other issuers that only carry the subject.

        Raises:
            InvalidTokenError: If neither claim holds a UUID.
        """
        raw = payload.get("user_id") or payload.get("sub")
        if not raw:
            raise InvalidTokenError(
                "Token missing user_id",
                details={"payload_keys": sorted(payload)},
            )
        try:
            return UUID(str(raw))
        except ValueError as e:
            raise InvalidTokenError("Malformed user_id claim") from e
