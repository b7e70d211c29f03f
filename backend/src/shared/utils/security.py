"""
Security Utilities

Bearer token handling for identities issued by the external provider.

JWT Tokens:
===========
The identity provider signs tokens with the shared SECRET_KEY. The user id
is the "user_id" claim, or the standard "sub" claim when user_id is absent.
This service never issues tokens to clients; create_access_token() exists
for local tooling and tests.

Usage:
======
    from src.shared.utils.security import SecurityUtils

    # Decode JWT
    payload = SecurityUtils.decode_access_token(token, settings.SECRET_KEY)
    user_id = SecurityUtils.subject(payload)

    # Create JWT (tests, local tooling)
    token = SecurityUtils.create_access_token(
        data={"sub": "user_2a"},
        secret_key=settings.SECRET_KEY,
        expires_delta=timedelta(hours=1)
    )
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt


class SecurityUtils:
    """JWT validation and creation."""

    @staticmethod
    def create_access_token(
        data: dict,
        secret_key: str,
        expires_delta: Optional[timedelta] = None,
        algorithm: str = "HS256",
    ) -> str:
        """
        Create a signed JWT.

        Args:
            data: Payload claims (e.g. sub)
            secret_key: Secret key for signing
            expires_delta: Token lifetime (default: 1 hour)
            algorithm: JWT algorithm (default: HS256)

        Returns:
            Encoded JWT token string
        """
        to_encode = data.copy()
        now = datetime.now(timezone.utc)
        to_encode.update({
            "exp": now + (expires_delta or timedelta(hours=1)),
            "iat": now,
        })
        return jwt.encode(to_encode, secret_key, algorithm=algorithm)

    @staticmethod
    def decode_access_token(
        token: str,
        secret_key: str,
        algorithm: str = "HS256",
    ) -> dict:
        """
        Decode and verify a JWT.

        Raises:
            ValueError: If the token is expired or invalid

        Example:
            try:
                payload = SecurityUtils.decode_access_token(token, settings.SECRET_KEY)
            except ValueError as e:
                raise AuthenticationError(str(e))
        """
        try:
            return jwt.decode(token, secret_key, algorithms=[algorithm])
        except jwt.ExpiredSignatureError:
            raise ValueError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise ValueError(f"Invalid token: {str(e)}")

    @staticmethod
    def subject(payload: dict) -> Optional[str]:
        """The user id carried by a decoded token, if any."""
        user_id = payload.get("user_id") or payload.get("sub")
        return str(user_id) if user_id else None
