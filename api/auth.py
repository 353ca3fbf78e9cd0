"""
Token-based authentication for the FastAPI API.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

import structlog
from fastapi import Header, Request
from jose import jwt, ExpiredSignatureError, JWTError
from jose.exceptions import JWTClaimsError

from api.config import APIConfig

logger = structlog.get_logger(__name__)

BEARER_PREFIX = "Bearer "


class AuthFailure(str, Enum):
    """Reason an authentication attempt was rejected."""
    MISSING = "missing"
    MALFORMED = "malformed"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"


class AuthError(Exception):
    """Raised when a request cannot be authenticated.

    The reason is kept for server-side logging only, clients always get the
    same response.
    """

    def __init__(self, reason: AuthFailure):
        self.reason = reason
        super().__init__(f"Authentication failed: {reason.value}")


class TokenService:
    """Issues and verifies signed identity tokens."""

    def __init__(self, config: APIConfig):
        self.secret_key = config.secret_key
        self.algorithm = config.algorithm
        self.expires_delta = timedelta(minutes=config.access_token_expire_minutes)

    def issue(
        self,
        subject: str,
        secret: Optional[str] = None,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Issue a token for a subject.

        Args:
            subject: Subject (user identifier) carried by the token
            secret: Signing secret overriding the configured one
            expires_delta: Lifetime overriding the configured one

        Returns:
            Encoded token
        """
        issued_at = datetime.now(timezone.utc)
        claims = {
            "sub": subject,
            "iat": issued_at,
            "exp": issued_at + (expires_delta if expires_delta is not None else self.expires_delta),
        }
        return jwt.encode(claims, secret or self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """
        Verify a token and return its subject.

        Args:
            token: Encoded token

        Returns:
            Subject carried by the token

        Raises:
            AuthError: If the token is malformed, badly signed or expired
        """
        try:
            jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JWTError:
            raise AuthError(AuthFailure.MALFORMED)

        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_sub": False}
            )
        except ExpiredSignatureError:
            raise AuthError(AuthFailure.EXPIRED)
        except JWTClaimsError:
            # Claims are only checked once the signature has verified
            raise AuthError(AuthFailure.MALFORMED)
        except JWTError:
            raise AuthError(AuthFailure.INVALID_SIGNATURE)

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise AuthError(AuthFailure.MALFORMED)
        return subject


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an Authorization header value.

    The scheme prefix is matched case-sensitively.

    Raises:
        AuthError: If the header is missing or not a bearer credential
    """
    if authorization is None:
        raise AuthError(AuthFailure.MISSING)
    if not authorization.startswith(BEARER_PREFIX):
        raise AuthError(AuthFailure.MALFORMED)
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthError(AuthFailure.MALFORMED)
    return token


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_current_subject(
    request: Request,
    authorization: Optional[str] = Header(None)
) -> str:
    """
    Authenticate the request and return the caller's subject.

    Raises:
        AuthError: If the bearer token is missing or invalid
    """
    try:
        token = extract_bearer_token(authorization)
        return get_token_service(request).verify(token)
    except AuthError as e:
        logger.warning("Authentication failed", reason=e.reason.value, path=request.url.path)
        raise
