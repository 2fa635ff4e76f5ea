from __future__ import annotations

import hmac
import logging
import re
from datetime import UTC, datetime, timedelta

import jwt

from src.kanban.domain.exceptions import InvalidCredentialsError
from src.kanban.domain.models import AuthToken, Identity
from src.setup.auth_config import AuthSettings

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_UNIT_SECONDS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_lifetime(value: str) -> timedelta:
    """Parse lifetimes such as ``"24h"``, ``"30m"`` or ``"3600"``."""
    match = _DURATION_RE.match(value)
    if match is None:
        raise ValueError(f"Invalid token lifetime: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _UNIT_SECONDS[unit])


class AuthService:
    """
    Issues and verifies bearer tokens for the single configured account.

    Verification is stateless: a token stays valid until it expires.
    """

    def __init__(self, settings: AuthSettings) -> None:
        if not settings.JWT_SECRET:
            raise RuntimeError("JWT_SECRET environment variable is required")
        if not settings.AUTH_USERNAME or not settings.AUTH_PASSWORD:
            raise RuntimeError(
                "AUTH_USERNAME and AUTH_PASSWORD environment variables are required"
            )
        self._secret = settings.JWT_SECRET
        self._algorithm = settings.JWT_ALGORITHM
        self._expires_in = settings.JWT_EXPIRES_IN
        self._lifetime = parse_lifetime(settings.JWT_EXPIRES_IN)
        self._username = settings.AUTH_USERNAME
        self._password = settings.AUTH_PASSWORD

    def authenticate(self, username: str, password: str) -> AuthToken:
        """Return a signed token, or raise ``InvalidCredentialsError``."""
        username_ok = hmac.compare_digest(username.encode(), self._username.encode())
        password_ok = hmac.compare_digest(password.encode(), self._password.encode())
        if not (username_ok and password_ok):
            logger.warning("Rejected login", extra={"username": username})
            raise InvalidCredentialsError()

        issued_at = datetime.now(UTC)
        claims = {
            "username": username,
            "iat": issued_at,
            "exp": issued_at + self._lifetime,
        }
        token = jwt.encode(claims, self._secret, algorithm=self._algorithm)
        return AuthToken(token=token, expires_in=self._expires_in)

    def verify(self, token: str) -> Identity | None:
        """Decode ``token``; returns None when the signature or expiry check fails."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected bearer token", extra={"reason": str(exc)})
            return None

        username = payload.get("username")
        if not isinstance(username, str):
            return None
        return Identity(
            username=username,
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
