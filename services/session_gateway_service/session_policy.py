"""
Session cookie policy for the Session Gateway.

The gateway never exposes the backend-issued session token to browser
JavaScript. Session-creation responses are stripped of their ``token``
field and the token travels in an HttpOnly cookie instead; logout and any
401 clear that cookie.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, NewType

from starlette.responses import Response

from dispatch_service_libs.logging_utils import create_service_logger
from services.session_gateway_service.config import Settings

SessionToken = NewType("SessionToken", str)

logger = create_service_logger("session_gateway.session_policy")


class SessionEffect(str, Enum):
    """What a successful backend response on a path does to the session."""

    CREATE = "create"
    DESTROY = "destroy"


# Keyed by lower-cased relative path
SESSION_PATH_EFFECTS: dict[str, SessionEffect] = {
    "auth/login": SessionEffect.CREATE,
    "auth/register": SessionEffect.CREATE,
    "auth/register-tenant-user": SessionEffect.CREATE,
    "auth/logout": SessionEffect.DESTROY,
}

# Backend contract: both spellings have been observed, snake_case first
EXPIRY_KEYS: tuple[str, ...] = ("expires_at", "expiresAt")

TOKEN_KEY = "token"


def parse_expiry(value: Any) -> datetime | None:
    """
    Parse a backend expiry value into an aware UTC datetime.

    Strings are read as ISO-8601 (a trailing ``Z`` is accepted, naive values
    are taken as UTC). Numbers are epoch milliseconds. Anything else, or a
    value that does not parse, yields None.
    """
    if isinstance(value, bool):
        return None

    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        if isinstance(value, str) and value.strip():
            text = value.strip()
            if text.endswith(("Z", "z")):
                text = f"{text[:-1]}+00:00"
            parsed = datetime.fromisoformat(text)
            if parsed.tzinfo is None:
                return parsed.replace(tzinfo=timezone.utc)
            return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None
    return None


class SessionPolicy:
    """Decides and applies session cookie mutations for proxied responses."""

    def __init__(self, cookie_name: str, secure: bool) -> None:
        self.cookie_name = cookie_name
        self.secure = secure

    @classmethod
    def from_settings(cls, settings: Settings) -> SessionPolicy:
        return cls(cookie_name=settings.SESSION_COOKIE, secure=settings.use_secure_cookies)

    def effect_for(self, relative_path: str) -> SessionEffect | None:
        return SESSION_PATH_EFFECTS.get(relative_path.lower())

    def issued_token(
        self, relative_path: str, status_code: int, payload: Any
    ) -> SessionToken | None:
        """Return the token of a successful session-creation payload, if any."""
        if self.effect_for(relative_path) is not SessionEffect.CREATE:
            return None
        if not 200 <= status_code < 300:
            return None
        if not isinstance(payload, dict):
            return None
        token = payload.get(TOKEN_KEY)
        if not token:
            return None
        return SessionToken(token if isinstance(token, str) else str(token))

    @staticmethod
    def redact_token(payload: dict[str, Any]) -> dict[str, Any]:
        """Shallow copy of ``payload`` without the token field."""
        return {key: value for key, value in payload.items() if key != TOKEN_KEY}

    @staticmethod
    def extract_expiry(payload: dict[str, Any]) -> datetime | None:
        raw_value = None
        for key in EXPIRY_KEYS:
            if payload.get(key) is not None:
                raw_value = payload[key]
                break

        if not raw_value:
            logger.warning(
                "Session payload carries no expiry, issuing a browser-session cookie",
                expected_keys=list(EXPIRY_KEYS),
            )
            return None

        expires = parse_expiry(raw_value)
        if expires is None:
            logger.warning(
                "Unparseable session expiry, issuing a browser-session cookie",
                value_type=type(raw_value).__name__,
            )
        return expires

    def set_session_cookie(
        self, response: Response, token: SessionToken, expires: datetime | None = None
    ) -> None:
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            expires=expires,
            path="/",
            secure=self.secure,
            httponly=True,
            samesite="lax",
        )

    def clear_session_cookie(self, response: Response) -> None:
        response.delete_cookie(
            key=self.cookie_name,
            path="/",
            secure=self.secure,
            httponly=True,
            samesite="lax",
        )
