"""Identity-provider tokens.

Sign-in happens elsewhere; the browser hands us the provider's bearer JWT.
We only verify it, read the user id from ``sub`` and keep the raw token so
the hosted table API can authorise the same user.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from .config import settings

ALGORITHM = "HS256"
LOCAL_USER_ID = "local"


class TokenPayload(BaseModel):
    sub: str
    exp: datetime
    iat: datetime | None = None
    name: str | None = None
    email: str | None = None


@dataclass
class CurrentUser:
    id: str
    display_name: str
    access_token: str | None = None


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def encode_token(subject: str, *, name: str | None = None, expires_in: timedelta = timedelta(hours=1)) -> str:
    """Mint a token the way the identity provider does (used by local tooling and tests)."""

    now = _now()
    payload: dict[str, Any] = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    if name:
        payload["name"] = name
    if settings.JWT_AUDIENCE:
        payload["aud"] = settings.JWT_AUDIENCE
    if settings.JWT_ISSUER:
        payload["iss"] = settings.JWT_ISSUER
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_token(token: str) -> TokenPayload:
    options = {"verify_aud": bool(settings.JWT_AUDIENCE)}
    try:
        decoded = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            options=options,
        )
    except JWTError as exc:
        raise ValueError("Invalid token") from exc
    try:
        return TokenPayload.model_validate(decoded)
    except ValidationError as exc:
        raise ValueError("Invalid token payload") from exc


def user_from_token(token: str) -> CurrentUser:
    payload = decode_token(token)
    return CurrentUser(id=payload.sub, display_name=payload.name or payload.sub, access_token=token)


def local_user() -> CurrentUser:
    return CurrentUser(id=LOCAL_USER_ID, display_name="Local organizer")
