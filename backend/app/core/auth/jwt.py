from datetime import datetime, timedelta, timezone
import jwt

from app.config import settings


def create_access_token(data: dict, expires_delta: timedelta | None = None):
    """Mint a token shaped like the identity provider's access tokens.

    The provider issues tokens in production; this is used by seed scripts and
    tests that need a signed-in caller.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=15)
    to_encode.update({"exp": expire, "aud": settings.AUTH_JWT_AUDIENCE})
    encoded_jwt = jwt.encode(
        to_encode, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM
    )
    return encoded_jwt


def decode_jwt_token(token: str):
    return jwt.decode(
        token,
        settings.AUTH_JWT_SECRET,
        algorithms=[settings.AUTH_JWT_ALGORITHM],
        audience=settings.AUTH_JWT_AUDIENCE,
        options={"require": ["exp", "sub"]},
    )
