from datetime import UTC, datetime, timedelta

import jwt

from likeable.config import settings
from likeable.utils.exceptions import AuthenticationRequiredError, ConfigurationError


def generate_token(payload: dict) -> str:
    if not settings.SECRET_KEY:
        raise ConfigurationError("SECRET_KEY is not set")
    payload["exp"] = datetime.now(UTC) + timedelta(seconds=settings.JWT_EXPIRATION)
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> dict:
    # Bearer tokens are refused until a signing key is configured
    if not settings.SECRET_KEY:
        raise AuthenticationRequiredError("Token authentication is not configured")
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationRequiredError("Token expired!")
    except jwt.InvalidTokenError:
        raise AuthenticationRequiredError("Invalid token!")
