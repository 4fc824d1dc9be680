# server/core/security.py

from functools import lru_cache
from datetime import datetime, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext
from config import Settings


@lru_cache(maxsize=None)
def _pwd_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def get_password_hash(settings: Settings, password: str) -> str:
    return _pwd_context(settings.bcrypt_salt_rounds).hash(password)


def verify_password(settings: Settings, plain_password: str, hashed_password: str) -> bool:
    return _pwd_context(settings.bcrypt_salt_rounds).verify(plain_password, hashed_password)


def create_access_token(settings: Settings, data: dict) -> str:
    """
    Signs the session payload with the configured secret.
    Adds the standard iat/exp claims.
    """
    now = datetime.now(timezone.utc)
    to_encode = data.copy()
    to_encode.update({"iat": now, "exp": now + settings.jwt_expiration})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(settings: Settings, token: str | None) -> dict | None:
    """
    Returns the verified claims, or None when the token is
    missing, tampered with or expired.
    """
    if not token:
        return None
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def set_token_cookie(response, settings: Settings, token: str, max_age: int | None = None):
    response.set_cookie(
        key="token",
        value=token,
        max_age=settings.cookie_max_age if max_age is None else max_age,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="strict",
    )
