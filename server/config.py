# server/config.py

import re
import logging
from datetime import timedelta
from pathlib import Path
from fastapi import Request
from pydantic import AliasChoices, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)

DEV_SECRET = "dev-secret-change-me"

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 60 * 60, "d": 60 * 60 * 24}


class ConfigError(ValueError):
    """Raised when an environment value cannot be turned into a setting."""


def parse_duration(value: str) -> timedelta:
    """
    Parses a token lifetime such as "3600", "30m", "1h" or "7d".
    """
    match = _DURATION_RE.match(value)
    if not match:
        raise ConfigError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit])


class Settings(BaseSettings):
    """
    Immutable process configuration, read from the environment and .env.
    Built once at startup and handed to create_app().
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    port: int = 3000
    frontend_url: str = ""
    database_url: str = "sqlite:///./data/app.db"
    bcrypt_salt_rounds: int = Field(10, ge=4, le=31)
    jwt_secret: str = DEV_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expiration: timedelta = timedelta(hours=1)
    cookie_max_age: int = 60 * 60 * 24
    environment: str = Field(
        "development",
        validation_alias=AliasChoices("environment", "APP_ENV", "NODE_ENV"),
    )
    upload_dir: Path = Path("uploads")
    auth_error_status: int = 200
    log_level: str = "INFO"

    @field_validator("jwt_expiration", mode="before")
    @classmethod
    def _parse_expiration(cls, value):
        if isinstance(value, str):
            return parse_duration(value)
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _check_secret(self):
        if self.jwt_secret == DEV_SECRET:
            if self.is_production:
                raise ValueError("JWT_SECRET must be set in production")
            logger.warning("JWT_SECRET is not set, using the development secret")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(str(e)) from e


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
