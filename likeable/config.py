from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from likeable.utils.exceptions import ConfigurationError

BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"

USER_LIKEABLE = "user"


class LikeableConfig(BaseModel):
    """Options recognized by the likeable plugin"""
    allowed_types: List[str] = Field(default_factory=lambda: ["post"])
    pagination_limit: int = 50
    max_pagination_limit: int = 200
    enable_user_likes: bool = False
    require_auth: bool = False
    enforce_ownership: bool = False

    @field_validator("allowed_types")
    @classmethod
    def validate_allowed_types(cls, v):
        if not v:
            raise ValueError("allowed_types cannot be empty")
        seen = set()
        for likeable_type in v:
            if not likeable_type:
                raise ValueError("allowed_types cannot contain empty strings")
            if likeable_type in seen:
                raise ValueError(f"duplicate type in allowed_types: {likeable_type}")
            seen.add(likeable_type)
        return v

    @model_validator(mode="after")
    def validate_pagination(self):
        if self.pagination_limit < 1 or self.pagination_limit > self.max_pagination_limit:
            raise ValueError("pagination_limit must be between 1 and max_pagination_limit")
        return self

    def is_allowed_type(self, likeable_type: str) -> bool:
        return likeable_type in self.allowed_types


def load_config(options: Optional[dict[str, Any]] = None) -> LikeableConfig:
    """Overlay recognized options on the defaults and validate the result.

    Unknown keys are ignored so a host can pass its whole plugin section.
    """
    recognized = {
        key: value
        for key, value in (options or {}).items()
        if key in LikeableConfig.model_fields
    }
    try:
        return LikeableConfig(**recognized)
    except ValidationError as e:
        messages = "; ".join(error["msg"].removeprefix("Value error, ") for error in e.errors())
        raise ConfigurationError(messages) from e


class Settings(BaseSettings):
    DATABASE_URL: Optional[str] = None
    DB_DRIVER: str = "postgresql+asyncpg"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASS: str = ""
    DB_NAME: str = "likeable"
    SECRET_KEY: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION: int = 3600
    ECHO_SQL: bool = False
    DEBUG_LOGS: bool = False

    LIKEABLE_ALLOWED_TYPES: List[str] = Field(default_factory=lambda: ["post"])
    LIKEABLE_PAGINATION_LIMIT: int = 50
    LIKEABLE_MAX_PAGINATION_LIMIT: int = 200
    LIKEABLE_ENABLE_USER_LIKES: bool = False
    LIKEABLE_REQUIRE_AUTH: bool = False
    LIKEABLE_ENFORCE_OWNERSHIP: bool = False

    @model_validator(mode="after")
    def fill_database_url(self):
        if not self.DATABASE_URL:
            self.DATABASE_URL = (
                f"{self.DB_DRIVER}://{self.DB_USER}:{self.DB_PASS}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )
        return self

    def likeable_options(self) -> dict[str, Any]:
        return {
            "allowed_types": self.LIKEABLE_ALLOWED_TYPES,
            "pagination_limit": self.LIKEABLE_PAGINATION_LIMIT,
            "max_pagination_limit": self.LIKEABLE_MAX_PAGINATION_LIMIT,
            "enable_user_likes": self.LIKEABLE_ENABLE_USER_LIKES,
            "require_auth": self.LIKEABLE_REQUIRE_AUTH,
            "enforce_ownership": self.LIKEABLE_ENFORCE_OWNERSHIP,
        }

    model_config = SettingsConfigDict(
        env_file=ENV_PATH,
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
