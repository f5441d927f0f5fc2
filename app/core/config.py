from __future__ import annotations

import json
import os
from functools import lru_cache
from typing import Annotated, Any, Literal

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _parse_csv_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v).strip() for v in value if str(v).strip()]
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return []
        if raw.startswith("[") and raw.endswith("]"):
            try:
                parsed = json.loads(raw)
            except ValueError:
                parsed = None
            if isinstance(parsed, list):
                return [str(v).strip() for v in parsed if str(v).strip()]
        parts = [p.strip() for p in raw.split(",")]
        return [p for p in parts if p]
    return [str(value).strip()]


class BaseAppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: Literal["dev", "prod"] = Field(default="dev", validation_alias="APP_ENV")
    app_name: str = Field(default="anime-catalog-api", validation_alias="APP_NAME")
    api_prefix: str = Field(default="", validation_alias="API_PREFIX")

    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8080, validation_alias="PORT")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_json: bool = Field(default=True, validation_alias="LOG_JSON")

    docs_enabled: bool = Field(default=True, validation_alias="DOCS_ENABLED")

    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=list, validation_alias="CORS_ALLOW_ORIGINS")
    cors_allow_methods: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        validation_alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["Authorization", "Content-Type", "Accept", "X-Request-ID"],
        validation_alias="CORS_ALLOW_HEADERS",
    )
    cors_allow_credentials: bool = Field(default=False, validation_alias="CORS_ALLOW_CREDENTIALS")

    enable_security_headers: bool = Field(default=True, validation_alias="ENABLE_SECURITY_HEADERS")

    postgres_dsn: SecretStr = Field(..., validation_alias="POSTGRES_DSN")
    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="DB_MAX_OVERFLOW")
    db_pool_timeout_seconds: int = Field(default=30, validation_alias="DB_POOL_TIMEOUT_SECONDS")
    db_command_timeout_seconds: int = Field(default=30, validation_alias="DB_COMMAND_TIMEOUT_SECONDS")
    repository_timeout_seconds: float = Field(default=2.5, validation_alias="REPOSITORY_TIMEOUT_SECONDS")

    redis_dsn: SecretStr | None = Field(default=None, validation_alias="REDIS_DSN")
    redis_connect_timeout_seconds: float = Field(default=2.0, validation_alias="REDIS_CONNECT_TIMEOUT_SECONDS")
    redis_operation_timeout_seconds: float = Field(default=1.0, validation_alias="REDIS_OPERATION_TIMEOUT_SECONDS")

    rate_limit_enabled: bool = Field(default=False, validation_alias="RATE_LIMIT_ENABLED")
    rate_limit_requests: int = Field(default=60, validation_alias="RATE_LIMIT_REQUESTS")
    rate_limit_window_seconds: int = Field(default=60, validation_alias="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_key_prefix: str = Field(default="rl:", validation_alias="RATE_LIMIT_KEY_PREFIX")
    trusted_proxy_headers: bool = Field(default=False, validation_alias="TRUSTED_PROXY_HEADERS")

    auth_realm: str = Field(default="anime", validation_alias="AUTH_REALM")
    bcrypt_rounds: int = Field(default=12, validation_alias="BCRYPT_ROUNDS")

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _validate_csv_lists(cls, v: Any) -> list[str]:
        return _parse_csv_list(v)

    @model_validator(mode="after")
    def _validate_ranges(self) -> "BaseAppSettings":
        if self.repository_timeout_seconds <= 0:
            raise ValueError("REPOSITORY_TIMEOUT_SECONDS must be positive")
        if self.db_pool_size <= 0 or self.db_max_overflow < 0:
            raise ValueError("DB_POOL_SIZE must be positive and DB_MAX_OVERFLOW non-negative")
        if self.rate_limit_requests <= 0 or self.rate_limit_window_seconds <= 0:
            raise ValueError("rate limit values must be positive")
        if self.redis_operation_timeout_seconds <= 0 or self.redis_connect_timeout_seconds <= 0:
            raise ValueError("redis timeout values must be positive")
        if not (4 <= self.bcrypt_rounds <= 31):
            raise ValueError("BCRYPT_ROUNDS must be within [4, 31]")
        return self

    def postgres_dsn_plain(self) -> str:
        return self.postgres_dsn.get_secret_value()

    def redis_dsn_plain(self) -> str | None:
        if self.redis_dsn is None:
            return None
        return self.redis_dsn.get_secret_value() or None


class DevSettings(BaseAppSettings):
    docs_enabled: bool = Field(default=True, validation_alias="DOCS_ENABLED")


class ProdSettings(BaseAppSettings):
    docs_enabled: bool = Field(default=False, validation_alias="DOCS_ENABLED")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=list, validation_alias="CORS_ALLOW_ORIGINS")


Settings = BaseAppSettings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    env = (os.getenv("APP_ENV") or "dev").strip().lower()
    if env == "prod":
        return ProdSettings()
    return DevSettings()
