# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthServiceConfig(BaseSettings):
    base_url: str = Field("http://localhost:8081", alias="AUTH_SERVICE_URL")
    timeout: float = Field(10.0, ge=0.1, alias="AUTH_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", validate_by_name=True, extra="ignore"
    )

    @field_validator("base_url", mode="after")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")


class CatalogServiceConfig(BaseSettings):
    base_url: str = Field("http://localhost:8082", alias="CATALOG_SERVICE_URL")
    timeout: float = Field(15.0, ge=0.1, alias="CATALOG_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", validate_by_name=True, extra="ignore"
    )

    @field_validator("base_url", mode="after")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")


class SessionConfig(BaseSettings):
    # Auto-logout fires this long before the server-side expiry
    expiry_margin_seconds: float = Field(300.0, ge=0.0, alias="SESSION_EXPIRY_MARGIN")
    store: str = Field("file", alias="SESSION_STORE")
    store_dir: Path = Field(Path("instance/sessions"), alias="SESSION_STORE_DIR")
    cookie_name: str = Field("ct_client", alias="SESSION_COOKIE")
    cookie_max_age: int = Field(60 * 60 * 24 * 30, ge=60, alias="SESSION_COOKIE_MAX_AGE")
    # Signed-out clients unseen for this long are dropped from memory
    idle_timeout_seconds: float = Field(1800.0, ge=1.0, alias="SESSION_IDLE_TIMEOUT")
    landing_path: str = Field("/dashboard", alias="SESSION_LANDING_PATH")
    login_path: str = Field("/login", alias="SESSION_LOGIN_PATH")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", validate_by_name=True, extra="ignore"
    )

    @field_validator("store", mode="after")
    @classmethod
    def _check_store(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in ("file", "database", "memory"):
            raise ValueError("SESSION_STORE must be one of: file, database, memory")
        return normalized


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///instance/cinetracks.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", validate_by_name=True, extra="ignore"
    )


class ResilienceConfig(BaseSettings):
    default_timeout: float = Field(15.0, ge=0.1, alias="RESILIENCE_TIMEOUT")
    max_retries: int = Field(2, ge=0, alias="RESILIENCE_RETRIES")
    backoff_base: float = Field(0.5, ge=0.01, alias="RESILIENCE_BACKOFF_BASE")
    backoff_cap: float = Field(4.0, ge=0.01, alias="RESILIENCE_BACKOFF_CAP")
    circuit_fail_threshold: int = Field(5, ge=1, alias="RESILIENCE_CIRCUIT_THRESHOLD")
    circuit_reset_timeout: float = Field(60.0, ge=1.0, alias="RESILIENCE_CIRCUIT_RESET")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", validate_by_name=True, extra="ignore"
    )


class SecurityConfig(BaseSettings):
    # Cookie security
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Lax", alias="COOKIE_SAMESITE")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, alias="RL_WINDOW")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", validate_by_name=True, extra="ignore"
    )

    @field_validator("cookie_secure", "enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)


def _auth_config_factory() -> AuthServiceConfig:
    return AuthServiceConfig()  # type: ignore[call-arg]


def _catalog_config_factory() -> CatalogServiceConfig:
    return CatalogServiceConfig()  # type: ignore[call-arg]


def _session_config_factory() -> SessionConfig:
    return SessionConfig()  # type: ignore[call-arg]


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _resilience_config_factory() -> ResilienceConfig:
    return ResilienceConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    auth: AuthServiceConfig = Field(default_factory=_auth_config_factory)
    catalog: CatalogServiceConfig = Field(default_factory=_catalog_config_factory)
    session: SessionConfig = Field(default_factory=_session_config_factory)
    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    resilience: ResilienceConfig = Field(default_factory=_resilience_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        validate_by_name=True,
        arbitrary_types_allowed=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.secret_key in ("dev", "development", "test", ""):
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure SECRET_KEY detected in production!\n"
                "   SECRET_KEY must be a strong random value in production.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if not self.security.cookie_secure:
            warnings.append("⚠️  Cookie Secure flag is DISABLED (use HTTPS!)")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")
        if self.session.store == "memory":
            warnings.append("⚠️  SESSION_STORE=memory loses sessions on restart")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def expiry_margin_ms(self) -> int:
        return int(self.session.expiry_margin_seconds * 1000)


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "AuthServiceConfig",
    "CatalogServiceConfig",
    "DatabaseConfig",
    "ResilienceConfig",
    "SecurityConfig",
    "SessionConfig",
    "load_config",
]
