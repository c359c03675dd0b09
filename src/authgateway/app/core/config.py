# src/authgateway/app/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# ------------------------------------------------------------
# Environment helpers
# ------------------------------------------------------------

def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value or default


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return value if value > 0 else default


# ------------------------------------------------------------
# Settings groups
# ------------------------------------------------------------

@dataclass(frozen=True)
class CognitoSettings:
    """Identity provider (Cognito user pool app client) settings."""

    user_pool_id: str = ""
    client_id: str = ""
    client_secret: Optional[str] = None
    region: str = "us-east-1"
    connect_timeout: int = 10
    read_timeout: int = 30

    @staticmethod
    def from_env() -> "CognitoSettings":
        return CognitoSettings(
            user_pool_id=_env("COGNITO_USER_POOL_ID", "") or "",
            client_id=_env("COGNITO_APP_CLIENT_ID", "") or "",
            client_secret=_env("COGNITO_APP_CLIENT_SECRET"),
            region=_env("AWS_REGION", "us-east-1") or "us-east-1",
            connect_timeout=_env_int("COGNITO_CONNECT_TIMEOUT", 10),
            read_timeout=_env_int("COGNITO_READ_TIMEOUT", 30),
        )


@dataclass(frozen=True)
class QueueNames:
    user_signup: str = "user-signup-queue"
    user_login: str = "user-login-queue"
    resend_confirmation_code: str = "resend-confirmation-code-queue"
    confirm_account: str = "confirm-account-queue"
    password_recovery: str = "password-recovery-queue"


@dataclass(frozen=True)
class QueueSettings:
    """Broker (Amazon MQ for RabbitMQ) connection settings."""

    username: str = ""
    password: str = ""
    host: str = "localhost"
    port: int = 5671
    virtual_host: str = "/"
    scheme: str = "amqps"
    heartbeat: int = 60
    connect_timeout: float = 10.0
    queues: QueueNames = field(default_factory=QueueNames)

    @staticmethod
    def from_env() -> "QueueSettings":
        return QueueSettings(
            username=_env("AMAZON_MQ_USERNAME", "") or "",
            password=_env("AMAZON_MQ_PASSWORD", "") or "",
            host=_env("AMAZON_MQ_HOST", "localhost") or "localhost",
            port=_env_int("AMAZON_MQ_PORT", 5671),
            virtual_host=_env("AMAZON_MQ_VIRTUAL_HOST", "/") or "/",
            scheme=_env("AMAZON_MQ_SCHEME", "amqps") or "amqps",
        )


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite+aiosqlite:///./authgateway.sqlite3"
    auto_create_tables: bool = True
    port: int = 3333
    workers: int = 1
    log_level: str = "INFO"
    cognito: CognitoSettings = field(default_factory=CognitoSettings)
    queue: QueueSettings = field(default_factory=QueueSettings)


def load_settings(*, dotenv: bool = True) -> Settings:
    """
    Build Settings from the process environment.
    A .env file in the working directory is loaded first (existing vars win).
    """
    if dotenv:
        load_dotenv()

    return Settings(
        database_url=_env("DATABASE_URL", Settings.database_url) or Settings.database_url,
        auto_create_tables=_env_flag("DB_AUTO_CREATE", True),
        port=_env_int("PORT", 3333),
        workers=_env_int("APP_CLUSTERS", 1),
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        cognito=CognitoSettings.from_env(),
        queue=QueueSettings.from_env(),
    )


__all__ = ["CognitoSettings", "QueueNames", "QueueSettings", "Settings", "load_settings"]
