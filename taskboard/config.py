# taskboard/config.py
"""
Configuración de la aplicación.

Todo sale de variables de entorno (y de un .env opcional). El objeto
Settings se construye una sola vez al arrancar y se pasa a create_app().
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///./taskboard.db"
DEFAULT_TOKEN_MINUTES = 7 * 24 * 60


class ConfigError(RuntimeError):
    pass


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return default
    return v.strip()


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} debe ser un entero, no {raw!r}")


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = _env(name)
    if raw is None:
        return list(default)
    return [p.strip() for p in raw.split(",") if p.strip()]


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    database_url: str = DEFAULT_DATABASE_URL
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = DEFAULT_TOKEN_MINUTES
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    # Cuenta admin inicial (opcional)
    admin_username: str = "admin"
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv(override=False)

        secret = _env("JWT_SECRET")
        if not secret:
            raise ConfigError("JWT_SECRET no está definido")

        return cls(
            jwt_secret=secret,
            database_url=_env("TASKBOARD_DATABASE_URL", DEFAULT_DATABASE_URL),
            jwt_expires_minutes=_env_int("JWT_EXPIRES_MINUTES", DEFAULT_TOKEN_MINUTES),
            cors_origins=_env_list("TASKBOARD_CORS_ORIGINS", ["*"]),
            log_level=_env("TASKBOARD_LOG_LEVEL", "INFO").upper(),
            admin_username=_env("TASKBOARD_ADMIN_USERNAME", "admin"),
            admin_email=_env("TASKBOARD_ADMIN_EMAIL"),
            admin_password=_env("TASKBOARD_ADMIN_PASSWORD"),
        )
