"""Configuración del cliente de servicios.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar los adaptadores.
- Permite que el ejecutor HTTP y las factorías lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "svc-client"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "svc-client"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "svc-client"
    return Path.home() / ".config" / "svc-client"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class ClientSettings(BaseSettings):
    """Configuración estática de un cliente de servicio hermano.

    Se lee una vez al arrancar el proceso; el ejecutor la recibe ya resuelta
    y no la modifica.
    """

    model_config = SettingsConfigDict(
        env_prefix="SVC_CLIENT_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    app_name: str = Field(
        default="svc-client",
        min_length=1,
        description="Identidad del servicio llamante (cabecera X-Client).",
    )
    base_url: str = Field(
        default="http://localhost:8080",
        description="Prefijo de todas las llamadas; se concatena tal cual con el path.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    follow_redirects: bool = Field(
        default=False,
        description="Seguir redirecciones en el transporte (los 3xx > 300 son error si no se siguen).",
    )
    capture_body_read_errors: bool = Field(
        default=False,
        description="Adjuntar al error el fallo de lectura del cuerpo de una respuesta no exitosa.",
    )
    log_level: str = Field(
        default="INFO",
        min_length=1,
        description="Nivel de logging para procesos que usan configure_logging().",
    )
