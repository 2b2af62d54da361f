"""Configuration management using Pydantic settings with an optional JSON config file."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# --- Paths ---

APP_NAME = "lora-converter"


def get_config_dir() -> Path:
    """Get the configuration directory (e.g. ~/.config/lora-converter)."""
    if os.name == "nt":
        base = Path(os.environ.get("APPDATA", Path.home() / ".config")).expanduser()
    else:
        base = Path("~/.config").expanduser()
    return base / APP_NAME


CONFIG_FILE = get_config_dir() / "config.json"


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load settings from the JSON config file if it exists."""
    path = path or CONFIG_FILE
    if not path.exists():
        return {}

    try:
        text = path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        data = json.loads(text)
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable config file {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


# Registry credential sources, in lookup order
API_KEY_ENV_VAR = "CIVITAI_API_KEY"
DOTENV_FILENAME = ".env"
KEYRING_SERVICE = "civitai"
KEYRING_ACCOUNT = "api-key"

DEFAULT_REGISTRY_BASE_URL = "https://civitai.com/api/v1"


def get_dotenv_path() -> Path:
    """Get the per-user dotenv file consulted for the registry API key."""
    return Path.home() / DOTENV_FILENAME


class RegistrySettings(BaseSettings):
    """Remote registry configuration."""

    model_config = SettingsConfigDict(env_prefix="LORA_CONVERTER_REGISTRY_")

    base_url: str = Field(default=DEFAULT_REGISTRY_BASE_URL, description="Registry API base URL")
    timeout: Optional[float] = Field(default=None, description="Request timeout in seconds (default: HTTP client default)")


class ImporterSettings(BaseSettings):
    """Conversion importer configuration."""

    model_config = SettingsConfigDict(env_prefix="LORA_CONVERTER_IMPORTER_")

    target: Optional[str] = Field(default=None, description="Importer reference in 'module:attribute' form")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LORA_CONVERTER_LOGGING_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="WARNING")
    json_output: bool = Field(default=False, description="Render log lines as JSON instead of console text")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class AppSettings(BaseSettings):
    """Root application settings.

    Priority: Environment Variables > Config File > Defaults
    """

    model_config = SettingsConfigDict(env_prefix="LORA_CONVERTER_", extra="ignore")

    registry: RegistrySettings = Field(default_factory=RegistrySettings)
    importer: ImporterSettings = Field(default_factory=ImporterSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(path: Path | None = None) -> AppSettings:
    """Load settings with file config as base, env vars overlay."""
    file_data = load_config_file(path)
    # Section env vars override the same section's file values
    sections: dict[str, Any] = {}
    for name, section_cls in (("registry", RegistrySettings), ("importer", ImporterSettings), ("logging", LoggingSettings)):
        section_data = file_data.get(name)
        if isinstance(section_data, dict):
            env_overlay = section_cls().model_dump(exclude_unset=True)
            sections[name] = section_cls.model_validate({**section_data, **env_overlay})
    return AppSettings(**sections)


settings = load_settings()
