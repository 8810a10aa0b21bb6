"""Configuration module using pydantic-settings."""

import logging
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class GeminiConfig(BaseSettings):
    """Google Gemini API configuration."""

    api_key: str = Field(
        "",
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY", "api_key"),
        description="Gemini API key",
    )
    model: str = Field(
        "gemini-2.5-flash-image",
        description="Gemini image model name",
    )
    timeout: int = Field(120, ge=1, description="Request timeout in seconds")
    output_mime_type: str = Field(
        "image/png",
        description="Media type assumed for returned images without one",
    )

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def has_api_key(self) -> bool:
        """Whether a non-blank API key is configured."""
        return bool(self.api_key and self.api_key.strip())


class GenerationConfig(BaseSettings):
    """Generation sequence pacing and upload limits."""

    request_delay_seconds: float = Field(
        2.5, ge=0, description="Pause between consecutive angle requests"
    )
    rate_limit_cooldown_seconds: float = Field(
        60.0, ge=0, description="Cooldown imposed after a rate-limit error"
    )
    max_upload_mb: int = Field(15, ge=1, description="Maximum upload size in MiB")

    model_config = SettingsConfigDict(env_prefix="GENERATION_", case_sensitive=False)

    @property
    def max_upload_bytes(self) -> int:
        """Get upload limit in bytes."""
        return self.max_upload_mb * 1024 * 1024


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Logging level")

    model_config = SettingsConfigDict(env_prefix="LOG_", case_sensitive=False)


class AppConfig(BaseSettings):
    """Main application configuration."""

    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def from_yaml(cls, yaml_path: Path | str) -> "AppConfig":
        """Load configuration from YAML file.

        Sections missing from the file fall back to environment variables.
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        import yaml

        with yaml_path.open("r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config_data: dict[str, Any] = {}
        # Nested settings still pick up their env vars for keys absent from YAML
        if isinstance(yaml_data.get("gemini"), dict):
            config_data["gemini"] = GeminiConfig(**yaml_data["gemini"])
        if isinstance(yaml_data.get("generation"), dict):
            config_data["generation"] = GenerationConfig(**yaml_data["generation"])
        if isinstance(yaml_data.get("logging"), dict):
            config_data["logging"] = LoggingConfig(**yaml_data["logging"])

        return cls(**config_data)


# Global config instance
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get application configuration (singleton)."""
    global _config
    if _config is None:
        # Try to load from YAML first, then fallback to env-only
        config_path = Path("config.yaml")
        try:
            if config_path.exists():
                _config = AppConfig.from_yaml(config_path)
            else:
                _config = AppConfig()
        except Exception as e:
            logger.warning(f"Failed to load from YAML, using env only: {e}")
            _config = AppConfig()
        logger.info("Configuration loaded successfully")
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next call reloads it."""
    global _config
    _config = None
