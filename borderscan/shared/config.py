"""
Configuration management for BorderScan.

Loads settings from borderscan.yaml and environment variables.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProcessingConfig(BaseModel):
    """Pixel pipeline configuration."""

    timeout_seconds: Optional[float] = None
    tracing_mode: Literal["simple", "split_merge"] = "simple"


class RenderConfig(BaseModel):
    """Contour overlay colors (RGBA)."""

    contour_color: tuple[int, int, int, int] = (255, 0, 0, 255)
    background_color: tuple[int, int, int, int] = (255, 255, 255, 255)


class OutputConfig(BaseModel):
    """Output image encoding configuration."""

    default_path: str = "out.png"
    default_format: str = "png"
    jpeg_quality: int = Field(default=90, ge=1, le=100)
    tiff_compression: str = "tiff_adobe_deflate"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    mode: Literal["auto", "json", "text"] = "auto"


class Settings(BaseSettings):
    """
    Main settings class for BorderScan.

    Loads configuration from borderscan.yaml and environment variables
    (BORDERSCAN_LOGGING__LEVEL=DEBUG and so on).
    """

    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="BORDERSCAN_",
        env_nested_delimiter="__",
    )


def load_config_file(config_path: Optional[Path] = None) -> dict[str, Any]:
    """
    Load configuration from YAML file.

    Looks for config files in order:
    1. Provided path
    2. borderscan.local.yaml (user's local overrides)
    3. borderscan.yaml (default config)

    Args:
        config_path: Optional explicit path to config file

    Returns:
        Configuration dictionary
    """
    config_dir = Path.cwd()

    config_files = [
        config_path,
        config_dir / "borderscan.local.yaml",
        config_dir / "borderscan.yaml",
    ]

    for cfg_file in config_files:
        if cfg_file and cfg_file.exists():
            with open(cfg_file) as f:
                return yaml.safe_load(f) or {}

    return {}


@lru_cache()
def get_settings(config_path: Optional[str] = None) -> Settings:
    """
    Get application settings (cached).

    Args:
        config_path: Optional path to config file

    Returns:
        Settings instance
    """
    config_data = load_config_file(Path(config_path) if config_path else None)
    return Settings(**config_data)


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """
    Reload settings, clearing the cache.

    Args:
        config_path: Optional path to config file

    Returns:
        Fresh Settings instance
    """
    get_settings.cache_clear()
    return get_settings(config_path)
