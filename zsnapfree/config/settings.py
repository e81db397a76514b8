"""Application settings and configuration."""

import os
from pathlib import Path
from typing import List, Optional

import yaml  # type: ignore[import-untyped]
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Optional TOML support
try:
    import tomllib as tomli
except ImportError:
    try:
        import tomli  # type: ignore[no-redef]
    except ImportError:
        tomli = None  # type: ignore[assignment]

ENV_PREFIX = "ZSNAPFREE_"


class Settings(BaseSettings):
    """Application settings with environment variable and file support."""

    # External tool
    zfs: str = Field(
        default="zfs",
        description="zfs binary to invoke (name on PATH or absolute path)",
    )

    # Recompute loop
    idle_timeout_ms: int = Field(
        default=500,
        description="Input idle time in milliseconds before a stale estimate is recomputed",
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Logging level")
    log_file: Optional[Path] = Field(
        default=None, description="Write log records to this file (rotated)"
    )
    log_max_bytes: int = Field(default=1_048_576, description="Rotate the log file at this size")
    log_backup_count: int = Field(default=3, description="Number of rotated log files to keep")

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("zfs")
    @classmethod
    def validate_zfs(cls, v: str) -> str:
        """Validate the zfs binary is not blank."""
        if not v.strip():
            raise ValueError("zfs must name a binary, got an empty string")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @field_validator("idle_timeout_ms")
    @classmethod
    def validate_idle_timeout(cls, v: int) -> int:
        """Validate idle timeout is positive."""
        if v <= 0:
            raise ValueError(f"idle_timeout_ms must be positive, got {v}")
        return v

    @field_validator("log_max_bytes", "log_backup_count")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"value must not be negative, got {v}")
        return v

    @property
    def idle_timeout(self) -> float:
        """Idle timeout in seconds."""
        return self.idle_timeout_ms / 1000.0

    @classmethod
    def from_file(cls, config_path: Path) -> "Settings":
        """Load settings from a YAML or TOML file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        suffix = config_path.suffix.lower()
        if suffix == ".yaml" or suffix == ".yml":
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    config_data = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ValueError(f"Error parsing YAML file: {exc}") from exc
        elif suffix == ".toml":
            if tomli is None:
                raise ImportError(
                    "TOML support requires 'tomli' package. Install with: pip install tomli"
                )
            with open(config_path, "rb") as f:
                config_data = tomli.load(f)
        else:
            raise ValueError(f"Unsupported configuration file format: {suffix}")

        # Override with environment variables
        env_overrides = {}
        for key, value in os.environ.items():
            if key.upper().startswith(ENV_PREFIX):
                config_key = key[len(ENV_PREFIX) :].lower()
                env_overrides[config_key] = value

        # Merge file config with env overrides
        if config_data:
            config_data.update(env_overrides)
            return cls(**config_data)  # type: ignore[arg-type]
        else:
            return cls(**env_overrides)  # type: ignore[arg-type]


def default_config_paths() -> List[Path]:
    """Locations searched for a configuration file, in order."""
    user_dir = Path.home() / ".config" / "zsnapfree"
    return [
        Path("zsnapfree.yaml"),
        Path("zsnapfree.yml"),
        Path("zsnapfree.toml"),
        user_dir / "zsnapfree.yaml",
        user_dir / "zsnapfree.yml",
        user_dir / "zsnapfree.toml",
    ]


# Module-level settings cache (singleton pattern)
_settings: Optional[Settings] = None


def get_settings(config_file: Optional[Path] = None) -> Settings:
    """
    Get or create the global settings instance.

    Args:
        config_file: Explicit configuration file; when omitted the default
            locations are searched and the first existing file is used

    Returns:
        The cached Settings instance
    """
    global _settings  # noqa: PLW0603
    if _settings is None:
        if config_file is None:
            for path in default_config_paths():
                if path.exists():
                    config_file = path
                    break

        if config_file:
            _settings = Settings.from_file(config_file)
        else:
            _settings = Settings()

    assert _settings is not None, "Settings should be initialized"
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() reloads them."""
    global _settings  # noqa: PLW0603
    _settings = None
