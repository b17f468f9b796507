"""Configuration management for the journal tool."""

import logging
import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from mct import PROJECT_DIR

ENVIRONMENTS = ("prd", "acc", "dev", "local")


class DecoderConfig(BaseModel):
    """Stream decoder settings."""

    queue_maxsize: int = Field(default=64, ge=0, description="Undelivered entries before the decoder waits (0 = unbounded)")
    encoding: str = Field(default="utf-8", description="Text encoding for str input and for displayed arguments")

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v):
        """Reject encodings Python does not know."""
        try:
            "".encode(v)
        except LookupError as err:
            raise ValueError(f"Unknown encoding: {v}") from err
        return v


class ProjectConfig(BaseModel):
    """Top-level configuration."""

    env: str = Field(default="local")
    log_level: str = Field(default="WARNING")
    output_format: Literal["table", "english"] = Field(default="table")
    decoder: DecoderConfig = Field(default_factory=DecoderConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Accept any standard logging level name, case-insensitively."""
        level = str(v).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @classmethod
    def from_yaml_and_env(
        cls, config_path: str | Path = "mct_config.yml", env: str = "local", env_dir: str | Path = "config"
    ) -> "ProjectConfig":
        """Load configuration from both YAML and environment files.

        A missing YAML file (or a file without a section for ``env``) yields
        the defaults; MCT_* environment variables win over YAML values.
        """
        if env not in ENVIRONMENTS:
            raise ValueError(f"Invalid environment: {env}")

        # Load environment-specific .env file
        env_file = Path(env_dir) / f".env.{env}"
        if env_file.exists():
            load_dotenv(env_file, override=True)
        else:
            # Fallback to root .env if exists
            load_dotenv(override=True)

        # Load YAML config
        env_config: dict = {}
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f) or {}
            env_config = yaml_config.get(env) or {}

        decoder_yaml = env_config.get("decoder") or {}
        decoder_config = DecoderConfig(
            queue_maxsize=int(os.getenv("MCT_QUEUE_MAXSIZE", decoder_yaml.get("queue_maxsize", 64))),
            encoding=os.getenv("MCT_ENCODING", decoder_yaml.get("encoding", "utf-8")),
        )

        return cls(
            env=env,
            log_level=os.getenv("MCT_LOG_LEVEL", env_config.get("log_level", "WARNING")),
            output_format=os.getenv("MCT_OUTPUT_FORMAT", env_config.get("output_format", "table")),
            decoder=decoder_config,
        )


# Singleton pattern for config
_config: Optional[ProjectConfig] = None


def get_config(env: Optional[str] = None, config_path: Optional[str | Path] = None) -> ProjectConfig:
    """Get or create configuration singleton."""
    global _config
    if _config is None:
        env = env or os.getenv("MCT_ENV", "local")
        config_path = config_path or os.getenv("MCT_CONFIG", PROJECT_DIR / "mct_config.yml")
        _config = ProjectConfig.from_yaml_and_env(config_path=config_path, env=env, env_dir=PROJECT_DIR / "config")
    return _config


def reset_config():
    """Reset configuration singleton (useful for testing)."""
    global _config
    _config = None
