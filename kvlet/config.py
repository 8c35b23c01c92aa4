from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigError

DEFAULT_DB_NAME = "kvlet.db"


class LogConfig(BaseModel):
    """Configuration for the kvlet log file."""

    enabled: bool = True
    path: str = "log/kvlet.log"
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


class KvletConfig(BaseModel):
    """Top-level configuration model."""

    home: Optional[str] = None
    db_name: str = DEFAULT_DB_NAME
    backend: Literal["sqlite", "inmemory"] = "sqlite"
    request_timeout: float = Field(default=30.0, gt=0)
    log: LogConfig = LogConfig()

    @property
    def home_dir(self) -> Path:
        return Path(self.home).expanduser() if self.home else Path.cwd()

    @property
    def db_path(self) -> Path:
        return self.home_dir / self.db_name

    @property
    def log_path(self) -> Path:
        path = Path(self.log.path).expanduser()
        return path if path.is_absolute() else self.home_dir / path


def load_config(path: Optional[str] = None) -> KvletConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to KVLET_CONFIG env
            variable or 'kvlet.yaml' in the current directory.
    """

    config_path = path or os.getenv("KVLET_CONFIG", "kvlet.yaml")
    data: dict = {}
    if os.path.exists(config_path):
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid config file {config_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

    env_home = os.getenv("KVLET_HOME")
    if env_home:
        data["home"] = env_home
    env_timeout = os.getenv("KVLET_REQUEST_TIMEOUT")
    if env_timeout:
        data["request_timeout"] = env_timeout

    try:
        return KvletConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
