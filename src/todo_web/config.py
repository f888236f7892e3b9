"""Configuration management for the Todo Web application."""

import logging
import os
from pathlib import Path
from dataclasses import dataclass, asdict
from typing import Optional
import yaml


logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TODO_WEB_CONFIG"
STORAGE_ENV_VAR = "TODO_WEB_STORAGE"
STORAGE_BACKENDS = ("session", "database")


@dataclass
class ConfigModel:
    """Global configuration model for Todo Web."""

    app_name: str = "Todo Lists"

    # Session cookie signing
    session_secret: str = "change-me-in-production"

    # Storage backend: "session" keeps lists in the browser session,
    # "database" keeps them in SQLite at database_path
    storage: str = "session"
    data_dir: str = "~/.todo_web"
    database_path: str = ""

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: str = "info"

    def __post_init__(self):
        """Post-initialization setup."""
        self.data_dir = os.path.expanduser(self.data_dir)
        if not self.database_path:
            self.database_path = str(Path(self.data_dir) / "todos.db")
        self.database_path = os.path.expanduser(self.database_path)

        if self.storage not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown storage backend '{self.storage}', "
                f"expected one of: {', '.join(STORAGE_BACKENDS)}"
            )

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        return yaml.dump(asdict(self), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML, ignoring unknown keys."""
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a YAML mapping")

        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")

        return cls(**{key: value for key, value in data.items() if key in known})

    def get_config_path(self) -> Path:
        """Get the default config file path."""
        return Path(self.data_dir) / "config.yaml"


def default_config_path() -> Path:
    """Config path from the environment, or the default under ~/.todo_web."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return ConfigModel().get_config_path()


class Config:
    """Configuration manager for Todo Web."""

    _instance: Optional[ConfigModel] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Load configuration from file, falling back to defaults."""
        if cls._instance is not None:
            return cls._instance

        if config_path is None:
            config_path = default_config_path()

        config = ConfigModel()

        if config_path.exists():
            try:
                config = ConfigModel.from_yaml(config_path.read_text())
                logger.info(f"Loaded configuration from {config_path}")
            except (yaml.YAMLError, ValueError, TypeError) as e:
                logger.warning(f"Failed to load config from {config_path}: {e}")
                logger.warning("Using default configuration.")
                config = ConfigModel()
        else:
            logger.debug(f"No configuration at {config_path}, using defaults")

        storage = os.environ.get(STORAGE_ENV_VAR)
        if storage:
            if storage in STORAGE_BACKENDS:
                config.storage = storage
            else:
                logger.warning(f"Ignoring {STORAGE_ENV_VAR}={storage}: unknown storage backend")

        cls._instance = config
        return config

    @classmethod
    def save(cls, config: ConfigModel, config_path: Optional[Path] = None) -> Path:
        """Save configuration to file."""
        if config_path is None:
            config_path = default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(config.to_yaml())
        logger.info(f"Configuration saved to {config_path}")
        return config_path

    @classmethod
    def get(cls) -> ConfigModel:
        """Get the current configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reload(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Reload configuration from file."""
        cls._instance = None
        return cls.load(config_path)


def get_config() -> ConfigModel:
    """Get the current configuration."""
    return Config.get()


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file."""
    return Config.load(config_path)


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> Path:
    """Save configuration to file."""
    return Config.save(config, config_path)


def reset_config():
    """Reset global configuration instance (for testing)."""
    Config._instance = None
