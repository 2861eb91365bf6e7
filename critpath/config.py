"""Configuration Management with Pydantic.

Configuration controls how critpath renders node sequences and how it logs.
It is parsed from a YAML file, validated with Pydantic models, and may be
overridden through environment variables.
"""

import os
import threading
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from critpath.graph.nodes import DEFAULT_SEPARATOR
from critpath.log_config import LOG_LEVELS, get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_NAMES = ("critpath.yaml", "critpath.yml")


class RenderConfig(BaseModel):
    """Rendering settings for node sequences.

    Attributes:
        separator: Text placed between consecutive nodes of a rendered path
    """

    separator: str = Field(
        default=DEFAULT_SEPARATOR,
        min_length=1,
        description="Separator between rendered nodes",
    )


class LoggingConfig(BaseModel):
    """Logging settings.

    Attributes:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Emit JSON lines instead of console formatted events
    """

    level: str = Field(
        default="WARNING",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render log events as JSON",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize the level name and reject unknown levels.

        Raises:
            ValueError: If the level is not a standard logging level
        """
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            msg = f"Logging level must be one of {', '.join(LOG_LEVELS)}"
            raise ValueError(msg)
        return level


class CritpathConfig(BaseModel):
    """Top-level critpath configuration.

    Attributes:
        render: Node sequence rendering settings
        logging: Logging settings
    """

    render: RenderConfig = Field(default_factory=RenderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "CritpathConfig":
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file

        Returns:
            Parsed and validated CritpathConfig instance

        Raises:
            FileNotFoundError: If configuration file doesn't exist
            ValueError: If the file is empty, not valid YAML, or fails validation
        """
        config_path = Path(path)

        if not config_path.exists():
            msg = f"Configuration file not found: {config_path}"
            raise FileNotFoundError(msg)

        logger.info("loading_configuration", path=str(config_path))

        try:
            with config_path.open() as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.exception("yaml_parse_error", error=str(e), path=str(config_path))
            msg = f"Invalid YAML in configuration file: {e}"
            raise ValueError(msg) from e

        if not config_data:
            msg = "Configuration file is empty"
            raise ValueError(msg)

        if not isinstance(config_data, dict):
            msg = "Configuration file must contain a mapping"
            raise ValueError(msg)

        config = cls(**cls._apply_env_overrides(config_data))

        logger.info(
            "configuration_loaded",
            separator=config.render.separator,
            logging_level=config.logging.level,
        )

        return config

    @classmethod
    def _apply_env_overrides(cls, config_data: dict) -> dict:
        """Apply environment variable overrides to configuration.

        Environment variables follow the pattern: CRITPATH_<SECTION>_<KEY>

        Args:
            config_data: Base configuration dictionary from file

        Returns:
            Configuration dictionary with environment overrides applied
        """
        env_overrides = {
            ("render", "separator"): "CRITPATH_RENDER_SEPARATOR",
            ("logging", "level"): "CRITPATH_LOGGING_LEVEL",
            ("logging", "json_logs"): "CRITPATH_LOGGING_JSON",
        }

        for path, env_var in env_overrides.items():
            value = os.environ.get(env_var)
            if value is None:
                continue

            current = config_data
            for key in path[:-1]:
                if not isinstance(current.get(key), dict):
                    current[key] = {}
                current = current[key]

            if env_var.endswith("_JSON"):
                current[path[-1]] = value.lower() in ("true", "1", "yes")
            else:
                current[path[-1]] = value

            logger.debug(
                "env_override_applied",
                env_var=env_var,
                config_path=".".join(path),
            )

        return config_data

    def validate_config(self) -> list[str]:
        """Validate configuration and return list of warnings.

        Returns:
            List of validation warning messages (empty if no warnings)
        """
        warnings = []

        if not self.render.separator.strip():
            warnings.append("Render separator is whitespace only - paths may be hard to read")

        if self.logging.level == "DEBUG":
            warnings.append("DEBUG logging emits one event per edge mutation")

        return warnings


class ConfigManager:
    """Configuration manager using singleton pattern."""

    _instance: CritpathConfig | None = None
    _init_lock: threading.Lock = threading.Lock()

    @classmethod
    def load_config(cls, config_path: str | Path | None = None) -> CritpathConfig:
        """Load configuration from file.

        Args:
            config_path: Path to configuration file. If None, looks for
                critpath.yaml or critpath.yml in the current directory and
                falls back to the defaults when neither exists.

        Returns:
            Loaded CritpathConfig instance

        Raises:
            FileNotFoundError: If an explicit config_path does not exist
            ValueError: If the config file is invalid
        """
        if config_path is None:
            for default_name in DEFAULT_CONFIG_NAMES:
                default_path = Path(default_name)
                if default_path.exists():
                    config_path = default_path
                    break
            else:
                logger.debug("no_configuration_file_using_defaults")
                return CritpathConfig()

        return CritpathConfig.from_yaml(config_path)

    @classmethod
    def get_config(
        cls,
        config_path: str | Path | None = None,
        reload: bool = False,
    ) -> CritpathConfig:
        """Get configuration instance (singleton pattern).

        Uses double-checked locking so concurrent first calls load the file
        only once.

        Args:
            config_path: Path to configuration file. Only used on first call or when reload=True.
            reload: If True, force reload configuration from file.

        Returns:
            CritpathConfig instance
        """
        if cls._instance is not None and not reload:
            return cls._instance

        with cls._init_lock:
            if cls._instance is None or reload:
                cls._instance = cls.load_config(config_path)

            return cls._instance

    @classmethod
    def reset_config(cls) -> None:
        """Reset the configuration instance."""
        cls._instance = None


def load_config(config_path: str | Path | None = None) -> CritpathConfig:
    """Load configuration from file."""
    return ConfigManager.load_config(config_path)


def get_config(config_path: str | Path | None = None, reload: bool = False) -> CritpathConfig:
    """Get configuration instance (singleton pattern)."""
    return ConfigManager.get_config(config_path, reload)


def reset_config() -> None:
    """Reset the configuration instance."""
    ConfigManager.reset_config()


__all__ = [
    "ConfigManager",
    "CritpathConfig",
    "LoggingConfig",
    "RenderConfig",
    "get_config",
    "load_config",
    "reset_config",
]
