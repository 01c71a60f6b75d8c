"""
Logging management for the Discord Playtime Bot.

Loads the packaged ``logging.yaml`` and applies it with environment-based
log levels:

- Development: DEBUG and above
- Staging: INFO and above
- Production: WARNING and above

When the YAML file is missing or unreadable a plain console (and optional
file) setup is used instead.
"""

import logging
import logging.config
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

NOISY_LOGGERS = (
    "discord.gateway",
    "discord.client",
    "discord.http",
    "uvicorn.access",
)


class Environment(Enum):
    """Environment enumeration."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


ENVIRONMENT_LEVELS = {
    Environment.DEVELOPMENT: "DEBUG",
    Environment.STAGING: "INFO",
    Environment.PRODUCTION: "WARNING",
}


class LoggingManager:
    """Centralized logging management with per-environment levels."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize logging manager.

        Args:
            config_path: Path to YAML configuration file. If None, uses the
                ``logging.yaml`` shipped inside the package.
        """
        if config_path is None:
            config_path = Path(__file__).parent.parent / "logging.yaml"

        self.config_path = config_path
        self._config_cache: Optional[Dict[str, Any]] = None
        self._environment = self._detect_environment()
        self._configured = False

    def _detect_environment(self) -> Environment:
        """Detect current environment from the ENVIRONMENT variable."""
        env = os.getenv("ENVIRONMENT", "development").lower()

        if env in ("prod", "production"):
            return Environment.PRODUCTION
        if env in ("staging", "stage"):
            return Environment.STAGING
        return Environment.DEVELOPMENT

    def _load_yaml_config(self) -> Optional[Dict[str, Any]]:
        """Load YAML logging configuration."""
        if self._config_cache is not None:
            return self._config_cache

        if not self.config_path.exists():
            return None

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except (yaml.YAMLError, OSError) as e:
            logging.getLogger(__name__).warning(
                f"Failed to load YAML logging config {self.config_path}: {e}"
            )
            return None

        self._config_cache = config
        return config

    def _apply_environment_levels(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Rewrite application logger levels for the detected environment."""
        level = self.get_environment_log_level()

        if "root" in config:
            config["root"]["level"] = level

        for name, logger_config in config.get("loggers", {}).items():
            if name in NOISY_LOGGERS:
                continue
            logger_config["level"] = level

        return config

    def get_environment_log_level(self) -> str:
        """Get the log level that matches the current environment."""
        return ENVIRONMENT_LEVELS[self._environment]

    def setup_logging(
        self,
        component_name: str,
        log_level: Optional[str] = None,
        log_file: Optional[str] = None,
    ) -> logging.Logger:
        """
        Set up logging for a component.

        Args:
            component_name: Name of the component (e.g. 'main_bot', 'access_gate')
            log_level: Override log level for this component
            log_file: Log file used by the fallback configuration

        Returns:
            Configured logger instance
        """
        config = self._load_yaml_config()

        if config is None:
            return self._setup_basic_logging(component_name, log_level, log_file)

        if not self._configured:
            config = self._apply_environment_levels(config)
            os.makedirs("logs", exist_ok=True)
            logging.config.dictConfig(config)
            self._suppress_noisy_loggers()
            self._configured = True

        logger = logging.getLogger(component_name)
        if log_level:
            logger.setLevel(getattr(logging, log_level.upper()))
        return logger

    def _setup_basic_logging(
        self,
        component_name: str,
        log_level: Optional[str],
        log_file: Optional[str],
    ) -> logging.Logger:
        """Set up basic logging when YAML config is not available."""
        logger = logging.getLogger(component_name)
        logger.setLevel(
            getattr(logging, (log_level or self.get_environment_log_level()).upper())
        )
        logger.handlers.clear()

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        self._suppress_noisy_loggers()
        return logger

    def _suppress_noisy_loggers(self):
        """Clamp chatty third-party loggers to WARNING."""
        for logger_name in NOISY_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    def get_environment(self) -> Environment:
        """Get current environment."""
        return self._environment

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self._environment == Environment.PRODUCTION


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Set up logging for a component (convenience function)."""
    return _logging_manager.setup_logging(component_name, log_level, log_file)


def get_environment() -> Environment:
    """Get current environment."""
    return _logging_manager.get_environment()


def is_production() -> bool:
    """Check if running in production mode."""
    return _logging_manager.is_production()
