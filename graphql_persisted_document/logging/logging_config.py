"""Centralized logging configuration for graphql-persisted-document.

Loggers come from Prefect's logging system so build steps running inside
Prefect flows report into the same handlers. Configuration is a standard
``logging.config.dictConfig`` mapping, loaded from YAML when a file is given.
Prefect places every logger it hands out under ``prefect.``, so package loggers
are configured as ``prefect.graphql_persisted_document``.

Usage:
    >>> from graphql_persisted_document.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Processing started")

Environment variables:
    GRAPHQL_PERSISTED_LOGGING_CONFIG: Path to custom logging.yml
    GRAPHQL_PERSISTED_LOG_LEVEL: Default log level (INFO, DEBUG, etc.)
    PREFECT_LOGGING_LEVEL: Prefect's logging level
    PREFECT_LOGGING_SETTINGS_PATH: Alternative config path
"""

import logging.config
import os
from pathlib import Path
from typing import Any

import yaml
from prefect.logging import get_logger as get_prefect_logger

DEFAULT_LOG_LEVELS = {
    "graphql_persisted_document": "INFO",
    "graphql_persisted_document.documents": "INFO",
    "graphql_persisted_document.loader": "INFO",
}


class LoggingConfig:
    """Manages logging configuration for the loader.

    Configuration precedence:
        1. Explicit config_path parameter
        2. GRAPHQL_PERSISTED_LOGGING_CONFIG environment variable
        3. PREFECT_LOGGING_SETTINGS_PATH environment variable
        4. Default configuration

    Configuration is lazy-loaded and cached after first access.
    """

    def __init__(self, config_path: Path | None = None):
        self.config_path = config_path or self._get_default_config_path()
        self._config: dict[str, Any] | None = None

    @staticmethod
    def _get_default_config_path() -> Path | None:
        if env_path := os.environ.get("GRAPHQL_PERSISTED_LOGGING_CONFIG"):
            return Path(env_path)

        if prefect_path := os.environ.get("PREFECT_LOGGING_SETTINGS_PATH"):
            return Path(prefect_path)

        return None

    def load_config(self) -> dict[str, Any]:
        """Load logging configuration from file or defaults.

        Returns:
            Dictionary in ``logging.config.dictConfig`` format. Cached after the
            first call; create a new LoggingConfig to reload from disk.
        """
        if self._config is None:
            if self.config_path and self.config_path.exists():
                with open(self.config_path, "r") as f:
                    self._config = yaml.safe_load(f)
            else:
                self._config = self._get_default_config()
        assert self._config is not None
        return self._config

    @staticmethod
    def _get_default_config() -> dict[str, Any]:
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s - %(message)s",
                    "datefmt": "%H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "prefect.graphql_persisted_document": {
                    "level": os.environ.get("GRAPHQL_PERSISTED_LOG_LEVEL", "INFO"),
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
            "root": {
                "level": "WARNING",
                "handlers": ["console"],
            },
        }

    def apply(self):
        """Apply the configuration to Python's logging system.

        Also exports PREFECT_LOGGING_LEVEL when the configuration has a
        ``prefect`` logger entry and the variable is not already set.
        """
        config = self.load_config()
        logging.config.dictConfig(config)

        if "prefect" in config.get("loggers", {}):
            prefect_level = config["loggers"]["prefect"].get("level", "INFO")
            os.environ.setdefault("PREFECT_LOGGING_LEVEL", prefect_level)


_logging_config: LoggingConfig | None = None


def setup_logging(config_path: Path | None = None, level: str | None = None):
    """Initialize and apply logging configuration.

    Args:
        config_path: Optional path to a YAML logging configuration file.
        level: Optional level override applied to every package logger and
            exported as PREFECT_LOGGING_LEVEL.
    """
    global _logging_config

    _logging_config = LoggingConfig(config_path)
    _logging_config.apply()

    if level:
        for logger_name in DEFAULT_LOG_LEVELS:
            logger = get_prefect_logger(logger_name)
            logger.setLevel(level)

        os.environ["PREFECT_LOGGING_LEVEL"] = level


def get_logger(name: str):
    """Get a Prefect-integrated logger, configuring logging on first use."""
    if _logging_config is None:
        setup_logging()

    return get_prefect_logger(name)
