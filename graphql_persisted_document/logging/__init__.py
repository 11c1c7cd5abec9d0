"""Logging infrastructure for graphql-persisted-document.

Example:
    >>> from graphql_persisted_document.logging import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("Processing started")

Note:
    Modules in this package never call ``logging.getLogger`` directly; they use
    get_logger() for consistent Prefect integration.
"""

from .logging_config import LoggingConfig, get_logger, setup_logging

__all__ = [
    "LoggingConfig",
    "get_logger",
    "setup_logging",
]
