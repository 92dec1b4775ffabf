"""
Logger configuration.

Installs a single stdout handler on the root logger.

Dependencies: logging (stdlib), knowledge_rag.configs
System role: Centralized logging configuration
"""

import logging
import sys

from knowledge_rag.configs import get_settings

NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "google", "grpc", "sqlalchemy.engine", "asyncio")


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging with timestamped output.

    Args:
        level: Log level name (defaults to settings.log_level)
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel((level or get_settings().log_level).upper())
    root_logger.addHandler(handler)

    # Third-party clients log every request at INFO
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
