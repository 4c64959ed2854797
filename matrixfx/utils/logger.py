"""Logging utilities."""

import logging

from matrixfx.core.config import LoggingConfig


def setup_logging(config: LoggingConfig, log_to_file: bool = True) -> None:
    """Setup application logging.

    Args:
        config: Logging configuration
        log_to_file: Also write to ``config.file``

    Raises:
        ValueError: If ``config.level`` is not a logging level name
    """
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {config.level}")

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_to_file:
        handlers.insert(0, logging.FileHandler(config.file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
