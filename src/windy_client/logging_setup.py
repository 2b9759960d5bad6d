"""Logging configuration shared by the CLI and library callers."""

from __future__ import annotations

import logging
import os
from typing import Union


__all__ = ["setup_logging"]


_DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_ENV_VAR = "WINDY_LOG_LEVEL"
# Connection-pool chatter drowns out the client's own DEBUG records.
_NOISY_LOGGERS = ("urllib3", "requests")


def _coerce_level(value: Union[str, int]) -> int:
    if isinstance(value, int):
        return value

    candidate = str(value).strip()
    if not candidate:
        raise ValueError("Log level cannot be empty")

    if candidate.lstrip("-").isdigit():
        return int(candidate)

    levels = logging.getLevelNamesMapping()
    try:
        return levels[candidate.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level: {value}") from None


def setup_logging(level: Union[str, int] = "INFO", *, quiet_http: bool = True) -> None:
    """Configure root logging for windy_client.

    Parameters
    ----------
    level:
        Standard level name (``"DEBUG"``) or number. The ``WINDY_LOG_LEVEL``
        environment variable takes precedence when set.
    quiet_http:
        Keep ``urllib3``/``requests`` at WARNING even when the root is more
        verbose.

    Examples
    --------
    >>> from windy_client.logging_setup import setup_logging
    >>> setup_logging("DEBUG")
    """

    env_level = os.getenv(_ENV_VAR)
    resolved_level = _coerce_level(env_level) if env_level else _coerce_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    formatter = logging.Formatter(fmt=_DEFAULT_FORMAT)

    if not root_logger.handlers:
        root_logger.addHandler(logging.StreamHandler())
    for handler in root_logger.handlers:
        handler.setLevel(resolved_level)
        handler.setFormatter(formatter)

    if quiet_http:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(resolved_level, logging.WARNING))

    logging.captureWarnings(True)
