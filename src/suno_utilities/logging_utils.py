#!/usr/bin/env python3
""" Common logging setup for the Suno failover client """

import logging
import sys
from pathlib import Path

# Public API - functions and classes that external scripts should use
__all__ = [
    'EnhancedLogger',
    'setup_logging',
    'mask_secret'
]


class EnhancedLogger:
    """ Enhanced logger with custom methods for better formatting """

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def header(self, text: str) -> None:
        """ Log a formatted header with dashes and uppercase text """
        self._logger.info("")
        formatted_text = f"---- {text.upper()} ----"
        self._logger.info(formatted_text)

    def __getattr__(self, name):
        """ Delegate all other methods to the underlying logger """
        return getattr(self._logger, name)


def setup_logging(
    log_file: str | None = "suno_failover.log",
    debug: bool = False,
    script_name: str | None = None
) -> EnhancedLogger:
    """ Standard logging setup for the command line front end """
    level = logging.DEBUG if debug else logging.INFO

    # stdout carries the JSON result, so console logging goes to stderr
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode='a'))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)-8s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers,
        force=True
    )

    base_logger = logging.getLogger(script_name or __name__)
    return EnhancedLogger(base_logger)


def mask_secret(secret: str | None, visible: int = 20) -> str:
    """ Shorten a cookie or token so it can be logged """
    if not secret:
        return "<empty>"
    if len(secret) <= visible:
        return secret[:4] + "..."
    return secret[:visible] + "..."
