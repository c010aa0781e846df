#!/usr/bin/env python3
""" Network utilities with retry logic for API calls """

from __future__ import annotations

import json
import logging
import random
import time
from typing import Callable, Final, Sequence

import requests

# Public API - functions and classes that external scripts should use
__all__ = [
    'NetworkRetry',
    'random_sleep'
]


class NetworkRetry:
    """ Network request retry utilities for handling transient failures """

    INITIAL_BACKOFF_SECONDS: Final[float] = 1.0
    BACKOFF_MULTIPLIER: Final[float] = 2.0

    @staticmethod
    def _log_error_response(response: requests.Response, attempt: int, attempts: int) -> None:
        """ Capture the error response body before the exception is raised """
        logger = logging.getLogger(__name__)
        logger.error("NetworkRetry.execute: HTTP %s from %s (attempt %s/%s)",
                     response.status_code, response.url, attempt, attempts)
        try:
            error_body = response.json()
            logger.debug("  Error Response Body: %s", json.dumps(error_body, indent=2))
        except ValueError:
            logger.debug("  Error Response Body (raw, first 1000 chars): %s", response.text[:1000])

    @staticmethod
    def execute(
        request_func: Callable[[], requests.Response],
        max_retries: int = 0,
        initial_backoff: float = INITIAL_BACKOFF_SECONDS,
        backoff_multiplier: float = BACKOFF_MULTIPLIER
    ) -> requests.Response:
        """ Execute a request function, raising on non-2xx, with optional exponential backoff """
        logger = logging.getLogger(__name__)
        attempts = max_retries + 1

        for attempt in range(attempts):
            try:
                logger.debug("NetworkRetry.execute: Attempt %s/%s", attempt + 1, attempts)
                response = request_func()
                logger.debug("NetworkRetry.execute: Response received - Status: %s, URL: %s",
                             response.status_code, response.url)

                if not response.ok:
                    NetworkRetry._log_error_response(response, attempt + 1, attempts)

                response.raise_for_status()
                return response
            except requests.exceptions.RequestException as exc:
                logger.debug("NetworkRetry.execute: %s on attempt %s/%s: %s",
                             type(exc).__name__, attempt + 1, attempts, exc)
                if attempt < max_retries:
                    wait_time = initial_backoff * (backoff_multiplier ** attempt)
                    logger.debug("NetworkRetry.execute: Retrying in %.2f seconds...", wait_time)
                    time.sleep(wait_time)
                    continue
                raise

        raise RuntimeError("Retry logic failed unexpectedly")


def random_sleep(bounds: Sequence[int] | int) -> int:
    """ Sleep a whole number of seconds picked uniformly between the bounds.

    A single bound sleeps exactly that long. Returns the seconds slept.
    """
    if isinstance(bounds, int):
        low = high = bounds
    elif len(bounds) == 1:
        low = high = bounds[0]
    else:
        low, high = min(bounds[0], bounds[1]), max(bounds[0], bounds[1])

    seconds = low if low == high else random.randint(low, high)
    time.sleep(seconds)
    return seconds
