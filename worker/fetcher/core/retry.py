"""Bounded retry with linear backoff for Places API calls."""

import logging
import time
from typing import Callable, Optional

import requests

from fetcher.core.errors import ProviderFatalError, ProviderTransientError
from fetcher.vendors.google_places import PlacesResponse

logger = logging.getLogger(__name__)

RETRYABLE_EXCEPTIONS = (ProviderTransientError, requests.RequestException, ValueError)


def call_with_retry(
    call: Callable[[], PlacesResponse],
    *,
    label: str,
    retries: int,
    retry_delay_ms: int,
) -> PlacesResponse:
    """Run ``call`` until it succeeds, fails hard, or ``retries`` attempts are spent.

    Attempt ``n`` failing transiently waits ``retry_delay_ms * n`` before the next
    one. Hard failures and exhausted budgets surface as :class:`ProviderFatalError`.
    """
    last_error: Optional[Exception] = None
    for attempt in range(1, retries + 1):
        try:
            response = call()
            response.raise_for_outcome()
            return response
        except ProviderFatalError:
            raise
        except RETRYABLE_EXCEPTIONS as exc:
            last_error = exc
            logger.warning("%s: %s (attempt %d/%d)", label, _describe(exc), attempt, retries)
            if attempt < retries:
                time.sleep(retry_delay_ms * attempt / 1000)

    logger.error("%s: exhausted %d attempts", label, retries)
    code = getattr(last_error, "code", None) or type(last_error).__name__
    raise ProviderFatalError(f"{label}: {_describe(last_error)}", code=code) from last_error


def _describe(exc: Optional[Exception]) -> str:
    code = getattr(exc, "code", None)
    if code:
        return f"{code} - {exc or '(no message)'}"
    return f"exception {exc!r}"
