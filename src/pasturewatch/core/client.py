"""REST client for the hosted farm-management store - core functions only.

The store exposes a PostgREST-compatible API: one endpoint per table under
`/rest/v1/`, filters as query parameters (`lot_id=eq.<id>`,
`fecha=gte.2026-01-01`), ordering via `order=<column>.desc`.
"""

import logging

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from pasturewatch.core.config import settings

logger = logging.getLogger(__name__)

REST_PATH = "/rest/v1"

# =============================================================================
# Retry Configuration
# =============================================================================

MAX_RETRIES = 3
MIN_WAIT_SECONDS = 1
MAX_WAIT_SECONDS = 10


# =============================================================================
# Exceptions
# =============================================================================


class RetryableError(Exception):
    """Transient error that should be retried (timeouts, connection errors, 5xx)."""

    pass


class RepositoryError(Exception):
    """Non-retryable error fetching data from the store."""

    pass


# =============================================================================
# Client Functions
# =============================================================================


def _headers() -> dict[str, str]:
    headers = {"Accept": "application/json"}
    if settings.store_api_key:
        headers["apikey"] = settings.store_api_key
        headers["Authorization"] = f"Bearer {settings.store_api_key}"
    return headers


async def rest_get(table: str, params: dict[str, str] | list[tuple[str, str]] | None = None) -> list[dict]:
    """Fetch rows from a store table.

    This is the low-level function that makes a single request without retry.
    For most use cases, prefer `rest_get_with_retry()` which handles transient errors.

    Args:
        table: Table name, e.g. "monitoreo_pasturas"
        params: PostgREST filter/order parameters

    Returns:
        List of row dictionaries

    Raises:
        httpx.HTTPStatusError: If the HTTP request fails
        RepositoryError: If the response body is not a JSON list
    """
    url = f"{settings.store_url.rstrip('/')}{REST_PATH}/{table}"

    async with httpx.AsyncClient() as client:
        response = await client.get(url, headers=_headers(), params=params, timeout=30)
        response.raise_for_status()

        rows = response.json()

    if not isinstance(rows, list):
        raise RepositoryError(f"Unexpected response for {table}: expected a list of rows")
    return rows


@retry(
    retry=retry_if_exception_type(RetryableError),
    stop=stop_after_attempt(MAX_RETRIES),
    wait=wait_exponential_jitter(initial=MIN_WAIT_SECONDS, max=MAX_WAIT_SECONDS, jitter=2),
    reraise=True,
)
async def _rest_get_retrying(table: str, params: dict[str, str] | list[tuple[str, str]] | None = None) -> list[dict]:
    try:
        return await rest_get(table, params)
    except httpx.TimeoutException as e:
        logger.warning("Timeout fetching %s, will retry: %s", table, e)
        raise RetryableError(f"Request timed out: {e}") from e
    except httpx.ConnectError as e:
        logger.warning("Connection failed fetching %s, will retry: %s", table, e)
        raise RetryableError(f"Connection failed: {e}") from e
    except httpx.TransportError as e:
        logger.warning("Transport error fetching %s, will retry: %s", table, e)
        raise RetryableError(f"Transport error: {e}") from e
    except httpx.HTTPStatusError as e:
        try:
            body = e.response.text
        except httpx.ResponseNotRead:
            body = "(unable to read response body)"

        if e.response.status_code >= 500:
            logger.warning("HTTP %s fetching %s, will retry", e.response.status_code, table)
            raise RetryableError(f"HTTP {e.response.status_code}: {body}") from e
        # Client error (4xx) - don't retry, include full response
        raise RepositoryError(f"HTTP {e.response.status_code}: {body}") from e
    except ValueError as e:
        # Malformed JSON body
        raise RepositoryError(f"Invalid JSON from {table}: {e}") from e


async def rest_get_with_retry(
    table: str,
    params: dict[str, str] | list[tuple[str, str]] | None = None,
) -> list[dict]:
    """Fetch rows with automatic retry on transient errors.

    Retries on:
    - Timeouts
    - Connection errors and other transport failures (resets, protocol errors)
    - HTTP 5xx errors

    After MAX_RETRIES failures, raises RepositoryError.

    Raises:
        RepositoryError: If all retries fail or a non-retryable error occurs
    """
    try:
        return await _rest_get_retrying(table, params)
    except RetryableError as e:
        raise RepositoryError(f"Giving up on {table} after {MAX_RETRIES} attempts: {e}") from e
