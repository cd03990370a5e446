"""Async JSON GET with bounded retry, backoff, and invalid-parameter recovery."""

import asyncio
import json
import logging
import re
from typing import Any

import httpx

from surfengine.ingest.errors import InvalidParameterError, ProviderError, UpstreamFetchError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})
INVALID_PARAM_STATUS = frozenset({400, 422})

# Open-Meteo: "Cannot initialize X from invalid String value foo for key hourly"
_OPEN_METEO_INVALID = re.compile(r"invalid String value (?P<value>[\w.-]+) for key (?P<key>\w+)")


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, str],
    *,
    provider: str,
    headers: dict[str, str] | None = None,
    timeout: float = 12.0,
    max_attempts: int = 2,
    retry_base_delay: float = 0.5,
) -> Any:
    """GET a JSON document.

    Network errors and 429/5xx responses are retried up to ``max_attempts``
    times with exponential backoff. A 400/422 that names a rejected parameter
    drops that parameter and retries once; any other 4xx raises immediately.

    Raises:
        UpstreamFetchError: retries exhausted.
        InvalidParameterError: parameter rejected and not recoverable.
        ProviderError: any other non-success status.
    """
    params = dict(params)
    stripped: str | None = None
    attempt = 0

    while True:
        try:
            resp = await client.get(url, params=params, headers=headers, timeout=timeout)
        except httpx.RequestError as e:
            attempt += 1
            if attempt >= max_attempts:
                raise UpstreamFetchError(f"{provider} request failed: {e}") from e
            delay = retry_base_delay * (2 ** (attempt - 1))
            logger.warning(
                "%s request error, retrying in %.1fs (attempt %d/%d): %s",
                provider, delay, attempt, max_attempts, e,
            )
            await asyncio.sleep(delay)
            continue

        if resp.status_code < 400:
            return resp.json()

        body = resp.text
        if resp.status_code in RETRYABLE_STATUS:
            attempt += 1
            if attempt >= max_attempts:
                raise UpstreamFetchError(
                    f"{provider} returned {resp.status_code}",
                    status_code=resp.status_code, body=body,
                )
            delay = retry_base_delay * (2 ** (attempt - 1))
            logger.warning(
                "%s returned %d, retrying in %.1fs (attempt %d/%d)",
                provider, resp.status_code, delay, attempt, max_attempts,
            )
            await asyncio.sleep(delay)
            continue

        if resp.status_code in INVALID_PARAM_STATUS:
            bad = find_invalid_parameter(body, params)
            if bad is not None and stripped is None:
                key, value = bad
                params = strip_parameter(params, key, value)
                stripped = key if value is None else f"{key}={value}"
                logger.warning(
                    "%s rejected parameter %s, retrying without it", provider, stripped
                )
                continue
            raise InvalidParameterError(
                f"{provider} rejected request ({resp.status_code}): {body}",
                parameter=bad[0] if bad else stripped,
                status_code=resp.status_code, body=body,
            )

        logger.error("%s %d: %s -> %s", provider, resp.status_code, url, body)
        raise ProviderError(
            f"{provider} returned {resp.status_code}",
            status_code=resp.status_code, body=body,
        )


def find_invalid_parameter(
    body: str, params: dict[str, str]
) -> tuple[str, str | None] | None:
    """Locate the rejected (key, list item) in an error body.

    The item is None when the whole parameter should be dropped.
    """
    m = _OPEN_METEO_INVALID.search(body)
    if m and m.group("key") in params:
        return m.group("key"), m.group("value")

    # Stormglass: {"errors": {"<param>": "<message>"}}
    try:
        data = json.loads(body)
    except ValueError:
        return None
    errors = data.get("errors") if isinstance(data, dict) else None
    if isinstance(errors, dict):
        for key in errors:
            if key in params:
                return key, None
    return None


def strip_parameter(
    params: dict[str, str], key: str, value: str | None
) -> dict[str, str]:
    """Copy of params without the key, or without one item of a comma list."""
    out = dict(params)
    if value is None:
        out.pop(key, None)
        return out
    items = [v for v in out.get(key, "").split(",") if v and v != value]
    if items:
        out[key] = ",".join(items)
    else:
        out.pop(key, None)
    return out
