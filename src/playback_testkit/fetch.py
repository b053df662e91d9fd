"""Async HTTP GET for loading test assets (manifests, media segments)."""
from __future__ import annotations

import logging

import httpx

from .config import HarnessConfig
from .errors import FetchError

logger = logging.getLogger(__name__)


async def fetch(
    uri: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float | None = None,
    config: HarnessConfig | None = None,
) -> bytes:
    """Fetch ``uri`` and return the response body.

    Succeeds only for a 2xx status with a non-empty body. Any other status
    raises FetchError carrying ``status_code``; transport failures raise
    FetchError with a reason naming the uri.

    A caller-supplied ``client`` keeps its own timeout. Otherwise the
    timeout is ``timeout``, else ``config.fetch_timeout``, else
    PLAYBACK_TESTKIT_FETCH_TIMEOUT.
    """
    if client is not None:
        return await _get(client, uri)
    if timeout is None:
        timeout = (config or HarnessConfig.from_env()).fetch_timeout
    async with httpx.AsyncClient(timeout=timeout) as owned:
        return await _get(owned, uri)


async def _get(client: httpx.AsyncClient, uri: str) -> bytes:
    try:
        response = await client.get(uri)
    except httpx.RequestError as exc:
        logger.warning('Fetch of %s failed: %s', uri, exc, extra={'uri': uri})
        raise FetchError(uri, reason=f'fetch failed: {uri}') from exc

    if 200 <= response.status_code <= 299 and response.content:
        return response.content
    logger.debug(
        'Fetch of %s returned %d (%d bytes)', uri, response.status_code, len(response.content),
        extra={'uri': uri, 'status_code': response.status_code},
    )
    raise FetchError(uri, status_code=response.status_code)
