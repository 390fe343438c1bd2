from __future__ import annotations

"""Async HTTP client util with retry.

Focus: GET JSON with limited retries and exponential backoff. The caller owns
the httpx.AsyncClient so connections are pooled across fetches.
"""
import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

logger = logging.getLogger("ledgerfx.http")


class HttpError(Exception):
    pass


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Optional[Mapping[str, str]] = None,
    timeout: float = 5.0,
    retries: int = 2,
    backoff: float = 0.5,
) -> Dict[str, Any]:
    last_err: Optional[Exception] = None
    for attempt in range(retries + 1):
        try:
            resp = await client.get(url, params=params, timeout=timeout)
            if resp.status_code >= 400:
                raise HttpError(f"HTTP {resp.status_code} for {url}")
            data = resp.json()
            if not isinstance(data, dict):
                raise HttpError(f"expected JSON object from {url}")
            return data
        except (httpx.HTTPError, HttpError, ValueError) as e:  # ValueError for JSON decode
            last_err = e
            if attempt == retries:
                break
            logger.debug("retrying %s after error: %s", url, e)
            await asyncio.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}")
