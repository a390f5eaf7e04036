from __future__ import annotations

"""Async GET-JSON helper on httpx.

Retries live in services.rates.retry; this module performs exactly one request
and maps every failure onto the rate provider error taxonomy.
"""
import asyncio
from typing import Any

import httpx

from toolhub.services.rates.base import (
    RateFormatError,
    RateNetworkError,
    RateTimeoutError,
)


async def get_json(client: httpx.AsyncClient, url: str, *, timeout: float) -> Any:
    try:
        # wait_for cancels the in-flight request once the deadline passes
        resp = await asyncio.wait_for(client.get(url, timeout=timeout), timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        raise RateTimeoutError(f"GET {url} timed out after {timeout}s") from e
    except httpx.HTTPError as e:
        raise RateNetworkError(f"GET {url} failed: {e}") from e

    if resp.status_code >= 400:
        raise RateNetworkError(f"HTTP {resp.status_code} for {url}")
    try:
        return resp.json()
    except ValueError as e:  # JSON decode
        raise RateFormatError(f"response from {url} is not valid JSON") from e
