from __future__ import annotations

"""Concrete rate provider backed by a public USD based exchange-rate endpoint.

The endpoint answers `{"rates": {"EUR": 0.92, ...}, ...}`. The payload is untrusted:
anything that is not a mapping of currency code to number is rejected.
"""
import logging
import math
from typing import Any, Dict, Optional

import httpx

from toolhub.services.http_client import get_json
from .base import RateFormatError, RateProvider, RateSnapshot

logger = logging.getLogger("toolhub.rates.provider")


def parse_snapshot(payload: Any) -> RateSnapshot:
    if not isinstance(payload, dict):
        raise RateFormatError("payload is not a JSON object")
    rates = payload.get("rates")
    if rates is None:
        raise RateFormatError("payload has no 'rates' field")
    if not isinstance(rates, dict):
        raise RateFormatError("'rates' is not an object")

    parsed: Dict[str, float] = {}
    for code, value in rates.items():
        if not isinstance(code, str):
            raise RateFormatError(f"rate key {code!r} is not a currency code")
        # bool is an int subclass; true/false are not rates
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise RateFormatError(f"rate for {code} is not a number")
        try:
            rate = float(value)
        except OverflowError as e:
            raise RateFormatError(f"rate for {code} is out of range") from e
        if not math.isfinite(rate):
            raise RateFormatError(f"rate for {code} is not finite")
        if code.upper() in parsed:
            raise RateFormatError(f"rate for {code.upper()} appears more than once")
        parsed[code.upper()] = rate
    return RateSnapshot(rates=parsed)


class ExternalHTTPRateProvider(RateProvider):
    """Fetches the latest USD snapshot with one GET per call.

    An httpx.AsyncClient may be injected (tests pass one built on MockTransport);
    otherwise the provider owns a client and closes it in aclose().
    """

    def __init__(self, url: str, client: Optional[httpx.AsyncClient] = None):
        self._url = url
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)
        return self._client

    async def fetch(self, timeout: float) -> RateSnapshot:
        payload = await get_json(self._get_client(), self._url, timeout=timeout)
        snapshot = parse_snapshot(payload)
        logger.debug("fetched %d rates from %s", len(snapshot.rates), self._url)
        return snapshot

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
