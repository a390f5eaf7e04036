"""Smoke script for the rate refresh cycle against the live provider.

Demonstrates:
 1. Bootstrap fetch (or static fallback when the provider is unreachable).
 2. A few derived entries: direct, inverse, cross.
 3. Manual refresh, then the same entries with new timestamps.

NOTE: This is a lightweight diagnostic and not a formal test. Needs network access.
"""

import asyncio
from pprint import pprint

from toolhub.core.config import get_settings
from toolhub.services.rates.providers import ExternalHTTPRateProvider
from toolhub.services.rates.scheduler import RefreshScheduler
from toolhub.services.rates.store import RateStore

PAIRS = (("USD", "EUR"), ("EUR", "USD"), ("EUR", "GBP"), ("JPY", "CHF"))


def _sample(store: RateStore) -> dict:
    out = {}
    for base, target in PAIRS:
        entry = store.get(base, target)
        out[f"{base}->{target}"] = (
            {"rate": entry.rate, "last_updated": entry.last_updated.isoformat()}
            if entry
            else None
        )
    return out


async def run():
    settings = get_settings()
    store = RateStore()
    provider = ExternalHTTPRateProvider(str(settings.exchange_api_url))
    scheduler = RefreshScheduler(
        store,
        provider,
        supported_currencies=settings.supported_currencies,
        max_attempts=settings.rates_retry_attempts,
        fetch_timeout=settings.http_timeout_seconds,
    )
    try:
        live = await scheduler.bootstrap()
        out = {"bootstrap": {"live": live, "entries": len(store), "sample": _sample(store)}}
        refreshed = await scheduler.refresh_now()
        out["manual_refresh"] = {"refreshed": refreshed, "sample": _sample(store)}
    finally:
        await provider.aclose()
    pprint(out)


if __name__ == "__main__":
    asyncio.run(run())
