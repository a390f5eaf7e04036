"""HTTP rate provider tests (httpx.MockTransport, no network)."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from toolhub.services.rates.base import (
    RateFormatError,
    RateNetworkError,
    RateTimeoutError,
)
from toolhub.services.rates.providers import ExternalHTTPRateProvider, parse_snapshot

URL = "https://rates.test/latest/USD"


def make_provider(handler) -> ExternalHTTPRateProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ExternalHTTPRateProvider(URL, client=client)


@pytest.mark.asyncio
async def test_fetch_parses_rates():
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == URL
        return httpx.Response(200, json={"base": "USD", "rates": {"EUR": 0.92, "jpy": 150}})

    snapshot = await make_provider(handler).fetch(timeout=1.0)
    assert snapshot.base_currency == "USD"
    assert snapshot.rates == {"EUR": 0.92, "JPY": 150.0}


@pytest.mark.asyncio
async def test_error_status_is_network_error():
    provider = make_provider(lambda request: httpx.Response(503, text="busy"))
    with pytest.raises(RateNetworkError):
        await provider.fetch(timeout=1.0)


@pytest.mark.asyncio
async def test_connection_failure_is_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RateNetworkError):
        await make_provider(handler).fetch(timeout=1.0)


@pytest.mark.asyncio
async def test_slow_response_times_out():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json={"rates": {}})

    with pytest.raises(RateTimeoutError):
        await make_provider(handler).fetch(timeout=0.05)


@pytest.mark.asyncio
async def test_invalid_json_is_format_error():
    provider = make_provider(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(RateFormatError):
        await provider.fetch(timeout=1.0)


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"result": "success"},
        {"rates": None},
        {"rates": [0.9, 0.8]},
        {"rates": {"EUR": "0.9"}},
        {"rates": {"EUR": True}},
        {"rates": {"EUR": float("inf")}},
    ],
)
def test_parse_snapshot_rejects_malformed_payloads(payload):
    with pytest.raises(RateFormatError):
        parse_snapshot(payload)


def test_parse_snapshot_keeps_non_positive_values_for_the_builder():
    snapshot = parse_snapshot({"rates": {"EUR": 0, "GBP": -1}})
    assert snapshot.rates == {"EUR": 0.0, "GBP": -1.0}


def test_parse_snapshot_rejects_case_colliding_codes():
    with pytest.raises(RateFormatError):
        parse_snapshot({"rates": {"eur": 0.5, "EUR": 0.9}})


def test_parse_snapshot_rejects_ints_beyond_float_range():
    with pytest.raises(RateFormatError):
        parse_snapshot({"rates": {"EUR": 10**400}})
