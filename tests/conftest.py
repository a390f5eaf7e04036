import asyncio
import inspect
import pathlib
import sys
from typing import Dict, List, Optional

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from toolhub.services.rates.base import (  # noqa: E402
    RateNetworkError,
    RateProvider,
    RateSnapshot,
)


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            loop.run_until_complete(test_function(**pyfuncitem.funcargs))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


class StubProvider(RateProvider):
    """Returns a fixed snapshot; fails with `error` while `failures` remain (-1 = forever)."""

    def __init__(
        self,
        rates: Optional[Dict[str, float]] = None,
        *,
        failures: int = 0,
        error: Optional[Exception] = None,
    ) -> None:
        self.rates = dict(rates or {"EUR": 0.9, "GBP": 0.8, "JPY": 150.0})
        self.failures = failures
        self.error = error or RateNetworkError("connection refused")
        self.calls = 0
        self.timeouts: List[float] = []

    async def fetch(self, timeout: float) -> RateSnapshot:
        self.calls += 1
        self.timeouts.append(timeout)
        if self.failures != 0:
            if self.failures > 0:
                self.failures -= 1
            raise self.error
        return RateSnapshot(rates=dict(self.rates))


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def failing_provider() -> StubProvider:
    return StubProvider(failures=-1)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
