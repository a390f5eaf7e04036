from __future__ import annotations

"""Background refresh of the rate store.

Lifecycle:
    start()      -> bootstrap() then a periodic asyncio task
    bootstrap()  -> fetch+build with retries; on exhaustion install the static
                    fallback matrix (the only place the static table is used)
    periodic     -> every interval run one refresh cycle
    refresh_now() -> manual trigger, same in-flight guard as the timer

A refresh cycle that fails keeps the current matrix. Overlapping cycles are skipped,
never queued. No error raised here reaches the HTTP layer.
"""
import asyncio
import logging
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Awaitable, Callable, Dict, Iterable, Optional

from .base import RateProvider
from .matrix import RateMatrix, build_matrix
from .retry import RetryExhaustedError, with_retry
from .store import RateStore

logger = logging.getLogger("toolhub.rates.scheduler")

# Approximate units per 1 USD; used only when the bootstrap fetch is exhausted.
FALLBACK_USD_RATES: Dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "JPY": 149.5,
    "CAD": 1.36,
    "AUD": 1.52,
    "CHF": 0.88,
    "CNY": 7.24,
}


class RefreshState(str, Enum):
    IDLE = "idle"
    REFRESHING = "refreshing"


def build_fallback_matrix() -> RateMatrix:
    return build_matrix(FALLBACK_USD_RATES, FALLBACK_USD_RATES.keys())


class RefreshScheduler:
    def __init__(
        self,
        store: RateStore,
        provider: RateProvider,
        *,
        supported_currencies: Iterable[str],
        interval_seconds: float = 1800.0,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        fetch_timeout: float = 10.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._store = store
        self._provider = provider
        self._currencies = tuple(supported_currencies)
        self._interval = interval_seconds
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._fetch_timeout = fetch_timeout
        self._sleep = sleep

        # in-flight guard: non-blocking acquire is the atomic check-and-set.
        # It is held across awaits, so it must only ever be acquired with
        # blocking=False; a blocking acquire on the loop thread would deadlock.
        self._guard = threading.Lock()
        self._task: Optional[asyncio.Task] = None

        self.source: Optional[str] = None  # "live" | "fallback"
        self.last_success_at: Optional[datetime] = None
        self.last_error: Optional[str] = None

    @property
    def state(self) -> RefreshState:
        return RefreshState.REFRESHING if self._guard.locked() else RefreshState.IDLE

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    # Internal --------------------------------------------------
    async def _fetch_and_build(self) -> RateMatrix:
        snapshot = await self._provider.fetch(self._fetch_timeout)
        return build_matrix(snapshot.rates, self._currencies)

    async def _fetch_with_retry(self) -> RateMatrix:
        return await with_retry(
            self._fetch_and_build,
            self._max_attempts,
            base_delay=self._base_delay,
            sleep=self._sleep,
        )

    def _install(self, matrix: RateMatrix, source: str) -> None:
        count = self._store.replace_all(matrix)
        self.source = source
        if source == "live":
            self.last_success_at = datetime.now(timezone.utc)
            self.last_error = None
        logger.info("installed %s rate matrix (%d entries)", source, count)

    async def _cycle(self, reason: str) -> bool:
        if not self._guard.acquire(blocking=False):
            logger.info("refresh (%s) skipped: another refresh is in flight", reason)
            return False
        try:
            matrix = await self._fetch_with_retry()
        except RetryExhaustedError as e:
            self.last_error = str(e.last_error)
            logger.error(
                "refresh (%s) failed after %d attempts; keeping current rates: %s",
                reason,
                e.attempts,
                e.last_error,
            )
            return False
        except Exception:
            logger.exception("refresh (%s) crashed; keeping current rates", reason)
            return False
        else:
            self._install(matrix, "live")
            return True
        finally:
            self._guard.release()

    async def _periodic(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self._cycle("timer")

    # Public API -----------------------------------------------
    async def bootstrap(self) -> bool:
        """Initial load; falls back to static rates when every attempt fails."""
        if not self._guard.acquire(blocking=False):
            logger.info("bootstrap skipped: another refresh is in flight")
            return False
        try:
            matrix = await self._fetch_with_retry()
        except RetryExhaustedError as e:
            self.last_error = str(e.last_error)
            logger.warning(
                "bootstrap failed after %d attempts (%s); serving static fallback rates",
                e.attempts,
                e.last_error,
            )
            self._install(build_fallback_matrix(), "fallback")
            return False
        else:
            self._install(matrix, "live")
            return True
        finally:
            self._guard.release()

    async def refresh_now(self) -> bool:
        return await self._cycle("manual")

    async def start(self) -> None:
        await self.bootstrap()
        if not self.running:
            self._task = asyncio.create_task(self._periodic(), name="rates-refresh")
            logger.info("rate refresh every %ss", self._interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
