from __future__ import annotations

"""Rate provider abstraction and error taxonomy.

A provider fetches one USD based snapshot per call. Everything that can go wrong
during a fetch maps onto one of the RateProviderError subclasses so the refresh
cycle can treat them uniformly.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict

from toolhub.models.constants import ANCHOR_CURRENCY


class RateProviderError(Exception):
    """Base class for snapshot fetch failures."""


class RateNetworkError(RateProviderError):
    """Connection level failure or an error status from the remote source."""


class RateTimeoutError(RateProviderError, TimeoutError):
    """The fetch exceeded its deadline and was cancelled."""


class RateFormatError(RateProviderError, ValueError):
    """The remote payload is not a `{"rates": {code: number}}` document."""


@dataclass(frozen=True)
class RateSnapshot:
    rates: Dict[str, float]
    base_currency: str = ANCHOR_CURRENCY
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class RateProvider(ABC):
    base_currency: str = ANCHOR_CURRENCY

    @abstractmethod
    async def fetch(self, timeout: float) -> RateSnapshot:
        """Return units of each currency per 1 USD."""
        raise NotImplementedError

    async def aclose(self) -> None:
        return None
