from __future__ import annotations

"""In-memory exchange rate store.

One instance per process, constructed by the application factory and handed to
routers and the refresh scheduler.

Concurrency:
    - replace_all() builds the new entry map off to the side and swaps the reference
      under the lock, so readers see either the old matrix or the new one.
    - upsert() mutates a single key under the same lock. It is not coordinated with
      refresh cycles: a refresh that lands after an upsert overwrites it.
    - get() is a single dict lookup on the current reference.
"""
import itertools
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from toolhub.models.rates import ExchangeRate
from .matrix import PairKey, RateMatrix, is_invertible_rate


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RateStore:
    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._clock = clock
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._entries: Dict[PairKey, ExchangeRate] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def _key(base: str, target: str) -> PairKey:
        return (base.upper(), target.upper())

    def get(self, base: str, target: str) -> Optional[ExchangeRate]:
        return self._entries.get(self._key(base, target))

    def get_all(self) -> List[ExchangeRate]:
        with self._lock:
            return list(self._entries.values())

    def upsert(self, base: str, target: str, rate: float) -> ExchangeRate:
        if not is_invertible_rate(rate):
            raise ValueError("rate must be positive, finite and invertible")
        key = self._key(base, target)
        with self._lock:
            now = self._clock()
            existing = self._entries.get(key)
            if existing is not None:
                entry = existing.model_copy(
                    update={"rate": float(rate), "last_updated": now}
                )
            else:
                entry = ExchangeRate(
                    id=next(self._ids),
                    base_currency=key[0],
                    target_currency=key[1],
                    rate=float(rate),
                    last_updated=now,
                )
            self._entries[key] = entry
            return entry

    def replace_all(self, matrix: RateMatrix, as_of: Optional[datetime] = None) -> int:
        """Install a freshly built matrix in one swap; returns the entry count."""
        stamp = as_of or self._clock()
        fresh: Dict[PairKey, ExchangeRate] = {}
        for (base, target), rate in matrix.items():
            key = self._key(base, target)
            fresh[key] = ExchangeRate(
                id=next(self._ids),
                base_currency=key[0],
                target_currency=key[1],
                rate=rate,
                last_updated=stamp,
            )
        with self._lock:
            self._entries = fresh
        return len(fresh)
