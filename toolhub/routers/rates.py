from __future__ import annotations

import math
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from toolhub.models.rates import ExchangeRate, ExchangeRateIn, RefreshResult
from toolhub.services.rates.scheduler import RefreshScheduler
from toolhub.services.rates.store import RateStore

"""Exchange rate endpoints consumed by the currency converter widget.

Endpoints:
    - GET  /api/exchange-rates                  -> every cached entry
    - GET  /api/exchange-rates/{base}/{target}  -> one pair (inverse computed on the fly)
    - POST /api/exchange-rates                  -> manual upsert {baseCurrency, targetCurrency, rate}
    - POST /api/exchange-rates/refresh          -> run one refresh cycle now

Manual upserts are kept until the next full refresh replaces the matrix.
"""

router = APIRouter(prefix="/api/exchange-rates", tags=["exchange-rates"])


def get_rate_store(request: Request) -> RateStore:
    return request.app.state.rate_store


def get_scheduler(request: Request) -> RefreshScheduler:
    return request.app.state.rate_scheduler


@router.get("", response_model=List[ExchangeRate], summary="List cached rates")
async def list_rates(store: RateStore = Depends(get_rate_store)):
    return store.get_all()


@router.post("", response_model=ExchangeRate, summary="Create or update a rate")
async def upsert_rate(
    payload: ExchangeRateIn, store: RateStore = Depends(get_rate_store)
):
    return store.upsert(payload.base_currency, payload.target_currency, payload.rate)


@router.post(
    "/refresh", response_model=RefreshResult, summary="Refresh rates from the provider"
)
async def refresh_rates(scheduler: RefreshScheduler = Depends(get_scheduler)):
    refreshed = await scheduler.refresh_now()
    return RefreshResult(refreshed=refreshed, state=scheduler.state.value)


@router.get(
    "/{base}/{target}", response_model=ExchangeRate, summary="Get one exchange rate"
)
async def get_rate(base: str, target: str, store: RateStore = Depends(get_rate_store)):
    base, target = base.upper(), target.upper()
    direct = store.get(base, target)
    if direct is not None:
        return direct
    reverse = store.get(target, base)
    inverse = 1 / reverse.rate if reverse is not None else None
    if inverse is None or not math.isfinite(inverse):
        raise HTTPException(status_code=404, detail="Exchange rate not found")
    return reverse.model_copy(
        update={
            "base_currency": base,
            "target_currency": target,
            "rate": inverse,
        }
    )
