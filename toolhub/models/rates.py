from __future__ import annotations

import math
import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_CODE_RE = re.compile(r"^[A-Za-z]{3}$")


class ExchangeRate(BaseModel):
    """One directional rate held by the rate store.

    Serialized with camelCase keys (baseCurrency, targetCurrency, lastUpdated).
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: int
    base_currency: str
    target_currency: str
    rate: float = Field(..., gt=0, allow_inf_nan=False)
    last_updated: datetime

    @property
    def key(self) -> tuple[str, str]:
        return (self.base_currency, self.target_currency)


class ExchangeRateIn(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    base_currency: str = Field(..., description="ISO-4217 code, e.g. USD")
    target_currency: str = Field(..., description="ISO-4217 code, e.g. EUR")
    rate: float = Field(
        ..., gt=0, allow_inf_nan=False, description="Units of target per 1 base"
    )

    @field_validator("base_currency", "target_currency")
    @classmethod
    def valid_code(cls, v: str) -> str:
        v = v.strip()
        if not _CODE_RE.match(v):
            raise ValueError("currency code must be three letters")
        return v.upper()

    @field_validator("rate", mode="before")
    @classmethod
    def numeric_rate(cls, v):
        # JSON booleans and numeric strings are not rates
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("rate must be a number")
        return v

    @field_validator("rate")
    @classmethod
    def invertible_rate(cls, v: float) -> float:
        # the pair is also served inverted, so 1/rate must stay finite
        if not math.isfinite(1 / v):
            raise ValueError("rate is too small to invert")
        return v


class RefreshResult(BaseModel):
    refreshed: bool
    state: str
