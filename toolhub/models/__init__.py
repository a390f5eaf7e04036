"""Pydantic domain models for the toolhub API."""

from .constants import (
    ANCHOR_CURRENCY,
    CURRENCY_NAMES,
    SUPPORTED_CURRENCIES,
)  # re-export
from .rates import ExchangeRate, ExchangeRateIn, RefreshResult
from .preferences import LevelCalibration, UserPreferences, UserPreferencesUpdate

__all__ = [
    "ANCHOR_CURRENCY",
    "CURRENCY_NAMES",
    "SUPPORTED_CURRENCIES",
    "ExchangeRate",
    "ExchangeRateIn",
    "RefreshResult",
    "LevelCalibration",
    "UserPreferences",
    "UserPreferencesUpdate",
]
