"""Domain constants shared by the rate subsystem and the API layer.

Currency names mirror the ones the converter widget lists.
"""

from typing import Dict, Set, Tuple

ANCHOR_CURRENCY = "USD"

CURRENCY_NAMES: Dict[str, str] = {
    "USD": "US Dollar",
    "EUR": "Euro",
    "GBP": "British Pound",
    "JPY": "Japanese Yen",
    "CAD": "Canadian Dollar",
    "AUD": "Australian Dollar",
    "CHF": "Swiss Franc",
    "CNY": "Chinese Yuan",
}

SUPPORTED_CURRENCIES: Tuple[str, ...] = tuple(CURRENCY_NAMES)

THEMES: Set[str] = {"light", "dark"}
TOOLS: Set[str] = {"calculator", "currency", "units", "bmi", "level"}
