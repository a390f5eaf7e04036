from __future__ import annotations

"""Expand a USD anchored snapshot into the full pairwise rate matrix.

Output is a flat dict keyed by (base, target). Building steps:
    1. USD->USD = 1.0
    2. for each supported X with a usable snapshot rate r: USD->X = r, X->USD = 1/r
    3. X->X = 1.0 for every supported X
    4. A->B = rate(A, USD) * rate(USD, B) for non-USD A != B when both legs exist

A currency without a usable snapshot rate gets no direct, inverse, or cross entries;
only its self rate. A usable rate is a positive finite number whose reciprocal is
finite too; cross products that leave that range are dropped.

Snapshot keys are matched case-insensitively. An exact-case key wins; when only
differently cased keys collide (e.g. "eur" and "Eur") the currency is skipped.
"""
import math
from typing import Dict, Iterable, Mapping, Tuple

from toolhub.models.constants import ANCHOR_CURRENCY

PairKey = Tuple[str, str]
RateMatrix = Dict[PairKey, float]


def is_invertible_rate(value: object) -> bool:
    """Positive, finite, and 1/value is finite (subnormals overflow to inf)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        rate = float(value)
    except OverflowError:  # int beyond float range
        return False
    return math.isfinite(rate) and rate > 0 and math.isfinite(1 / rate)


def _resolve_rates(snapshot_rates: Mapping[str, object]) -> Dict[str, object]:
    exact: Dict[str, object] = {}
    folded: Dict[str, list] = {}
    for key, value in snapshot_rates.items():
        key = str(key)
        if key == key.upper():
            exact[key] = value
        else:
            folded.setdefault(key.upper(), []).append(value)
    resolved = dict(exact)
    for code, values in folded.items():
        if code not in resolved and len(values) == 1:
            resolved[code] = values[0]
    return resolved


def build_matrix(
    snapshot_rates: Mapping[str, object], supported_currencies: Iterable[str]
) -> RateMatrix:
    anchor = ANCHOR_CURRENCY
    # sorted so output (and dict order) never depends on caller iteration order
    currencies = sorted({c.upper() for c in supported_currencies})
    rates = _resolve_rates(snapshot_rates)

    matrix: RateMatrix = {(anchor, anchor): 1.0}

    for code in currencies:
        if code == anchor:
            continue
        value = rates.get(code)
        if not is_invertible_rate(value):
            continue
        direct = float(value)  # type: ignore[arg-type]
        matrix[(anchor, code)] = direct
        matrix[(code, anchor)] = 1 / direct

    for code in currencies:
        matrix[(code, code)] = 1.0

    for a in currencies:
        if a == anchor:
            continue
        to_anchor = matrix.get((a, anchor))
        if to_anchor is None:
            continue
        for b in currencies:
            if b == anchor or b == a or (a, b) in matrix:
                continue
            from_anchor = matrix.get((anchor, b))
            if from_anchor is None:
                continue
            cross = to_anchor * from_anchor
            if is_invertible_rate(cross):
                matrix[(a, b)] = cross

    return matrix
