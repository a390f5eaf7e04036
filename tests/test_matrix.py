"""Rate matrix expansion tests."""

from __future__ import annotations

import math

from toolhub.models.constants import SUPPORTED_CURRENCIES
from toolhub.services.rates.matrix import build_matrix


def test_direct_inverse_and_self_rates():
    m = build_matrix({"EUR": 0.9, "GBP": 0.8}, ["USD", "EUR", "GBP"])
    assert m[("USD", "EUR")] == 0.9
    assert m[("EUR", "USD")] == 1 / 0.9
    assert m[("USD", "USD")] == 1.0
    assert m[("EUR", "EUR")] == 1.0
    assert m[("GBP", "GBP")] == 1.0


def test_cross_rate_uses_the_stored_legs_exactly():
    m = build_matrix({"EUR": 0.9, "GBP": 0.8}, ["USD", "EUR", "GBP"])
    assert m[("EUR", "GBP")] == m[("EUR", "USD")] * m[("USD", "GBP")]
    assert m[("GBP", "EUR")] == m[("GBP", "USD")] * m[("USD", "EUR")]


def test_every_pair_is_reciprocal_within_tolerance():
    snapshot = {"EUR": 0.92, "GBP": 0.79, "JPY": 149.5, "CAD": 1.36, "AUD": 1.52}
    m = build_matrix(snapshot, SUPPORTED_CURRENCIES)
    for (a, b), rate in m.items():
        assert math.isclose(rate, 1 / m[(b, a)], rel_tol=1e-9), (a, b)


def test_missing_currency_has_no_entries_except_self():
    m = build_matrix({"EUR": 0.9}, ["USD", "EUR", "CHF"])
    assert m[("CHF", "CHF")] == 1.0
    others = [k for k in m if "CHF" in k and k != ("CHF", "CHF")]
    assert others == []


def test_unusable_rates_are_skipped():
    snapshot = {"EUR": 0.0, "GBP": -1.2, "JPY": "150", "CAD": True, "AUD": float("nan")}
    m = build_matrix(snapshot, ["USD", "EUR", "GBP", "JPY", "CAD", "AUD"])
    assert set(m) == {(c, c) for c in ["USD", "EUR", "GBP", "JPY", "CAD", "AUD"]}


def test_unsupported_snapshot_currencies_are_ignored():
    m = build_matrix({"EUR": 0.9, "SEK": 10.5}, ["USD", "EUR"])
    assert ("USD", "SEK") not in m
    assert ("SEK", "SEK") not in m


def test_result_is_independent_of_input_order():
    snapshot = {"EUR": 0.9, "GBP": 0.8, "JPY": 150.0}
    a = build_matrix(snapshot, ["USD", "EUR", "GBP", "JPY"])
    b = build_matrix(dict(reversed(list(snapshot.items()))), ["jpy", "GBP", "eur", "USD"])
    assert a == b
    assert list(a) == list(b)


def test_full_currency_set_size():
    snapshot = {c: 1.0 + i for i, c in enumerate(SUPPORTED_CURRENCIES) if c != "USD"}
    m = build_matrix(snapshot, SUPPORTED_CURRENCIES)
    n = len(SUPPORTED_CURRENCIES)
    assert len(m) == n * n


def test_rate_with_non_finite_reciprocal_is_skipped():
    m = build_matrix({"EUR": 1e-310, "GBP": 0.8}, ["USD", "EUR", "GBP"])
    assert ("USD", "EUR") not in m
    assert ("EUR", "USD") not in m
    assert ("EUR", "GBP") not in m
    assert m[("USD", "GBP")] == 0.8
    for rate in m.values():
        assert math.isfinite(rate) and math.isfinite(1 / rate)


def test_cross_products_out_of_range_are_dropped():
    m = build_matrix({"EUR": 1e-200, "JPY": 1e200}, ["USD", "EUR", "JPY"])
    assert m[("USD", "EUR")] == 1e-200
    assert m[("USD", "JPY")] == 1e200
    assert ("EUR", "JPY") not in m
    assert ("JPY", "EUR") not in m


def test_case_colliding_keys_resolve_the_same_in_any_order():
    forward = build_matrix({"eur": 0.5, "EUR": 0.9}, ["USD", "EUR"])
    backward = build_matrix({"EUR": 0.9, "eur": 0.5}, ["USD", "EUR"])
    assert forward == backward
    assert forward[("USD", "EUR")] == 0.9


def test_ambiguous_lowercase_keys_skip_the_currency():
    m = build_matrix({"eur": 0.5, "Eur": 0.9, "gbp": 0.8}, ["USD", "EUR", "GBP"])
    assert ("USD", "EUR") not in m
    assert m[("USD", "GBP")] == 0.8
