"""Fundamental odds mathematics — the single source of truth.

Every function here is **pure**: no I/O, no logging, no side effects.
Import from this module; never reimplement locally in the evaluator or
services.

The pillars exposed are:

1. **Price conversion** — decimal odds ↔ implied probability ↔ fair odds.
2. **Value measures** — value bet, edge, expected value, expected ROI.

Design decisions
----------------
* All functions accept **decimal** (European) odds, the convention used
  throughout the football markets this engine prices.  Odds must exceed
  1.0 for the measures to be meaningful.
* No bookmaker margin is removed.  :func:`implied_probability` is the raw
  break-even probability of a single outcome as stated by the price.
* Nothing here validates its inputs.  A zero denominator propagates as
  ``inf`` or ``nan`` (IEEE semantics) rather than raising, so callers that
  skip boundary validation receive a non-finite result instead of a
  ``ZeroDivisionError``.  Enforcement belongs to :mod:`bet_validator.schemas`.

Run tests with::

    pytest tests/test_odds_math.py -v
"""

from __future__ import annotations

import numpy as np


# ---------------------------------------------------------------------------
# IEEE division
# ---------------------------------------------------------------------------


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide with IEEE-754 semantics instead of raising.

    Python's ``/`` raises :class:`ZeroDivisionError` for a zero float
    denominator.  The engine's contract is to surface degenerate inputs as
    non-finite numbers, so every ratio goes through numpy ``float64``::

        safe_ratio(3, 4)  → 0.75
        safe_ratio(1, 0)  → inf
        safe_ratio(0, 0)  → nan

    Returns:
        The quotient as a plain Python ``float``.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(numerator) / np.float64(denominator))


# ---------------------------------------------------------------------------
# Price conversion
# ---------------------------------------------------------------------------


def implied_probability(odds: float) -> float:
    """Raw implied probability of a decimal price (``1 / odds``).

    Examples::

        implied_probability(2.50) → 0.4000
        implied_probability(1.90) → 0.5263
    """
    return safe_ratio(1.0, odds)


def fair_odds(probability: float) -> float:
    """Decimal price at which a bet on ``probability`` breaks even.

    Inverse of :func:`implied_probability`::

        fair_odds(implied_probability(o)) == o
    """
    return safe_ratio(1.0, probability)


# ---------------------------------------------------------------------------
# Value measures
# ---------------------------------------------------------------------------


def value_bet(probability: float, odds: float) -> float:
    """Value of a price given an estimated probability: ``p · odds − 1``.

    Positive means the estimate implies a profitable bet at this price.
    Value is multiplicative through the odds, unlike :func:`edge`.
    """
    return probability * odds - 1.0


def edge(calculated_probability: float, implied_prob: float) -> float:
    """Signed probability-space advantage: ``p_calc − p_implied``."""
    return calculated_probability - implied_prob


def expected_value(probability: float, odds: float, stake: float) -> float:
    """Expected monetary return of staking ``stake`` at ``odds``.

    Computed as the expected gross return on a win minus the expected
    stake lost::

        EV = p · stake · odds − (1 − p) · stake

    Examples::

        expected_value(0.5, 2.5, 10.0) → 7.5
        expected_value(0.4, 2.5, 0.0)  → 0.0
    """
    expected_win = probability * stake * odds
    expected_loss = (1.0 - probability) * stake
    return expected_win - expected_loss


def expected_roi(probability: float, odds: float) -> float:
    """Expected return per unit staked: ``p · odds − 1``.

    Numerically equal to :func:`value_bet` for the same probability, but
    reported as its own figure.
    """
    return probability * odds - 1.0
