"""Kelly criterion sizing — the single source of truth for stake math.

All functions here are **pure**: no I/O, no logging.
Import from this module; never reimplement Kelly locally in the evaluator.

Design decisions
----------------
* **Quarter Kelly** (0.25 of full Kelly) is the sizing policy for every
  market.  Full Kelly maximises long-run log-wealth only when the edge is
  known exactly; the per-market probability estimates here are heuristic,
  so the stake is scaled down to cut variance.
* The stake is **floored at zero**.  A negative full-Kelly fraction means
  the price offers no edge, and the engine recommends staking nothing
  rather than a negative amount.
* Unlike typical bankroll tools there is no hard cap on the fraction; the
  quarter scaling is the only reduction applied.

Run tests with::

    pytest tests/test_kelly.py -v
"""

from __future__ import annotations

from typing import Final

import numpy as np

from bet_validator.core.odds_math import safe_ratio

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: Share of full Kelly staked on every recommendation (quarter Kelly).
DEFAULT_KELLY_FRACTION: Final[float] = 0.25


# ---------------------------------------------------------------------------
# Fractional Kelly
# ---------------------------------------------------------------------------


def kelly_fraction(
    probability: float,
    odds: float,
    fraction: float = DEFAULT_KELLY_FRACTION,
) -> float:
    """Compute the fractional Kelly share of bankroll for a win/loss bet.

    With ``b = odds − 1`` (profit per unit staked) and ``q = 1 − p`` the
    full Kelly fraction is (Kelly 1956)::

        f*  =  (p · b − q) / b                                   (1)

    The recommendation is ``max(0, f*) · fraction``.

    Args:
        probability: Estimated probability of winning the bet.
        odds: Decimal odds for the bet.
        fraction: Share of full Kelly to stake.  Default 0.25.

    Returns:
        Share of bankroll to stake, ``≥ 0``.  Exactly 0.0 whenever
        ``p · b ≤ q`` (no edge); ``nan`` when the probability is ``nan``.

    Examples::

        kelly_fraction(0.55, 2.0)  →  0.025   (quarter of a 10% full Kelly)
        kelly_fraction(0.45, 2.0)  →  0.000   (negative edge → no bet)
    """
    profit_per_unit = odds - 1.0
    loss_prob = 1.0 - probability

    # Full Kelly (equation 1)
    full_kelly = safe_ratio(probability * profit_per_unit - loss_prob, profit_per_unit)

    # np.maximum propagates nan where max() would return 0.0
    return float(np.maximum(0.0, full_kelly)) * fraction


def kelly_stake(
    probability: float,
    odds: float,
    bankroll: float,
    fraction: float = DEFAULT_KELLY_FRACTION,
) -> float:
    """Convert the fractional Kelly share into a currency amount.

    Examples::

        kelly_stake(0.55, 2.0, 1000.0)  →  25.0
        kelly_stake(0.30, 2.0, 1000.0)  →   0.0
    """
    return bankroll * kelly_fraction(probability, odds, fraction)
