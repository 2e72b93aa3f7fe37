"""Poisson count model for goal, corner and card lines.

Every function here is **pure**.  Counts in a football match (goals,
corners, cards) are modelled as draws from a Poisson process whose mean
``λ`` is estimated from historical per-game rates.

Line convention
---------------
The "under" region of a line is every count from 0 up to and including
``floor(line)``::

    line 2.5 → under = P(0) + P(1) + P(2)
    line 3.0 → under = P(0) + P(1) + P(2) + P(3)

The floor rule is applied verbatim for whole-number lines as well, so an
exact landing on a whole line counts as "under" (there is no push mass).

Run tests with::

    pytest tests/test_poisson.py -v
"""

from __future__ import annotations

import math
from typing import Final

import numpy as np

#: Largest count summed for an under region.  Far past this point the mass
#: underflows to zero for any mean the estimators produce.
MAX_COUNT: Final[int] = 1000


def _log_pmf(lam: float, ks: np.ndarray) -> np.ndarray:
    """``log P(X = k)`` for each count in ``ks``.

    Working in log space keeps ``k!`` from overflowing a float for large
    counts.  ``0 · log 0`` is taken as 0 so ``P(X = 0)`` at ``λ = 0`` is 1.
    """
    lam64 = np.float64(lam)
    log_factorial = np.array([math.lgamma(k + 1) for k in ks], dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        log_power = np.where(ks == 0, 0.0, ks * np.log(lam64))
        return log_power - lam64 - log_factorial


def poisson_pmf(lam: float, k: int) -> float:
    """Probability of exactly ``k`` events at mean ``lam``.

    ::

        P(X = k) = e^(−λ) · λ^k / k!

    Args:
        lam: Poisson mean, ``λ ≥ 0``.
        k: Non-negative event count.

    Returns:
        Point mass at ``k``.  Non-finite ``lam`` propagates as ``nan``.
    """
    with np.errstate(invalid="ignore"):
        return float(np.exp(_log_pmf(lam, np.array([k]))[0]))


def cumulative_under(lam: float, line: float) -> float:
    """Probability of at most ``floor(line)`` events at mean ``lam``.

    A negative line has an empty under region (0.0); an infinite line
    covers every count (1.0 for a finite mean); a ``nan`` line gives ``nan``.
    """
    if math.isnan(line):
        return math.nan
    if line < 0:
        return 0.0
    top = MAX_COUNT if line >= MAX_COUNT else math.floor(line)
    with np.errstate(invalid="ignore"):
        return float(np.exp(_log_pmf(lam, np.arange(top + 1))).sum())


def cumulative_over(lam: float, line: float) -> float:
    """Probability of more than ``floor(line)`` events at mean ``lam``.

    Complement of :func:`cumulative_under`, so the two always sum to 1.
    """
    return 1.0 - cumulative_under(lam, line)
