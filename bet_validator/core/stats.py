"""Input value types and market selectors for the evaluation engine.

Design choices
--------------
* Every input is a frozen, slotted dataclass: constructed once per
  evaluation request by the caller, never mutated, safe to share across
  threads.
* Types carry **no validation**.  Non-negative counts and ``games ≥ 1``
  are contracts enforced at the boundary (:mod:`bet_validator.schemas`);
  the estimators surface violations as non-finite results.
* The six markets form a closed set (:class:`MarketType`).  Each one has
  its own selector vocabulary, kept as ``Literal`` aliases so type
  checkers catch a wrong selector at the call site.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional


# ---------------------------------------------------------------------------
# Market kinds and selectors
# ---------------------------------------------------------------------------


class MarketType(str, Enum):
    """The six supported bet types."""
    MATCH_RESULT = "MATCH_RESULT"
    OVER_UNDER = "OVER_UNDER"
    BTTS = "BTTS"
    HANDICAP = "HANDICAP"
    CORNERS = "CORNERS"
    CARDS = "CARDS"


MatchOutcome = Literal["1", "X", "2"]
OverUnder = Literal["OVER", "UNDER"]
BTTSSelection = Literal["YES", "NO"]
HandicapSide = Literal["HOME", "AWAY"]


# ---------------------------------------------------------------------------
# Team and official statistics
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TeamRecord:
    """Win/draw/loss record over a set of games."""

    wins: int
    draws: int
    losses: int

    @property
    def games(self) -> int:
        return self.wins + self.draws + self.losses


@dataclass(frozen=True, slots=True)
class GoalStats:
    """Goals scored and conceded over ``games`` matches."""

    scored: int
    conceded: int
    games: int


@dataclass(frozen=True, slots=True)
class CornerStats:
    """Corners won (``favor``) and given away (``against``) over ``games``."""

    favor: int
    against: int
    games: int


@dataclass(frozen=True, slots=True)
class CardStats:
    """Cards-per-game average over ``games`` matches."""

    average: float
    games: int


@dataclass(frozen=True, slots=True)
class RefereeStats:
    """Referee cards-per-game average.  ``None`` or 0 means no referee data."""

    total_cards_average: Optional[float] = None


# ---------------------------------------------------------------------------
# Market history
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OverUnderHistory:
    """Historical count of games landing over / under the line."""

    over: int
    under: int

    @property
    def total(self) -> int:
        return self.over + self.under


@dataclass(frozen=True, slots=True)
class BTTSHistory:
    """Historical count of games where both teams did / did not score."""

    yes: int
    no: int

    @property
    def total(self) -> int:
        return self.yes + self.no
