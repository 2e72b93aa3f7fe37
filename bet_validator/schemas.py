"""
Pydantic request/response schemas for the Bet Validator API.

The evaluation engine performs no input validation of its own; these
schemas are the boundary that keeps zero denominators, sub-unit odds and
non-positive bankrolls away from it.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from bet_validator.core.stats import (
    BTTSHistory,
    CardStats,
    CornerStats,
    GoalStats,
    MarketType,
    OverUnderHistory,
    RefereeStats,
    TeamRecord,
)


# ---------------------------------------------------------------------------
# Shared request fields
# ---------------------------------------------------------------------------

class _MatchRequest(BaseModel):
    """Fields common to every market form."""

    home_team: str = Field(..., min_length=1, max_length=120, description="Home team name")
    away_team: str = Field(..., min_length=1, max_length=120, description="Away team name")
    odds: float = Field(..., ge=1.01, description="Decimal odds offered")
    bankroll: float = Field(..., ge=1, description="Bankroll available for staking")

    @field_validator("home_team", "away_team")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("team name is required")
        return v

    @property
    def fixture(self) -> str:
        return f"{self.home_team} vs {self.away_team}"


class _LineRequest(_MatchRequest):
    line: float = Field(..., ge=0.5, le=100, description="Market line, e.g. 2.5")
    bet_type: Literal["OVER", "UNDER"]

    def match_label(self) -> str:
        return f"{self.fixture} - {self.bet_type} {self.line:g}"


# ---------------------------------------------------------------------------
# Market requests
# ---------------------------------------------------------------------------

class MatchResultRequest(_MatchRequest):
    """Payload for POST /api/validate/match-result."""

    home_wins: int = Field(..., ge=0)
    home_draws: int = Field(..., ge=0)
    home_losses: int = Field(..., ge=0)
    away_wins: int = Field(..., ge=0)
    away_draws: int = Field(..., ge=0)
    away_losses: int = Field(..., ge=0)
    outcome: Literal["1", "X", "2"]

    @field_validator("home_losses")
    @classmethod
    def home_has_games(cls, v: int, info) -> int:
        if v + info.data.get("home_wins", 0) + info.data.get("home_draws", 0) < 1:
            raise ValueError("home record must contain at least one game")
        return v

    @field_validator("away_losses")
    @classmethod
    def away_has_games(cls, v: int, info) -> int:
        if v + info.data.get("away_wins", 0) + info.data.get("away_draws", 0) < 1:
            raise ValueError("away record must contain at least one game")
        return v

    def home_record(self) -> TeamRecord:
        return TeamRecord(self.home_wins, self.home_draws, self.home_losses)

    def away_record(self) -> TeamRecord:
        return TeamRecord(self.away_wins, self.away_draws, self.away_losses)

    def match_label(self) -> str:
        return f"{self.fixture} - {self.outcome}"

    model_config = {
        "json_schema_extra": {
            "example": {
                "home_team": "Arsenal",
                "away_team": "Chelsea",
                "odds": 2.50,
                "bankroll": 1000.0,
                "home_wins": 10, "home_draws": 5, "home_losses": 5,
                "away_wins": 6, "away_draws": 4, "away_losses": 10,
                "outcome": "1",
            }
        }
    }


class OverUnderRequest(_LineRequest):
    """Payload for POST /api/validate/over-under."""

    home_scored: int = Field(..., ge=0)
    home_conceded: int = Field(..., ge=0)
    home_games: int = Field(..., ge=1)
    away_scored: int = Field(..., ge=0)
    away_conceded: int = Field(..., ge=0)
    away_games: int = Field(..., ge=1)
    history_over: int = Field(..., ge=0)
    history_under: int = Field(..., ge=0)

    @field_validator("history_under")
    @classmethod
    def history_not_empty(cls, v: int, info) -> int:
        if v + info.data.get("history_over", 0) < 1:
            raise ValueError("over/under history must contain at least one game")
        return v

    def home_goals(self) -> GoalStats:
        return GoalStats(self.home_scored, self.home_conceded, self.home_games)

    def away_goals(self) -> GoalStats:
        return GoalStats(self.away_scored, self.away_conceded, self.away_games)

    def history(self) -> OverUnderHistory:
        return OverUnderHistory(self.history_over, self.history_under)


class BTTSRequest(_MatchRequest):
    """Payload for POST /api/validate/btts."""

    home_scored: int = Field(..., ge=0)
    home_conceded: int = Field(..., ge=0)
    home_games: int = Field(..., ge=1)
    away_scored: int = Field(..., ge=0)
    away_conceded: int = Field(..., ge=0)
    away_games: int = Field(..., ge=1)
    history_yes: int = Field(..., ge=0)
    history_no: int = Field(..., ge=0)
    bet_type: Literal["YES", "NO"]

    @field_validator("history_no")
    @classmethod
    def history_not_empty(cls, v: int, info) -> int:
        if v + info.data.get("history_yes", 0) < 1:
            raise ValueError("BTTS history must contain at least one game")
        return v

    def home_goals(self) -> GoalStats:
        return GoalStats(self.home_scored, self.home_conceded, self.home_games)

    def away_goals(self) -> GoalStats:
        return GoalStats(self.away_scored, self.away_conceded, self.away_games)

    def history(self) -> BTTSHistory:
        return BTTSHistory(self.history_yes, self.history_no)

    def match_label(self) -> str:
        return f"{self.fixture} - BTTS {self.bet_type}"


class CornersRequest(_LineRequest):
    """Payload for POST /api/validate/corners."""

    home_favor: int = Field(..., ge=0)
    home_against: int = Field(..., ge=0)
    home_games: int = Field(..., ge=1)
    away_favor: int = Field(..., ge=0)
    away_against: int = Field(..., ge=0)
    away_games: int = Field(..., ge=1)

    def home_corners(self) -> CornerStats:
        return CornerStats(self.home_favor, self.home_against, self.home_games)

    def away_corners(self) -> CornerStats:
        return CornerStats(self.away_favor, self.away_against, self.away_games)


class CardsRequest(_LineRequest):
    """Payload for POST /api/validate/cards."""

    home_average: float = Field(..., ge=0)
    home_games: int = Field(..., ge=1)
    away_average: float = Field(..., ge=0)
    away_games: int = Field(..., ge=1)
    referee_average: Optional[float] = Field(None, ge=0)

    def home_cards(self) -> CardStats:
        return CardStats(self.home_average, self.home_games)

    def away_cards(self) -> CardStats:
        return CardStats(self.away_average, self.away_games)

    def referee(self) -> Optional[RefereeStats]:
        if self.referee_average is None:
            return None
        return RefereeStats(total_cards_average=self.referee_average)


class HandicapRequest(_MatchRequest):
    """Payload for POST /api/validate/handicap."""

    handicap: float = Field(..., description="Asian handicap line, e.g. -0.5")
    home_wins: int = Field(..., ge=0)
    home_draws: int = Field(..., ge=0)
    home_losses: int = Field(..., ge=0)
    away_wins: int = Field(..., ge=0)
    away_draws: int = Field(..., ge=0)
    away_losses: int = Field(..., ge=0)
    bet_on: Literal["HOME", "AWAY"]

    @field_validator("home_losses")
    @classmethod
    def home_has_games(cls, v: int, info) -> int:
        if v + info.data.get("home_wins", 0) + info.data.get("home_draws", 0) < 1:
            raise ValueError("home record must contain at least one game")
        return v

    @field_validator("away_losses")
    @classmethod
    def away_has_games(cls, v: int, info) -> int:
        if v + info.data.get("away_wins", 0) + info.data.get("away_draws", 0) < 1:
            raise ValueError("away record must contain at least one game")
        return v

    def home_record(self) -> TeamRecord:
        return TeamRecord(self.home_wins, self.home_draws, self.home_losses)

    def away_record(self) -> TeamRecord:
        return TeamRecord(self.away_wins, self.away_draws, self.away_losses)

    def match_label(self) -> str:
        return f"{self.fixture} - {self.bet_on} {self.handicap:+g}"


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

def finite_or_none(value: float) -> Optional[float]:
    """JSON has no inf/nan; report non-finite engine output as null."""
    return value if math.isfinite(value) else None


class EvaluationResponse(BaseModel):
    """Engine result plus the history entry it was logged under."""

    history_id: str
    market: MarketType
    match: str

    implied_probability: Optional[float]
    calculated_probability: Optional[float]
    value_bet: Optional[float]
    edge: Optional[float]
    fair_odds: Optional[float]
    recommended_stake: Optional[float]
    expected_value: Optional[float]
    expected_roi: Optional[float]
    recommendation: Literal["STRONG_BET", "BET", "CAUTION", "AVOID"]
    confidence_level: Literal["HIGH", "MEDIUM", "LOW"]


class HistoryEntryResponse(BaseModel):
    id: str
    date: datetime
    market: MarketType
    match: str
    odds: float
    stake: Optional[float]
    outcome: Literal["WIN", "LOSS", "PENDING"]
    recommendation: str
    confidence_level: str
    calculated_probability: Optional[float]


class HistoryStatsResponse(BaseModel):
    total: int
    won: int
    lost: int
    pending: int


class OutcomeUpdate(BaseModel):
    """Payload for PUT /api/history/{entry_id}/outcome."""

    outcome: Literal["WIN", "LOSS"]


class AmountRequest(BaseModel):
    """Payload for bankroll deposit, withdrawal and reset."""

    amount: float = Field(..., gt=0)
    description: Optional[str] = Field(None, max_length=200)


class LedgerEntryResponse(BaseModel):
    id: str
    date: datetime
    amount: float
    type: Literal["DEPOSIT", "WITHDRAWAL", "WIN", "LOSS"]
    description: str


class BankrollResponse(BaseModel):
    initial_bankroll: float
    current_bankroll: float
    profit_loss: float
    profit_loss_pct: float
    last_updated: datetime
    entries: List[LedgerEntryResponse] = Field(default_factory=list)
