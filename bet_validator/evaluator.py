"""
Per-market bet evaluation.

Each estimator derives a probability for one market from the statistics
relevant to it, then hands that probability to :func:`build_result`, which
prices it against the odds, sizes a quarter-Kelly stake and classifies the
outcome.  Markets covered:

- Match result (1 / X / 2)       — renormalised historical win/draw rates
- Over/under goals               — Poisson on cross-averaged rates, blended
                                   60/40 with the historical over/under ratio
- Both teams to score            — damped scoring rates, blended 50/50 with
                                   the historical yes/no ratio
- Corners over/under             — Poisson on cross-averaged corner rates
- Cards over/under               — Poisson on team averages, optionally
                                   reweighted towards the referee's average
- Asian handicap                 — historical win rate shifted linearly by
                                   the handicap and clamped

Estimators are synchronous and hold no state; run them concurrently freely.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, Optional

import numpy as np

from bet_validator.core.engine_config import DEFAULT_CONFIG, EngineConfig
from bet_validator.core.kelly import kelly_stake
from bet_validator.core.odds_math import (
    edge as _edge,
    expected_roi,
    expected_value,
    fair_odds as _fair_odds,
    implied_probability,
    safe_ratio,
    value_bet as _value_bet,
)
from bet_validator.core.poisson import cumulative_over, cumulative_under
from bet_validator.core.policy import (
    ConfidenceLevel,
    Recommendation,
    classify_confidence,
    classify_recommendation,
)
from bet_validator.core.stats import (
    BTTSHistory,
    BTTSSelection,
    CardStats,
    CornerStats,
    GoalStats,
    HandicapSide,
    MatchOutcome,
    OverUnder,
    OverUnderHistory,
    RefereeStats,
    TeamRecord,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationResult:
    """Complete evaluation output for one bet"""

    # Probabilities
    implied_probability: float
    calculated_probability: float

    # Value
    value_bet: float
    edge: float
    fair_odds: float

    # Sizing
    recommended_stake: float
    expected_value: float
    expected_roi: float

    # Verdict
    recommendation: Recommendation
    confidence_level: ConfidenceLevel

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["recommendation"] = self.recommendation.value
        data["confidence_level"] = self.confidence_level.value
        return data


# ---------------------------------------------------------------------------
# Shared assembly
# ---------------------------------------------------------------------------

def build_result(
    probability: float,
    odds: float,
    bankroll: float,
    sample_size: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> EvaluationResult:
    """
    Price a probability estimate against the odds.

    The expected value is computed on the recommended Kelly stake, so a
    no-edge bet reports a zero stake and a zero expected value.
    """
    implied = implied_probability(odds)
    value = _value_bet(probability, odds)
    edge = _edge(probability, implied)
    stake = kelly_stake(probability, odds, bankroll, config.kelly_fraction)

    return EvaluationResult(
        implied_probability=implied,
        calculated_probability=probability,
        value_bet=value,
        edge=edge,
        fair_odds=_fair_odds(probability),
        recommended_stake=stake,
        expected_value=expected_value(probability, odds, stake),
        expected_roi=expected_roi(probability, odds),
        recommendation=classify_recommendation(value, edge),
        confidence_level=classify_confidence(sample_size),
    )


def _poisson_side(lam: float, line: float, bet_type: OverUnder) -> float:
    if bet_type == "OVER":
        return cumulative_over(lam, line)
    if bet_type == "UNDER":
        return cumulative_under(lam, line)
    raise ValueError(f"bet_type must be 'OVER' or 'UNDER', got {bet_type!r}")


def _cross_average_total(
    home_for: float,
    home_against: float,
    home_games: float,
    away_for: float,
    away_against: float,
    away_games: float,
) -> float:
    """
    Expected match total from per-game rates.

    Each side's expectation is the mean of its own attacking rate and the
    opponent's conceding rate; the total is the sum of both sides.
    """
    expected_home = (
        safe_ratio(home_for, home_games) + safe_ratio(away_against, away_games)
    ) / 2
    expected_away = (
        safe_ratio(away_for, away_games) + safe_ratio(home_against, home_games)
    ) / 2
    return expected_home + expected_away


def _log_result(market: str, result: EvaluationResult) -> None:
    logger.debug(
        "%s: p=%.4f implied=%.4f value=%.4f edge=%.4f stake=%.2f -> %s (%s)",
        market,
        result.calculated_probability,
        result.implied_probability,
        result.value_bet,
        result.edge,
        result.recommended_stake,
        result.recommendation.value,
        result.confidence_level.value,
    )


# ---------------------------------------------------------------------------
# Match result (1 / X / 2)
# ---------------------------------------------------------------------------

def match_result_probabilities(home: TeamRecord, away: TeamRecord) -> Dict[str, float]:
    """
    Renormalised 1/X/2 probabilities from historical records.

    Home win and draw rates come from the home side's own games, the away
    win rate from the away side's games.  The three rates rarely sum to 1,
    so each is divided by their sum.
    """
    home_prob = safe_ratio(home.wins, home.games)
    draw_prob = safe_ratio(home.draws, home.games)
    away_prob = safe_ratio(away.wins, away.games)

    total = home_prob + draw_prob + away_prob
    return {
        "1": safe_ratio(home_prob, total),
        "X": safe_ratio(draw_prob, total),
        "2": safe_ratio(away_prob, total),
    }


def evaluate_match_result(
    home: TeamRecord,
    away: TeamRecord,
    odds: float,
    bankroll: float,
    outcome: MatchOutcome,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> EvaluationResult:
    """Evaluate a 1/X/2 bet.  Sample size is both sides' games."""
    probabilities = match_result_probabilities(home, away)
    if outcome not in probabilities:
        raise ValueError(f"outcome must be '1', 'X' or '2', got {outcome!r}")

    result = build_result(
        probabilities[outcome],
        odds,
        bankroll,
        sample_size=home.games + away.games,
        config=config,
    )
    _log_result(f"1X2[{outcome}]", result)
    return result


# ---------------------------------------------------------------------------
# Over/under goals
# ---------------------------------------------------------------------------

def expected_total_goals(home: GoalStats, away: GoalStats) -> float:
    """Poisson mean for total goals."""
    return _cross_average_total(
        home.scored, home.conceded, home.games,
        away.scored, away.conceded, away.games,
    )


def evaluate_over_under(
    home: GoalStats,
    away: GoalStats,
    history: OverUnderHistory,
    line: float,
    odds: float,
    bankroll: float,
    bet_type: OverUnder,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> EvaluationResult:
    """
    Evaluate an over/under goals bet.

    probability = 0.6 · Poisson(λ, line) + 0.4 · historical ratio
    """
    lam = expected_total_goals(home, away)
    poisson_prob = _poisson_side(lam, line, bet_type)

    hits = history.over if bet_type == "OVER" else history.under
    historical_prob = safe_ratio(hits, history.total)

    probability = (
        poisson_prob * config.goals_poisson_weight
        + historical_prob * config.goals_history_weight
    )

    result = build_result(
        probability,
        odds,
        bankroll,
        sample_size=home.games + away.games + history.total,
        config=config,
    )
    _log_result(f"GOALS[{bet_type} {line}] lambda={lam:.3f}", result)
    return result


# ---------------------------------------------------------------------------
# Both teams to score
# ---------------------------------------------------------------------------

def _scoring_probability(goals: GoalStats, cap: float) -> float:
    # Damped heuristic: half the per-game scoring rate, capped.
    return min(safe_ratio(goals.scored, goals.games) / 2, cap)


def evaluate_btts(
    home: GoalStats,
    away: GoalStats,
    history: BTTSHistory,
    odds: float,
    bankroll: float,
    bet_type: BTTSSelection,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> EvaluationResult:
    """
    Evaluate a both-teams-to-score bet.

    Sides are treated as independent, so P(both score) is the product of
    the two damped scoring probabilities.  The structural estimate (or its
    complement for NO) is blended 50/50 with the historical ratio.
    """
    if bet_type not in ("YES", "NO"):
        raise ValueError(f"bet_type must be 'YES' or 'NO', got {bet_type!r}")

    both_score = (
        _scoring_probability(home, config.btts_scoring_cap)
        * _scoring_probability(away, config.btts_scoring_cap)
    )
    structural = both_score if bet_type == "YES" else 1.0 - both_score

    hits = history.yes if bet_type == "YES" else history.no
    historical_prob = safe_ratio(hits, history.total)

    probability = (
        structural * config.btts_structural_weight
        + historical_prob * config.btts_history_weight
    )

    result = build_result(
        probability,
        odds,
        bankroll,
        sample_size=home.games + away.games + history.total,
        config=config,
    )
    _log_result(f"BTTS[{bet_type}]", result)
    return result


# ---------------------------------------------------------------------------
# Corners over/under
# ---------------------------------------------------------------------------

def expected_total_corners(home: CornerStats, away: CornerStats) -> float:
    """Poisson mean for total corners."""
    return _cross_average_total(
        home.favor, home.against, home.games,
        away.favor, away.against, away.games,
    )


def evaluate_corners(
    home: CornerStats,
    away: CornerStats,
    line: float,
    odds: float,
    bankroll: float,
    bet_type: OverUnder,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> EvaluationResult:
    """Evaluate a corners over/under bet (pure Poisson, no historical blend)."""
    lam = expected_total_corners(home, away)

    result = build_result(
        _poisson_side(lam, line, bet_type),
        odds,
        bankroll,
        sample_size=home.games + away.games,
        config=config,
    )
    _log_result(f"CORNERS[{bet_type} {line}] lambda={lam:.3f}", result)
    return result


# ---------------------------------------------------------------------------
# Cards over/under
# ---------------------------------------------------------------------------

def expected_total_cards(
    home: CardStats,
    away: CardStats,
    referee: Optional[RefereeStats] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    """
    Poisson mean for total cards.

    The teams' combined average is reweighted towards the referee's
    cards-per-game only when a non-zero referee average is supplied.
    """
    lam = home.average + away.average
    if referee is not None and referee.total_cards_average:
        lam = (
            lam * config.team_cards_weight
            + referee.total_cards_average * config.referee_weight
        )
    return lam


def evaluate_cards(
    home: CardStats,
    away: CardStats,
    referee: Optional[RefereeStats],
    line: float,
    odds: float,
    bankroll: float,
    bet_type: OverUnder,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> EvaluationResult:
    """Evaluate a cards over/under bet (pure Poisson)."""
    lam = expected_total_cards(home, away, referee, config)

    result = build_result(
        _poisson_side(lam, line, bet_type),
        odds,
        bankroll,
        sample_size=home.games + away.games,
        config=config,
    )
    _log_result(f"CARDS[{bet_type} {line}] lambda={lam:.3f}", result)
    return result


# ---------------------------------------------------------------------------
# Asian handicap
# ---------------------------------------------------------------------------

def handicap_probability(
    home: TeamRecord,
    away: TeamRecord,
    handicap: float,
    bet_on: HandicapSide,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    """
    Simplified handicap model: historical win rate shifted by the line.

    Backing HOME scales the home win rate by ``1 + handicap · 0.1``; backing
    AWAY scales the away win rate by ``1 − handicap · 0.1``.  The result is
    clamped to [0.05, 0.95].  This is a placeholder, not a goal-difference
    distribution model.
    """
    if bet_on == "HOME":
        adjusted = safe_ratio(home.wins, home.games) * (1 + handicap * config.handicap_slope)
    elif bet_on == "AWAY":
        adjusted = safe_ratio(away.wins, away.games) * (1 - handicap * config.handicap_slope)
    else:
        raise ValueError(f"bet_on must be 'HOME' or 'AWAY', got {bet_on!r}")

    return float(np.clip(adjusted, config.handicap_floor, config.handicap_ceiling))


def evaluate_asian_handicap(
    home: TeamRecord,
    away: TeamRecord,
    handicap: float,
    odds: float,
    bankroll: float,
    bet_on: HandicapSide,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> EvaluationResult:
    """Evaluate an Asian handicap bet.  Sample size is both sides' games."""
    probability = handicap_probability(home, away, handicap, bet_on, config)

    result = build_result(
        probability,
        odds,
        bankroll,
        sample_size=home.games + away.games,
        config=config,
    )
    _log_result(f"HANDICAP[{bet_on} {handicap:+}]", result)
    return result
