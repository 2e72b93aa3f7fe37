"""Engine configuration — every heuristic coefficient in one place.

This module is the **registry** for the blend weights, caps and clamps the
per-market estimators use.  Nowhere else in the codebase should these
numbers be hard-coded.

Architecture
------------
:class:`EngineConfig` is a frozen dataclass.  Its defaults reproduce the
reference calibration exactly, so estimators called without a ``config``
argument behave identically to the original hard-coded model.  None of
these values are derived from data; treat them as tunable policy.

Typical usage::

    from bet_validator.core.engine_config import EngineConfig

    cfg = EngineConfig.default()

    # Lean harder on the historical record for a goals market:
    from dataclasses import replace
    history_heavy = replace(cfg, goals_poisson_weight=0.4)
"""

from __future__ import annotations

from dataclasses import dataclass

from bet_validator.core.kelly import DEFAULT_KELLY_FRACTION


@dataclass(frozen=True)
class EngineConfig:
    """Immutable coefficient bundle for the per-market estimators.

    Attributes:
        kelly_fraction: Share of full Kelly staked.  0.25 (quarter Kelly).

        --- Goals over/under ---
        goals_poisson_weight: Weight of the Poisson estimate in the goals
            blend; the historical over/under ratio receives the remainder.

        --- Both teams to score ---
        btts_structural_weight: Weight of the scoring-rate estimate in the
            BTTS blend; the historical yes/no ratio receives the remainder.
        btts_scoring_cap: Upper cap on each side's damped scoring
            probability (``scored / games / 2``).

        --- Cards ---
        referee_weight: Weight of the referee's cards-per-game average when
            present; the two teams' combined average receives the rest.

        --- Asian handicap ---
        handicap_slope: Relative probability shift per handicap point.
        handicap_floor: Lower clamp on the adjusted probability.
        handicap_ceiling: Upper clamp on the adjusted probability.
    """

    kelly_fraction: float = DEFAULT_KELLY_FRACTION

    # Goals over/under
    goals_poisson_weight: float = 0.6

    # Both teams to score
    btts_structural_weight: float = 0.5
    btts_scoring_cap: float = 0.95

    # Cards
    referee_weight: float = 0.4

    # Asian handicap
    handicap_slope: float = 0.1
    handicap_floor: float = 0.05
    handicap_ceiling: float = 0.95

    # ------------------------------------------------------------------ #
    #  Named constructors                                                  #
    # ------------------------------------------------------------------ #

    @classmethod
    def default(cls) -> EngineConfig:
        """Return the reference calibration."""
        return cls()

    # ------------------------------------------------------------------ #
    #  Convenience accessors                                               #
    # ------------------------------------------------------------------ #

    @property
    def goals_history_weight(self) -> float:
        return 1.0 - self.goals_poisson_weight

    @property
    def btts_history_weight(self) -> float:
        return 1.0 - self.btts_structural_weight

    @property
    def team_cards_weight(self) -> float:
        return 1.0 - self.referee_weight

    def __repr__(self) -> str:
        return (
            f"EngineConfig(kelly={self.kelly_fraction}, "
            f"goals_poisson={self.goals_poisson_weight}, "
            f"btts_structural={self.btts_structural_weight}, "
            f"referee={self.referee_weight}, "
            f"handicap_slope={self.handicap_slope})"
        )


#: Shared default instance; frozen, so safe to reuse across calls.
DEFAULT_CONFIG = EngineConfig.default()
