"""
Tests for price conversion and value measures
Run with: pytest tests/test_odds_math.py -v
"""

import math

import numpy as np
import pytest

from bet_validator.core.odds_math import (
    edge,
    expected_roi,
    expected_value,
    fair_odds,
    implied_probability,
    safe_ratio,
    value_bet,
)


class TestPriceConversion:
    """Implied probability and fair odds"""

    def test_implied_probability(self):
        assert implied_probability(2.5) == pytest.approx(0.4)
        assert implied_probability(1.9) == pytest.approx(0.526316, abs=1e-6)

    def test_fair_odds(self):
        assert fair_odds(0.4) == pytest.approx(2.5)
        assert fair_odds(0.5) == pytest.approx(2.0)

    @pytest.mark.parametrize("odds", np.linspace(1.01, 50.0, 60))
    def test_implied_times_odds_is_one(self, odds):
        assert implied_probability(odds) * odds == pytest.approx(1.0)

    @pytest.mark.parametrize("odds", np.linspace(1.01, 50.0, 60))
    def test_fair_odds_inverts_implied(self, odds):
        assert fair_odds(implied_probability(odds)) == pytest.approx(odds)

    def test_returns_plain_float(self):
        assert type(implied_probability(2.0)) is float
        assert type(fair_odds(0.25)) is float


class TestValueMeasures:
    """Value, edge, EV and ROI"""

    def test_value_bet_positive_when_price_too_long(self):
        assert value_bet(0.5, 2.5) == pytest.approx(0.25)

    def test_value_bet_negative_when_price_too_short(self):
        assert value_bet(0.4, 2.0) == pytest.approx(-0.2)

    def test_edge_is_plain_difference(self):
        assert edge(0.5, 0.4) == pytest.approx(0.1)
        assert edge(0.3, 0.4) == pytest.approx(-0.1)

    def test_value_and_edge_differ(self):
        # Same probability gap, different prices → same edge, different value
        assert value_bet(0.5, 2.5) != pytest.approx(edge(0.5, 0.4))

    def test_expected_value(self):
        # 0.5 · 10 · 2.5 − 0.5 · 10
        assert expected_value(0.5, 2.5, 10.0) == pytest.approx(7.5)

    def test_expected_value_zero_stake(self):
        assert expected_value(0.4, 2.5, 0.0) == 0.0

    def test_expected_roi_matches_value_bet(self):
        for p, odds in [(0.5, 2.5), (0.3, 1.8), (0.9, 1.05)]:
            assert expected_roi(p, odds) == pytest.approx(value_bet(p, odds))


class TestDegenerateInputs:
    """Zero denominators surface as non-finite numbers, never exceptions"""

    def test_safe_ratio_regular(self):
        assert safe_ratio(3, 4) == 0.75

    def test_safe_ratio_by_zero_is_inf(self):
        assert safe_ratio(1, 0) == math.inf
        assert safe_ratio(-1, 0) == -math.inf

    def test_safe_ratio_zero_by_zero_is_nan(self):
        assert math.isnan(safe_ratio(0, 0))

    def test_zero_odds_gives_infinite_implied_probability(self):
        assert implied_probability(0) == math.inf

    def test_zero_probability_gives_infinite_fair_odds(self):
        assert fair_odds(0.0) == math.inf


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
