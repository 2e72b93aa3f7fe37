"""Core mathematics and configuration for the Bet Validator engine.

This package contains pure, market-agnostic building blocks:

- ``odds_math``     — implied probability, value, edge, fair odds, EV, ROI
- ``kelly``         — fractional Kelly stake sizing
- ``poisson``       — point-mass and cumulative over/under probabilities
- ``policy``        — recommendation and confidence classification
- ``engine_config`` — heuristic blend weights and clamps
- ``stats``         — immutable input value types and market selectors

Nothing in this package imports from ``bet_validator.services``.
All modules are side-effect-free and unit-testable in isolation.
"""
