"""Bet Validator — value and stake evaluation for football betting markets."""

__version__ = "1.0.0"
