"""
Validation history.

Keeps every evaluation the API has served together with the match label,
the odds and the recommended stake, so bets can later be settled as WIN or
LOSS against the bankroll ledger.  Held in memory, newest first.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

from bet_validator.core.stats import MarketType
from bet_validator.evaluator import EvaluationResult
from bet_validator.services.bankroll import BankrollLedger

logger = logging.getLogger(__name__)

OUTCOME_WIN = "WIN"
OUTCOME_LOSS = "LOSS"
OUTCOME_PENDING = "PENDING"


@dataclass
class HistoryEntry:
    """One served evaluation."""

    market: MarketType
    match: str
    result: EvaluationResult
    odds: float
    stake: float
    outcome: str = OUTCOME_PENDING
    id: str = field(default_factory=lambda: str(uuid4()))
    date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_settled(self) -> bool:
        return self.outcome != OUTCOME_PENDING


class ValidationHistory:
    """In-memory evaluation log, newest entry first."""

    def __init__(self):
        self._entries: List[HistoryEntry] = []
        self._lock = threading.RLock()

    def add(
        self,
        market: MarketType,
        match: str,
        result: EvaluationResult,
        odds: float,
        stake: float,
    ) -> HistoryEntry:
        entry = HistoryEntry(market=market, match=match, result=result, odds=odds, stake=stake)
        with self._lock:
            self._entries.insert(0, entry)
        logger.info(
            "Logged %s evaluation: %s @ %.2f -> %s",
            market.value, match, odds, result.recommendation.value,
        )
        return entry

    def entries(self, market: Optional[MarketType] = None) -> List[HistoryEntry]:
        with self._lock:
            if market is None:
                return list(self._entries)
            return [e for e in self._entries if e.market == market]

    def get(self, entry_id: str) -> HistoryEntry:
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id:
                    return entry
        raise KeyError(entry_id)

    def set_outcome(self, entry_id: str, outcome: str) -> HistoryEntry:
        if outcome not in (OUTCOME_WIN, OUTCOME_LOSS, OUTCOME_PENDING):
            raise ValueError(f"outcome must be WIN, LOSS or PENDING, got {outcome!r}")
        with self._lock:
            entry = self.get(entry_id)
            entry.outcome = outcome
        return entry

    def settle(self, entry_id: str, outcome: str, ledger: BankrollLedger) -> HistoryEntry:
        """Settle a pending entry and book it on ``ledger`` as one atomic step."""
        if outcome not in (OUTCOME_WIN, OUTCOME_LOSS):
            raise ValueError(f"outcome must be WIN or LOSS, got {outcome!r}")

        with self._lock:
            entry = self.get(entry_id)
            if entry.is_settled:
                raise ValueError(f"Entry {entry_id} already settled as {entry.outcome}")

            if entry.stake > 0:
                if outcome == OUTCOME_WIN:
                    ledger.record_win(entry.stake * (entry.odds - 1.0), description=entry.match)
                else:
                    ledger.record_loss(entry.stake, description=entry.match)

            entry.outcome = outcome

        logger.info("Settled %s: %s (stake %.2f)", entry_id, outcome, entry.stake)
        return entry

    def stats(self) -> Dict[str, int]:
        with self._lock:
            entries = list(self._entries)
        return {
            "total": len(entries),
            "won": sum(1 for e in entries if e.outcome == OUTCOME_WIN),
            "lost": sum(1 for e in entries if e.outcome == OUTCOME_LOSS),
            "pending": sum(1 for e in entries if e.outcome == OUTCOME_PENDING),
        }

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Validation history cleared")


def settle(
    history: ValidationHistory,
    ledger: BankrollLedger,
    entry_id: str,
    outcome: str,
) -> HistoryEntry:
    """
    Record a bet result and apply it to the ledger.

    WIN credits ``stake · (odds − 1)``; LOSS debits the stake.  A zero
    stake (the engine recommended no bet) settles without a ledger entry.

    Raises:
        KeyError: Unknown ``entry_id``.
        ValueError: Entry already settled, or ``outcome`` is not WIN/LOSS.
    """
    return history.settle(entry_id, outcome, ledger)


_history: Optional[ValidationHistory] = None


def get_validation_history() -> ValidationHistory:
    """Get or create the process-wide history used by the API."""
    global _history
    if _history is None:
        _history = ValidationHistory()
    return _history
