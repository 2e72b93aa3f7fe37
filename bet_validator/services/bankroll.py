"""
Bankroll ledger.

Tracks the caller's bankroll and every movement applied to it:

    1. Manual deposits and withdrawals.
    2. Settled bets — a win credits the profit, a loss debits the stake.
    3. Profit/loss against the initial bankroll, in currency and percent.

The ledger is an explicit, caller-owned object held in memory.  It never
feeds back into the evaluation engine except as the ``bankroll`` argument
the caller chooses to pass.
"""

import logging
import os
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

class EntryType(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    WIN = "WIN"
    LOSS = "LOSS"


@dataclass
class LedgerEntry:
    """A single bankroll movement.  ``amount`` is always positive."""

    amount: float
    type: EntryType
    description: str
    id: str = field(default_factory=lambda: str(uuid4()))
    date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def signed_amount(self) -> float:
        if self.type in (EntryType.DEPOSIT, EntryType.WIN):
            return self.amount
        return -self.amount


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------

class BankrollLedger:
    """
    In-memory bankroll with an append-only movement history.

    ``initial_bankroll`` is the baseline for profit/loss; it only changes
    on :meth:`reset`.
    """

    def __init__(self, starting_bankroll: Optional[float] = None):
        self.initial_bankroll = starting_bankroll or float(
            os.getenv("STARTING_BANKROLL", "1000")
        )
        self.current_bankroll = self.initial_bankroll
        self.last_updated = datetime.now(timezone.utc)

        self._entries: List[LedgerEntry] = []
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Bankroll state
    # ------------------------------------------------------------------

    @property
    def profit_loss(self) -> float:
        """Current bankroll minus the initial bankroll."""
        return self.current_bankroll - self.initial_bankroll

    @property
    def profit_loss_pct(self) -> float:
        """Profit/loss as a percentage of the initial bankroll."""
        if self.initial_bankroll <= 0:
            return 0.0
        return self.profit_loss / self.initial_bankroll * 100.0

    @property
    def entries(self) -> List[LedgerEntry]:
        """Movements, newest first."""
        return list(reversed(self._entries))

    def reset(self, amount: float) -> None:
        """Start over from ``amount``: new baseline, cleared movements."""
        _require_positive(amount)
        with self._lock:
            self.initial_bankroll = amount
            self.current_bankroll = amount
            self._entries.clear()
            self.last_updated = datetime.now(timezone.utc)
        logger.info("Bankroll reset to %.2f", amount)

    # ------------------------------------------------------------------
    # Movements
    # ------------------------------------------------------------------

    def deposit(self, amount: float, description: str = "Manual deposit") -> LedgerEntry:
        _require_positive(amount)
        return self._apply(LedgerEntry(amount, EntryType.DEPOSIT, description))

    def withdraw(self, amount: float, description: str = "Manual withdrawal") -> LedgerEntry:
        _require_positive(amount)
        return self._apply(LedgerEntry(amount, EntryType.WITHDRAWAL, description))

    def record_win(self, profit: float, description: str = "Bet won") -> LedgerEntry:
        _require_positive(profit)
        return self._apply(LedgerEntry(profit, EntryType.WIN, description))

    def record_loss(self, stake: float, description: str = "Bet lost") -> LedgerEntry:
        _require_positive(stake)
        return self._apply(LedgerEntry(stake, EntryType.LOSS, description))

    def _apply(self, entry: LedgerEntry) -> LedgerEntry:
        with self._lock:
            if entry.type == EntryType.WITHDRAWAL and entry.amount > self.current_bankroll:
                raise ValueError(
                    f"Cannot withdraw {entry.amount:.2f}: "
                    f"only {self.current_bankroll:.2f} available"
                )
            self.current_bankroll += entry.signed_amount
            self._entries.append(entry)
            self.last_updated = entry.date
        logger.info(
            "%s %.2f (%s) -> bankroll %.2f",
            entry.type.value, entry.amount, entry.description, self.current_bankroll,
        )
        return entry


def _require_positive(amount: float) -> None:
    if not amount > 0:
        raise ValueError(f"amount must be positive, got {amount!r}")


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_ledger: Optional[BankrollLedger] = None


def get_bankroll_ledger() -> BankrollLedger:
    """Get or create the process-wide ledger used by the API."""
    global _ledger
    if _ledger is None:
        _ledger = BankrollLedger()
    return _ledger
