"""
FastAPI application for Bet Validator
Exposes the six market evaluators, the validation history and the bankroll ledger
"""

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional
import logging
import os

from dotenv import load_dotenv

from bet_validator import __version__
from bet_validator.core.stats import MarketType
from bet_validator.evaluator import (
    EvaluationResult,
    evaluate_asian_handicap,
    evaluate_btts,
    evaluate_cards,
    evaluate_corners,
    evaluate_match_result,
    evaluate_over_under,
)
from bet_validator.services.bankroll import BankrollLedger, get_bankroll_ledger
from bet_validator.services.history import (
    HistoryEntry,
    get_validation_history,
    settle,
)
from bet_validator.schemas import (
    AmountRequest,
    BankrollResponse,
    BTTSRequest,
    CardsRequest,
    CornersRequest,
    EvaluationResponse,
    HandicapRequest,
    HistoryEntryResponse,
    HistoryStatsResponse,
    LedgerEntryResponse,
    MatchResultRequest,
    OutcomeUpdate,
    OverUnderRequest,
    finite_or_none,
)

# Load .env file
load_dotenv()

# Logging setup
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    ledger = get_bankroll_ledger()
    logger.info("Starting Bet Validator (bankroll %.2f)", ledger.current_bankroll)
    yield
    logger.info("Shutting down Bet Validator")


app = FastAPI(
    title="Bet Validator",
    description="Value, edge and Kelly stake evaluation for football betting markets",
    version=__version__,
    lifespan=lifespan,
)

# CORS (comma-separated origins in ALLOWED_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# HELPERS
# ============================================================================

def _record(market: MarketType, match: str, result: EvaluationResult, odds: float) -> EvaluationResponse:
    """Log the evaluation to history and shape the response."""
    entry = get_validation_history().add(
        market=market,
        match=match,
        result=result,
        odds=odds,
        stake=result.recommended_stake,
    )
    return EvaluationResponse(
        history_id=entry.id,
        market=market,
        match=match,
        implied_probability=finite_or_none(result.implied_probability),
        calculated_probability=finite_or_none(result.calculated_probability),
        value_bet=finite_or_none(result.value_bet),
        edge=finite_or_none(result.edge),
        fair_odds=finite_or_none(result.fair_odds),
        recommended_stake=finite_or_none(result.recommended_stake),
        expected_value=finite_or_none(result.expected_value),
        expected_roi=finite_or_none(result.expected_roi),
        recommendation=result.recommendation.value,
        confidence_level=result.confidence_level.value,
    )


def _history_response(entry: HistoryEntry) -> HistoryEntryResponse:
    return HistoryEntryResponse(
        id=entry.id,
        date=entry.date,
        market=entry.market,
        match=entry.match,
        odds=entry.odds,
        stake=finite_or_none(entry.stake),
        outcome=entry.outcome,
        recommendation=entry.result.recommendation.value,
        confidence_level=entry.result.confidence_level.value,
        calculated_probability=finite_or_none(entry.result.calculated_probability),
    )


def _bankroll_response(ledger: BankrollLedger) -> BankrollResponse:
    return BankrollResponse(
        initial_bankroll=ledger.initial_bankroll,
        current_bankroll=ledger.current_bankroll,
        profit_loss=round(ledger.profit_loss, 2),
        profit_loss_pct=round(ledger.profit_loss_pct, 2),
        last_updated=ledger.last_updated,
        entries=[
            LedgerEntryResponse(
                id=e.id,
                date=e.date,
                amount=e.amount,
                type=e.type.value,
                description=e.description,
            )
            for e in ledger.entries
        ],
    )


# ============================================================================
# PUBLIC ENDPOINTS
# ============================================================================

@app.get("/")
def root():
    """Service banner"""
    return {
        "app": "Bet Validator",
        "version": __version__,
        "status": "operational",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "history_entries": len(get_validation_history().entries()),
    }


# ============================================================================
# VALIDATION ENDPOINTS
# ============================================================================

@app.post("/api/validate/match-result", response_model=EvaluationResponse)
def validate_match_result(payload: MatchResultRequest):
    """Evaluate a 1/X/2 bet."""
    result = evaluate_match_result(
        payload.home_record(),
        payload.away_record(),
        payload.odds,
        payload.bankroll,
        payload.outcome,
    )
    return _record(MarketType.MATCH_RESULT, payload.match_label(), result, payload.odds)


@app.post("/api/validate/over-under", response_model=EvaluationResponse)
def validate_over_under(payload: OverUnderRequest):
    """Evaluate an over/under goals bet."""
    result = evaluate_over_under(
        payload.home_goals(),
        payload.away_goals(),
        payload.history(),
        payload.line,
        payload.odds,
        payload.bankroll,
        payload.bet_type,
    )
    return _record(MarketType.OVER_UNDER, payload.match_label(), result, payload.odds)


@app.post("/api/validate/btts", response_model=EvaluationResponse)
def validate_btts(payload: BTTSRequest):
    """Evaluate a both-teams-to-score bet."""
    result = evaluate_btts(
        payload.home_goals(),
        payload.away_goals(),
        payload.history(),
        payload.odds,
        payload.bankroll,
        payload.bet_type,
    )
    return _record(MarketType.BTTS, payload.match_label(), result, payload.odds)


@app.post("/api/validate/corners", response_model=EvaluationResponse)
def validate_corners(payload: CornersRequest):
    """Evaluate a corners over/under bet."""
    result = evaluate_corners(
        payload.home_corners(),
        payload.away_corners(),
        payload.line,
        payload.odds,
        payload.bankroll,
        payload.bet_type,
    )
    return _record(MarketType.CORNERS, payload.match_label(), result, payload.odds)


@app.post("/api/validate/cards", response_model=EvaluationResponse)
def validate_cards(payload: CardsRequest):
    """Evaluate a cards over/under bet, with optional referee data."""
    result = evaluate_cards(
        payload.home_cards(),
        payload.away_cards(),
        payload.referee(),
        payload.line,
        payload.odds,
        payload.bankroll,
        payload.bet_type,
    )
    return _record(MarketType.CARDS, payload.match_label(), result, payload.odds)


@app.post("/api/validate/handicap", response_model=EvaluationResponse)
def validate_handicap(payload: HandicapRequest):
    """Evaluate an Asian handicap bet."""
    result = evaluate_asian_handicap(
        payload.home_record(),
        payload.away_record(),
        payload.handicap,
        payload.odds,
        payload.bankroll,
        payload.bet_on,
    )
    return _record(MarketType.HANDICAP, payload.match_label(), result, payload.odds)


# ============================================================================
# HISTORY ENDPOINTS
# ============================================================================

@app.get("/api/history", response_model=List[HistoryEntryResponse])
def get_history(market: Optional[MarketType] = Query(default=None)):
    """All served evaluations, newest first, optionally filtered by market."""
    return [_history_response(e) for e in get_validation_history().entries(market)]


@app.get("/api/history/stats", response_model=HistoryStatsResponse)
def get_history_stats():
    return HistoryStatsResponse(**get_validation_history().stats())


@app.put("/api/history/{entry_id}/outcome", response_model=HistoryEntryResponse)
def update_outcome(entry_id: str, payload: OutcomeUpdate):
    """Settle a logged bet and apply the result to the bankroll."""
    try:
        entry = settle(get_validation_history(), get_bankroll_ledger(), entry_id, payload.outcome)
    except KeyError:
        raise HTTPException(status_code=404, detail="History entry not found")
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return _history_response(entry)


@app.delete("/api/history")
def clear_history():
    get_validation_history().clear()
    return {"message": "History cleared"}


# ============================================================================
# BANKROLL ENDPOINTS
# ============================================================================

@app.get("/api/bankroll", response_model=BankrollResponse)
def get_bankroll():
    return _bankroll_response(get_bankroll_ledger())


@app.put("/api/bankroll", response_model=BankrollResponse)
def reset_bankroll(payload: AmountRequest):
    """Set a new initial bankroll and clear the ledger."""
    ledger = get_bankroll_ledger()
    ledger.reset(payload.amount)
    return _bankroll_response(ledger)


@app.post("/api/bankroll/deposit", response_model=BankrollResponse)
def deposit(payload: AmountRequest):
    ledger = get_bankroll_ledger()
    try:
        ledger.deposit(payload.amount, payload.description or "Manual deposit")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _bankroll_response(ledger)


@app.post("/api/bankroll/withdraw", response_model=BankrollResponse)
def withdraw(payload: AmountRequest):
    ledger = get_bankroll_ledger()
    try:
        ledger.withdraw(payload.amount, payload.description or "Manual withdrawal")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _bankroll_response(ledger)
