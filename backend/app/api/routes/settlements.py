"""
Settlement calculation routes.
"""
from fastapi import APIRouter, HTTPException
from typing import List
from app.core.exceptions import SettlementError
from app.core.utils import format_error
from app.schemas.settlement import (
    PersonalBalance, Settlement, SettlementResult, SettlementSummary, Transaction
)
from app.services.settlement_service import (
    build_settlement_result, compute_balances, compute_transactions
)

router = APIRouter(prefix="/settlement", tags=["settlement"])


def _unprocessable(e: SettlementError) -> HTTPException:
    details = {
        key: getattr(e, key)
        for key in ("expense_id", "participant_id")
        if getattr(e, key, None) is not None
    }
    return HTTPException(
        status_code=422,
        detail=format_error(str(e), details)
    )


@router.post("/balances", response_model=List[PersonalBalance])
async def calculate_balances(settlement: Settlement):
    """Calculate each participant's net balance."""
    try:
        return compute_balances(settlement)
    except SettlementError as e:
        raise _unprocessable(e)


@router.post("/transactions", response_model=List[Transaction])
async def calculate_transactions(balances: List[PersonalBalance]):
    """Calculate the minimal transfer plan for the given balances."""
    return compute_transactions(balances)


@router.post("/calculate", response_model=SettlementResult)
async def calculate_settlement(settlement: Settlement):
    """Calculate the complete settlement report."""
    try:
        return build_settlement_result(settlement)
    except SettlementError as e:
        raise _unprocessable(e)


@router.post("/summary", response_model=SettlementSummary)
async def get_settlement_summary(settlement: Settlement):
    """Get the shareable plain-text summary of a settlement."""
    try:
        result = build_settlement_result(settlement)
    except SettlementError as e:
        raise _unprocessable(e)

    return SettlementSummary(settlement_id=settlement.id, summary=result.summary)
