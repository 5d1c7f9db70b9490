"""
Split service: how much each member owes for a single expense.
"""
from typing import Dict, List, Optional
from decimal import Decimal
import logging
from app.core.config import settings
from app.core.exceptions import MalformedSplitDataError
from app.schemas.settlement import Expense, EqualSplit, IndividualSplit, RatioSplit

logger = logging.getLogger(__name__)

HUNDRED = Decimal(100)


def compute_shares(expense: Expense, missing_policy: Optional[str] = None) -> Dict[str, Decimal]:
    """
    Return each member's owed share of the expense, keyed by participant id
    in the order of expense.participant_ids.

    equal      -> amount / number of members
    individual -> the member's fixed amount (not checked against the total)
    ratio      -> amount * ratio / 100 (ratios are not normalized)

    Members without an individual/ratio row owe zero under the "zero" policy,
    or raise MalformedSplitDataError under "reject". The policy defaults to
    settings.MISSING_SPLIT_POLICY.
    """
    policy = missing_policy or settings.MISSING_SPLIT_POLICY
    split = expense.split

    if isinstance(split, EqualSplit):
        share = expense.amount / len(expense.participant_ids)
        return {participant_id: share for participant_id in expense.participant_ids}

    if isinstance(split, IndividualSplit):
        rows = {row.participant_id: row.amount for row in split.amounts}
        return _fill_shares(expense, rows, "individual", policy)

    if isinstance(split, RatioSplit):
        rows = {row.participant_id: expense.amount * row.ratio / HUNDRED for row in split.ratios}
        return _fill_shares(expense, rows, "ratio", policy)

    raise TypeError(f"Unsupported split type: {type(split).__name__}")


def _fill_shares(expense: Expense, rows: Dict[str, Decimal], method: str, policy: str) -> Dict[str, Decimal]:
    """Pick each member's row; rows for non-members are ignored."""
    shares: Dict[str, Decimal] = {}
    missing: List[str] = []

    for participant_id in expense.participant_ids:
        if participant_id in rows:
            shares[participant_id] = rows[participant_id]
            continue
        if policy == "reject":
            raise MalformedSplitDataError(expense.id, participant_id, method)
        shares[participant_id] = Decimal(0)
        missing.append(participant_id)

    if missing:
        logger.warning(f"Expense '{expense.id}' has no {method} entry for {missing}. Treating their share as 0.")

    return shares
