"""
Settlement service for automated fair settlement calculation.
"""
from typing import List, Dict
from decimal import Decimal
import logging
from app.core.exceptions import UnknownParticipantError
from app.core.utils import format_currency, round_currency
from app.schemas.settlement import PersonalBalance, Settlement, SettlementResult, Transaction
from app.services.split_service import compute_shares

logger = logging.getLogger(__name__)

HALF_UNIT = Decimal("0.5")


def compute_balances(settlement: Settlement) -> List[PersonalBalance]:
    """
    Calculate each participant's net balance.
    Returns one PersonalBalance per participant, in participant order.
    """
    total_paid: Dict[str, Decimal] = {p.id: Decimal(0) for p in settlement.participants}
    total_owed: Dict[str, Decimal] = {p.id: Decimal(0) for p in settlement.participants}

    for expense in settlement.expenses:
        if expense.paid_by not in total_paid:
            raise UnknownParticipantError(expense.id, expense.paid_by, role="payer")
        for participant_id in expense.participant_ids:
            if participant_id not in total_owed:
                raise UnknownParticipantError(expense.id, participant_id)

        # Add what payer paid
        total_paid[expense.paid_by] += expense.amount

        # Add what each participant owes
        for participant_id, share in compute_shares(expense).items():
            total_owed[participant_id] += share

    balances = [
        PersonalBalance(
            participant_id=p.id,
            participant_name=p.name,
            total_paid=total_paid[p.id],
            total_owed=total_owed[p.id],
            balance=total_paid[p.id] - total_owed[p.id],
        )
        for p in settlement.participants
    ]
    logger.debug(f"Balances for settlement '{settlement.id}': {[(b.participant_id, str(b.balance)) for b in balances]}")
    return balances


def _is_settled(remaining: Decimal) -> bool:
    """True once a remaining amount rounds to zero whole units."""
    return abs(remaining) <= HALF_UNIT


def _pick_largest(parties: List[list]) -> int:
    """Position of the largest remaining amount; ties go to the earliest participant."""
    return max(range(len(parties)), key=lambda i: (parties[i][3], -parties[i][0]))


def compute_transactions(balances: List[PersonalBalance]) -> List[Transaction]:
    """
    Minimize the number of transfers needed to settle debts.
    Uses a greedy algorithm: the largest creditor is always paired with the
    largest debtor, and every transaction clears at least one of the two.
    Amounts are rounded to whole currency units only here.
    """
    # Separate creditors (positive balance) and debtors (negative balance)
    # Entries: [input position, participant id, name, remaining amount]
    creditors = [[i, b.participant_id, b.participant_name, b.balance] for i, b in enumerate(balances) if b.balance > 0]
    debtors = [[i, b.participant_id, b.participant_name, -b.balance] for i, b in enumerate(balances) if b.balance < 0]  # Store as positive for easier calculation

    transactions = []

    while creditors and debtors:
        cred_idx = _pick_largest(creditors)
        debt_idx = _pick_largest(debtors)
        creditor = creditors[cred_idx]
        debtor = debtors[debt_idx]

        # Transfer the minimum of what's owed and what's needed
        raw_amount = min(creditor[3], debtor[3])
        amount = round_currency(raw_amount)

        if amount > 0:
            transactions.append(Transaction(
                from_id=debtor[1],
                to_id=creditor[1],
                amount=int(amount),
                from_name=debtor[2],
                to_name=creditor[2],
            ))
        else:
            # Sub-unit leftover: nothing to send, just clear it
            amount = raw_amount

        creditor[3] -= amount
        debtor[3] -= amount

        if _is_settled(creditor[3]):
            creditors.pop(cred_idx)
        if _is_settled(debtor[3]):
            debtors.pop(debt_idx)

    leftover = [(party[1], str(party[3])) for party in creditors + debtors]
    if leftover:
        net = sum((b.balance for b in balances), Decimal(0))
        if _is_settled(net):
            logger.debug(f"Rounding residue left after whole-unit transfers: {leftover}")
        else:
            logger.warning(f"Balances do not net to zero (net {net}); left unsettled: {leftover}")

    logger.debug(f"Computed {len(transactions)} transactions: {[(t.from_id, t.to_id, t.amount) for t in transactions]}")
    return transactions


def build_settlement_result(settlement: Settlement) -> SettlementResult:
    """
    Calculate the full settlement report: balances, transfer plan and totals.
    """
    balances = compute_balances(settlement)
    transactions = compute_transactions(balances)

    result = SettlementResult(
        settlement=settlement,
        personal_balances=balances,
        transactions=transactions,
        total_amount=sum((expense.amount for expense in settlement.expenses), Decimal(0)),
        participant_count=len(settlement.participants),
    )
    result.summary = build_summary_text(result)

    logger.info(
        f"Settlement '{settlement.id}' calculated: {result.participant_count} participants, "
        f"{len(settlement.expenses)} expenses, {len(transactions)} transactions"
    )
    return result


def _signed(value: Decimal) -> str:
    text = format_currency(value)
    if round_currency(value) > 0:
        return f"+{text}"
    return text


def build_summary_text(result: SettlementResult) -> str:
    """Render a settlement result as shareable plain text."""
    settlement = result.settlement
    currency = settlement.currency

    summary_lines = []
    if settlement.name:
        summary_lines.append(f"[{settlement.name}]")
    if settlement.date:
        summary_lines.append(f"Date: {settlement.date.isoformat()}")
    summary_lines.append(f"Total expenses: {format_currency(result.total_amount)} {currency}")
    summary_lines.append(f"Participants: {result.participant_count}")
    summary_lines.append("\nNet balances:")
    for balance in result.personal_balances:
        summary_lines.append(f"  {balance.participant_name}: {_signed(balance.balance)} {currency}")
    summary_lines.append("\nTransfers:")
    if not result.transactions:
        summary_lines.append("  None")
    for transaction in result.transactions:
        summary_lines.append(
            f"  {transaction.from_name} -> {transaction.to_name}: "
            f"{format_currency(transaction.amount)} {currency}"
        )
    return "\n".join(summary_lines)
