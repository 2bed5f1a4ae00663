"""Net position of every participant from the expense ledger."""
from collections.abc import Sequence
from decimal import Decimal

from tripsplit.schemas import BalanceItem, Expense, Participant
from tripsplit.services.money import money_float, to_decimal


def expense_shares(expense: Expense) -> dict[str, Decimal]:
    """Amount each member of the split is charged for one expense.

    Equal split unless split_weights is set; members without a weight count as 1.
    """
    amount = to_decimal(expense.amount)
    if not expense.split_weights:
        share = amount / len(expense.split_between)
        return {pid: share for pid in expense.split_between}

    weights = {pid: to_decimal(expense.split_weights.get(pid, 1)) for pid in expense.split_between}
    total_weight = sum(weights.values())
    return {pid: amount * w / total_weight for pid, w in weights.items()}


def ledger_totals(
    participants: Sequence[Participant], expenses: Sequence[Expense],
) -> tuple[dict[str, Decimal], dict[str, Decimal]]:
    """Unrounded (paid, owed) per participant id."""
    paid: dict[str, Decimal] = {p.id: Decimal(0) for p in participants}
    owed: dict[str, Decimal] = {p.id: Decimal(0) for p in participants}

    for e in expenses:
        paid[e.paid_by] += to_decimal(e.amount)
        for pid, share in expense_shares(e).items():
            owed[pid] += share
    return paid, owed


def compute_balances(participants: Sequence[Participant], expenses: Sequence[Expense]) -> list[BalanceItem]:
    """
    One BalanceItem per participant, in roster order.
    balance = total paid - total owed (positive = is owed money, negative = owes money).
    Ids in expenses are trusted to reference the roster.
    """
    paid, owed = ledger_totals(participants, expenses)
    return [
        BalanceItem(
            person_id=p.id,
            balance=money_float(paid[p.id] - owed[p.id]),
            total_paid=money_float(paid[p.id]),
            total_owed=money_float(owed[p.id]),
        )
        for p in participants
    ]
