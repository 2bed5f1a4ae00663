"""Minimize number of transfers so everyone is settled (who owes whom)."""
import logging
from collections.abc import Sequence

from tripsplit.schemas import BalanceItem, SettlementItem
from tripsplit.services.money import TOLERANCE, money_float, to_decimal

logger = logging.getLogger(__name__)


def plan_settlements(balances: Sequence[BalanceItem]) -> list[SettlementItem]:
    """
    balances: one entry per participant (positive = is owed money, negative = owes money).
    Returns the transfers that zero every balance, largest creditor matched with
    largest debtor first. Residue within TOLERANCE is treated as settled.
    """
    debtors = []  # [person_id, remaining debt]
    creditors = []
    for b in balances:
        bal = to_decimal(b.balance)
        if bal < -TOLERANCE:
            debtors.append([b.person_id, -bal])
        elif bal > TOLERANCE:
            creditors.append([b.person_id, bal])
    # list.sort is stable, so equal amounts keep roster order
    debtors.sort(key=lambda x: x[1], reverse=True)
    creditors.sort(key=lambda x: x[1], reverse=True)

    out: list[SettlementItem] = []
    i, j = 0, 0
    while i < len(debtors) and j < len(creditors):
        debtor, creditor = debtors[i], creditors[j]
        transfer = min(debtor[1], creditor[1])
        if transfer > TOLERANCE:
            out.append(SettlementItem(
                from_person_id=debtor[0],
                to_person_id=creditor[0],
                amount=money_float(transfer),
            ))
        debtor[1] -= transfer
        creditor[1] -= transfer
        if debtor[1] < TOLERANCE:
            i += 1
        if creditor[1] < TOLERANCE:
            j += 1

    logger.debug("Planned %d transfers for %d balances", len(out), len(balances))
    return out


def apply_settlements(balances: Sequence[BalanceItem], settlements: Sequence[SettlementItem]) -> dict[str, float]:
    """Balances left after every transfer in the plan is paid."""
    remaining = {b.person_id: to_decimal(b.balance) for b in balances}
    for s in settlements:
        amount = to_decimal(s.amount)
        remaining[s.from_person_id] += amount
        remaining[s.to_person_id] -= amount
    return {pid: money_float(bal) for pid, bal in remaining.items()}
