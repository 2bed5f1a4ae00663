"""Turn stored trip rows into the engine's participant/expense inputs."""
from tripsplit import models
from tripsplit.schemas import Expense, ExpenseResponse, Participant, SettlementSummary
from tripsplit.services.balance_calculator import compute_balances
from tripsplit.services.settlement_calculator import plan_settlements


def participant(member: models.Member) -> Participant:
    return Participant(id=member.id, name=member.name, color=member.color)


def expense_response(exp: models.Expense) -> ExpenseResponse:
    weights = {s.member_id: s.weight for s in exp.splits if s.weight is not None}
    return ExpenseResponse(
        id=exp.id,
        trip_id=exp.trip_id,
        description=exp.description,
        amount=exp.amount,
        paid_by=exp.paid_by,
        split_between=[s.member_id for s in exp.splits],
        category=exp.category,
        split_weights=weights or None,
        date=exp.date,
        created_at=exp.created_at,
    )


def load_ledger(trip: models.Trip) -> tuple[list[Participant], list[Expense]]:
    return [participant(m) for m in trip.members], [expense_response(e) for e in trip.expenses]


def settlement_summary(trip: models.Trip) -> SettlementSummary:
    participants, expenses = load_ledger(trip)
    balances = compute_balances(participants, expenses)
    return SettlementSummary(
        trip_id=trip.id,
        currency=trip.currency,
        members=participants,
        balances=balances,
        settlements=plan_settlements(balances),
    )
