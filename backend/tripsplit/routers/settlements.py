"""Settlements: balances and who owes whom, for stored trips or an ad-hoc ledger."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tripsplit.database import get_db
from tripsplit.schemas import CalculateRequest, CalculateResponse, SettlementSummary, TripStats
from tripsplit.routers.trips import get_trip_or_404
from tripsplit.services.balance_calculator import compute_balances
from tripsplit.services.ledger import settlement_summary
from tripsplit.services.money import money_float, to_decimal
from tripsplit.services.settlement_calculator import plan_settlements

router = APIRouter(prefix="/settlements", tags=["settlements"])


@router.post("/calculate", response_model=CalculateResponse)
def calculate(data: CalculateRequest):
    roster = [p.id for p in data.participants]
    if len(set(roster)) != len(roster):
        raise HTTPException(status_code=400, detail="Participant ids must be unique")
    known = set(roster)
    for e in data.expenses:
        if e.paid_by not in known or not set(e.split_between) <= known:
            raise HTTPException(status_code=400, detail=f"Expense {e.id} references an unknown participant")

    balances = compute_balances(data.participants, data.expenses)
    return CalculateResponse(balances=balances, settlements=plan_settlements(balances))


@router.get("/trip/{trip_id}", response_model=SettlementSummary)
def get_settlements(trip_id: str, db: Session = Depends(get_db)):
    return settlement_summary(get_trip_or_404(db, trip_id))


@router.get("/summary/{trip_id}", response_model=TripStats)
def get_summary(trip_id: str, db: Session = Depends(get_db)):
    trip = get_trip_or_404(db, trip_id)

    total = sum((to_decimal(e.amount) for e in trip.expenses), to_decimal(0))
    cat_totals = {}
    for e in trip.expenses:
        cat = e.category or "other"
        cat_totals[cat] = cat_totals.get(cat, 0) + to_decimal(e.amount)

    per_person = total / len(trip.members) if trip.members else 0
    return TripStats(
        total_expenses=money_float(total),
        per_person=money_float(per_person),
        expense_count=len(trip.expenses),
        category_totals={cat: money_float(v) for cat, v in cat_totals.items()},
    )
