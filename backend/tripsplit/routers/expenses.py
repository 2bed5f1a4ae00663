"""Expenses: create, list, get, delete, export."""
import csv
import io
import json
import logging
from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from tripsplit.database import get_db
from tripsplit.models import Trip, Expense, ExpenseSplit
from tripsplit.schemas import ExpenseCreate, ExpenseResponse, EXPENSE_CATEGORIES
from tripsplit.routers.trips import get_trip_or_404
from tripsplit.services.currency import UnsupportedCurrency, convert_entry
from tripsplit.services.ledger import expense_response, settlement_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/expenses", tags=["expenses"])

UNKNOWN_MEMBER = "Unknown"


@router.post("", response_model=ExpenseResponse)
def create_expense(data: ExpenseCreate, db: Session = Depends(get_db)):
    trip = get_trip_or_404(db, data.trip_id)
    member_ids = {m.id for m in trip.members}
    if data.paid_by not in member_ids:
        raise HTTPException(status_code=400, detail="Payer must be a trip member")
    if not set(data.split_between) <= member_ids:
        raise HTTPException(status_code=400, detail="All participants must be trip members")
    if data.category and data.category not in EXPENSE_CATEGORIES:
        raise HTTPException(status_code=400, detail=f"Invalid category. Must be one of: {', '.join(EXPENSE_CATEGORIES)}")

    try:
        amount, description = convert_entry(data.amount, data.description, data.entered_currency, trip.currency)
    except UnsupportedCurrency as e:
        raise HTTPException(status_code=400, detail=str(e))
    if amount <= 0:
        raise HTTPException(status_code=400, detail="Amount is zero after conversion to the trip currency")

    weights = data.split_weights or {}
    expense = Expense(
        trip_id=trip.id,
        paid_by=data.paid_by,
        amount=amount,
        description=description,
        category=data.category or None,
        date=data.date or datetime.now(timezone.utc),
    )
    expense.splits = [ExpenseSplit(member_id=mid, weight=weights.get(mid)) for mid in data.split_between]
    db.add(expense)
    db.commit()
    db.refresh(expense)
    logger.info("Added expense %s (%.2f %s) to trip %s", expense.id, expense.amount, trip.currency, trip.id)
    return expense_response(expense)


@router.get("", response_model=list[ExpenseResponse])
def list_expenses(
    trip_id: str = Query(..., alias="tripId"),
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    get_trip_or_404(db, trip_id)
    q = db.query(Expense).filter(Expense.trip_id == trip_id)

    if search:
        q = q.filter(Expense.description.ilike(f"%{search}%"))
    if category:
        q = q.filter(Expense.category == category)

    expenses = q.order_by(Expense.date.desc()).offset(offset).limit(limit).all()
    return [expense_response(e) for e in expenses]


def _export_filename(trip: Trip, ext: str) -> str:
    return f"trip-{trip.id}-{datetime.now(timezone.utc):%Y-%m-%d}.{ext}"


def _csv_export(trip: Trip) -> str:
    names = {m.id: m.name for m in trip.members}
    expenses = sorted(trip.expenses, key=lambda e: e.date, reverse=True)

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["Date", "Description", "Amount", "Currency", "Paid By", "Participants", "Category"])
    for e in expenses:
        participants = "; ".join(names.get(s.member_id, UNKNOWN_MEMBER) for s in e.splits)
        writer.writerow([
            e.date.strftime("%Y-%m-%d"),
            e.description,
            f"{e.amount:.2f}",
            trip.currency,
            names.get(e.paid_by, UNKNOWN_MEMBER),
            participants,
            e.category or "",
        ])
    return output.getvalue()


def _json_export(trip: Trip) -> str:
    summary = settlement_summary(trip)
    doc = {
        "trip": {"id": trip.id, "name": trip.name, "currency": trip.currency},
        "people": [p.model_dump(mode="json", by_alias=True) for p in summary.members],
        "expenses": [expense_response(e).model_dump(mode="json", by_alias=True) for e in trip.expenses],
        "balances": [b.model_dump(mode="json", by_alias=True) for b in summary.balances],
        "settlements": [s.model_dump(mode="json", by_alias=True) for s in summary.settlements],
        "exportDate": datetime.now(timezone.utc).isoformat(),
    }
    return json.dumps(doc, indent=2, ensure_ascii=False)


@router.get("/export")
def export_expenses(
    trip_id: str = Query(..., alias="tripId"),
    fmt: Literal["csv", "json"] = Query("csv", alias="format"),
    db: Session = Depends(get_db),
):
    trip = get_trip_or_404(db, trip_id)
    if fmt == "json":
        body, media_type = _json_export(trip), "application/json"
    else:
        body, media_type = _csv_export(trip), "text/csv"

    return StreamingResponse(
        iter([body]),
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={_export_filename(trip, fmt)}"},
    )


@router.get("/{expense_id}", response_model=ExpenseResponse)
def get_expense(expense_id: str, db: Session = Depends(get_db)):
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense_response(expense)


@router.delete("/{expense_id}", status_code=204)
def delete_expense(expense_id: str, db: Session = Depends(get_db)):
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    db.delete(expense)
    db.commit()
    logger.info("Deleted expense %s", expense_id)
