"""Trips: create, list, get, update, delete, add/remove members, join by share code."""
import logging
import os

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tripsplit.database import get_db
from tripsplit.models import Trip, Member, Expense, ExpenseSplit
from tripsplit.schemas import TripCreate, TripUpdate, TripResponse, MemberCreate, JoinTrip
from tripsplit.services.ledger import participant

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "JPY")

router = APIRouter(prefix="/trips", tags=["trips"])


def _trip_response(trip: Trip) -> TripResponse:
    return TripResponse(
        id=trip.id,
        name=trip.name,
        description=trip.description,
        currency=trip.currency,
        share_code=trip.share_code,
        created_at=trip.created_at,
        members=[participant(m) for m in trip.members],
    )


def get_trip_or_404(db: Session, trip_id: str) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip


def _add_member(trip: Trip, data: MemberCreate) -> Member:
    # positions are never reused, so removals keep the roster order stable
    position = max((m.position for m in trip.members), default=-1) + 1
    member = Member(name=data.name, color=data.color, position=position)
    trip.members.append(member)
    return member


@router.get("", response_model=list[TripResponse])
def list_trips(db: Session = Depends(get_db)):
    trips = db.query(Trip).order_by(Trip.created_at.desc()).all()
    return [_trip_response(t) for t in trips]


@router.post("", response_model=TripResponse)
def create_trip(data: TripCreate, db: Session = Depends(get_db)):
    trip = Trip(
        name=data.name,
        description=data.description,
        currency=(data.currency or DEFAULT_CURRENCY).upper(),
    )
    for m in data.members:
        _add_member(trip, m)
    db.add(trip)
    db.commit()
    db.refresh(trip)
    logger.info("Created trip %s with %d members", trip.id, len(trip.members))
    return _trip_response(trip)


@router.post("/join", response_model=TripResponse)
def join_trip(data: JoinTrip, db: Session = Depends(get_db)):
    trip = db.query(Trip).filter(Trip.share_code == data.share_code).first()
    if not trip:
        raise HTTPException(status_code=404, detail="No trip found for that share code")
    member = _add_member(trip, data)
    db.commit()
    db.refresh(trip)
    logger.info("Member %s joined trip %s", member.id, trip.id)
    return _trip_response(trip)


@router.get("/{trip_id}", response_model=TripResponse)
def get_trip(trip_id: str, db: Session = Depends(get_db)):
    return _trip_response(get_trip_or_404(db, trip_id))


@router.patch("/{trip_id}", response_model=TripResponse)
def update_trip(trip_id: str, data: TripUpdate, db: Session = Depends(get_db)):
    trip = get_trip_or_404(db, trip_id)
    if data.name is not None:
        trip.name = data.name
    if data.description is not None:
        trip.description = data.description
    db.commit()
    db.refresh(trip)
    return _trip_response(trip)


@router.delete("/{trip_id}", status_code=204)
def delete_trip(trip_id: str, db: Session = Depends(get_db)):
    trip = get_trip_or_404(db, trip_id)
    db.delete(trip)
    db.commit()
    logger.info("Deleted trip %s", trip_id)


@router.post("/{trip_id}/members", response_model=TripResponse)
def add_trip_member(trip_id: str, data: MemberCreate, db: Session = Depends(get_db)):
    trip = get_trip_or_404(db, trip_id)
    _add_member(trip, data)
    db.commit()
    db.refresh(trip)
    return _trip_response(trip)


@router.delete("/{trip_id}/members/{member_id}", response_model=TripResponse)
def remove_trip_member(trip_id: str, member_id: str, db: Session = Depends(get_db)):
    trip = get_trip_or_404(db, trip_id)
    member = next((m for m in trip.members if m.id == member_id), None)
    if not member:
        raise HTTPException(status_code=404, detail="Member not in this trip")
    in_use = (
        db.query(Expense)
        .outerjoin(ExpenseSplit)
        .filter(Expense.trip_id == trip_id)
        .filter((Expense.paid_by == member_id) | (ExpenseSplit.member_id == member_id))
        .first()
    )
    if in_use:
        raise HTTPException(status_code=400, detail="Member is part of existing expenses")
    trip.members.remove(member)
    db.commit()
    db.refresh(trip)
    logger.info("Removed member %s from trip %s", member_id, trip_id)
    return _trip_response(trip)
