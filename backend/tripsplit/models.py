"""SQLAlchemy models."""
import secrets
import uuid

from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tripsplit.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _share_code() -> str:
    return secrets.token_urlsafe(6)


class Trip(Base):
    __tablename__ = "trips"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    description = Column(String(512), nullable=True)
    currency = Column(String(3), nullable=False, default="JPY")
    share_code = Column(String(16), unique=True, index=True, nullable=False, default=_share_code)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship(
        "Member", back_populates="trip", cascade="all, delete-orphan", order_by="Member.position",
    )
    expenses = relationship("Expense", back_populates="trip", cascade="all, delete-orphan")


class Member(Base):
    __tablename__ = "members"

    id = Column(String(36), primary_key=True, default=_uuid)
    trip_id = Column(String(36), ForeignKey("trips.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    color = Column(String(16), nullable=False, default="#FF6B6B")
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    trip = relationship("Trip", back_populates="members")


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String(36), primary_key=True, default=_uuid)
    trip_id = Column(String(36), ForeignKey("trips.id"), nullable=False, index=True)
    paid_by = Column(String(36), ForeignKey("members.id"), nullable=False)
    amount = Column(Float, nullable=False)
    description = Column(String(512), nullable=False)
    category = Column(String(100), nullable=True)
    date = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    trip = relationship("Trip", back_populates="expenses")
    splits = relationship(
        "ExpenseSplit", back_populates="expense", cascade="all, delete-orphan", order_by="ExpenseSplit.id",
    )


class ExpenseSplit(Base):
    __tablename__ = "expense_splits"

    id = Column(Integer, primary_key=True, index=True)
    expense_id = Column(String(36), ForeignKey("expenses.id"), nullable=False)
    member_id = Column(String(36), ForeignKey("members.id"), nullable=False)
    weight = Column(Float, nullable=True)

    expense = relationship("Expense", back_populates="splits")
