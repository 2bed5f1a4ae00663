"""Pydantic schemas for request/response."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_MEMBER_COLOR = "#FF6B6B"

EXPENSE_CATEGORIES = [
    "food",
    "transport",
    "accommodation",
    "entertainment",
    "shopping",
    "other",
]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ----- Participant -----
class Participant(CamelModel):
    id: str
    name: str
    color: str = DEFAULT_MEMBER_COLOR


class MemberCreate(CamelModel):
    name: str
    color: str = DEFAULT_MEMBER_COLOR

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Member name must not be empty")
        return v.strip()


class JoinTrip(MemberCreate):
    share_code: str


# ----- Expense -----
class ExpenseBase(CamelModel):
    description: str
    amount: float
    paid_by: str
    split_between: list[str]
    category: Optional[str] = None
    split_weights: Optional[dict[str, float]] = None

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Description must not be empty")
        return v.strip()

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Amount must be positive")
        return v

    @field_validator("split_between")
    @classmethod
    def split_not_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one participant required")
        if len(set(v)) != len(v):
            raise ValueError("Participants must not repeat")
        return v

    @model_validator(mode="after")
    def weights_match_split(self):
        if self.split_weights is None:
            return self
        unknown = set(self.split_weights) - set(self.split_between)
        if unknown:
            raise ValueError(f"Weights given for ids outside the split: {', '.join(sorted(unknown))}")
        if any(w <= 0 for w in self.split_weights.values()):
            raise ValueError("Weights must be positive")
        return self


class Expense(ExpenseBase):
    id: str
    date: datetime


class ExpenseCreate(ExpenseBase):
    trip_id: str
    date: Optional[datetime] = None
    entered_currency: Optional[str] = None


class ExpenseResponse(Expense):
    trip_id: str
    created_at: Optional[datetime] = None


# ----- Balance / Settlement -----
class BalanceItem(CamelModel):
    person_id: str
    balance: float  # positive = is owed money, negative = owes money
    total_paid: float = 0.0
    total_owed: float = 0.0


class SettlementItem(CamelModel):
    from_person_id: str = Field(alias="from")
    to_person_id: str = Field(alias="to")
    amount: float


class CalculateRequest(CamelModel):
    participants: list[Participant]
    expenses: list[Expense] = []


class CalculateResponse(CamelModel):
    balances: list[BalanceItem]
    settlements: list[SettlementItem]


# ----- Trip -----
class TripBase(CamelModel):
    name: str
    description: Optional[str] = None


class TripCreate(TripBase):
    currency: Optional[str] = None
    members: list[MemberCreate] = []


class TripUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None


class TripResponse(TripBase):
    id: str
    currency: str
    share_code: str
    created_at: Optional[datetime] = None
    members: list[Participant] = []


class SettlementSummary(CamelModel):
    trip_id: str
    currency: str
    members: list[Participant] = []
    balances: list[BalanceItem]
    settlements: list[SettlementItem]


class TripStats(CamelModel):
    total_expenses: float
    per_person: float
    expense_count: int
    category_totals: dict[str, float]
