import os
import random
from datetime import datetime

# must be set before tripsplit.database creates its engine
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

import pytest
from fastapi.testclient import TestClient

from tripsplit.database import Base, SessionLocal, engine
from tripsplit.main import app
from tripsplit.schemas import Expense, Participant


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def random_ledger():
    """Seeded ledger of 2-8 people and up to 25 expenses, some weighted."""
    def _build(seed):
        rng = random.Random(seed)
        ids = [f"p{i}" for i in range(rng.randint(2, 8))]
        people = [Participant(id=pid, name=pid) for pid in ids]
        expenses = []
        for n in range(rng.randint(0, 25)):
            split = rng.sample(ids, rng.randint(1, len(ids)))
            weights = {pid: rng.randint(1, 4) for pid in split} if rng.random() < 0.3 else None
            expenses.append(Expense(
                id=str(n), description=f"Expense {n}", amount=round(rng.uniform(1, 500), 2),
                paid_by=rng.choice(ids), split_between=split, split_weights=weights,
                date=datetime(2025, 4, 1),
            ))
        return people, expenses
    return _build


@pytest.fixture
def trip(client):
    res = client.post("/api/trips", json={
        "name": "Japan", "description": "Spring trip",
        "members": [
            {"name": "Monika", "color": "#FF6B6B"},
            {"name": "Jedrzej", "color": "#4ECDC4"},
            {"name": "Karolina", "color": "#45B7D1"},
        ],
    })
    return res.json()


@pytest.fixture
def member_ids(trip):
    return [m["id"] for m in trip["members"]]


@pytest.fixture
def add_expense(client, trip, member_ids):
    def _add(amount, paid_by=0, split=(0, 1, 2), **extra):
        body = {
            "tripId": trip["id"],
            "description": extra.pop("description", "Expense"),
            "amount": amount,
            "paidBy": member_ids[paid_by],
            "splitBetween": [member_ids[i] for i in split],
            **extra,
        }
        return client.post("/api/expenses", json=body)
    return _add
