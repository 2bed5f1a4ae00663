from fastapi.testclient import TestClient

from tripsplit.database import Base, engine
from tripsplit.main import app
from tripsplit.models import Member


def test_create_trip(client):
    res = client.post("/api/trips", json={
        "name": "Japan", "description": "Spring trip",
        "members": [{"name": "Monika"}, {"name": "Filip", "color": "#FFA07A"}],
    })
    assert res.status_code == 200
    data = res.json()
    assert data["name"] == "Japan"
    assert data["currency"] == "JPY"
    assert data["shareCode"]
    assert [m["name"] for m in data["members"]] == ["Monika", "Filip"]
    assert data["members"][0]["color"] == "#FF6B6B"


def test_list_trips(client):
    client.post("/api/trips", json={"name": "T1"})
    client.post("/api/trips", json={"name": "T2", "currency": "pln"})
    res = client.get("/api/trips")
    assert res.status_code == 200
    assert len(res.json()) == 2
    assert {t["currency"] for t in res.json()} == {"JPY", "PLN"}


def test_get_missing_trip(client):
    res = client.get("/api/trips/does-not-exist")
    assert res.status_code == 404


def test_update_trip(client, trip):
    res = client.patch(f"/api/trips/{trip['id']}", json={"name": "Japan 2025"})
    assert res.status_code == 200
    assert res.json()["name"] == "Japan 2025"
    assert res.json()["description"] == "Spring trip"


def test_delete_trip(client, trip, add_expense):
    add_expense(300)
    res = client.delete(f"/api/trips/{trip['id']}")
    assert res.status_code == 204
    assert client.get("/api/trips").json() == []


def test_add_member(client, trip):
    res = client.post(f"/api/trips/{trip['id']}/members", json={"name": "Filip", "color": "#FFA07A"})
    assert res.status_code == 200
    members = res.json()["members"]
    assert len(members) == 4
    assert members[-1]["name"] == "Filip"


def test_blank_member_name_rejected(client, trip):
    res = client.post(f"/api/trips/{trip['id']}/members", json={"name": "  "})
    assert res.status_code == 422


def test_join_by_share_code(client, trip):
    res = client.post("/api/trips/join", json={"shareCode": trip["shareCode"], "name": "Filip"})
    assert res.status_code == 200
    assert res.json()["id"] == trip["id"]
    assert len(res.json()["members"]) == 4


def test_join_unknown_code(client, trip):
    res = client.post("/api/trips/join", json={"shareCode": "nope", "name": "Filip"})
    assert res.status_code == 404


def test_remove_member(client, trip, member_ids):
    res = client.delete(f"/api/trips/{trip['id']}/members/{member_ids[2]}")
    assert res.status_code == 200
    assert [m["id"] for m in res.json()["members"]] == member_ids[:2]


def test_remove_member_with_expenses(client, trip, member_ids, add_expense):
    add_expense(300, paid_by=0, split=(0, 2))
    res = client.delete(f"/api/trips/{trip['id']}/members/{member_ids[2]}")
    assert res.status_code == 400
    res = client.delete(f"/api/trips/{trip['id']}/members/{member_ids[1]}")
    assert res.status_code == 200


def test_member_added_after_removal_goes_last(client, db, trip, member_ids):
    client.delete(f"/api/trips/{trip['id']}/members/{member_ids[0]}")
    res = client.post(f"/api/trips/{trip['id']}/members", json={"name": "Filip"})
    assert res.status_code == 200
    assert [m["name"] for m in res.json()["members"]] == ["Jedrzej", "Karolina", "Filip"]

    positions = [m.position for m in db.query(Member).filter(Member.trip_id == trip["id"]).all()]
    assert len(set(positions)) == len(positions) == 3


def test_startup_creates_tables():
    Base.metadata.drop_all(bind=engine)
    with TestClient(app) as c:
        assert c.post("/api/trips", json={"name": "Fresh"}).status_code == 200
