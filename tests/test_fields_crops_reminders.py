"""Field, crop, reminder, profile and dashboard routes."""
import uuid
from datetime import date, timedelta

from cropcast.models import User
from cropcast.services.ownership import find_owned_field


def test_previous_crops_round_trip_in_order(client, auth_headers, farm):
    resp = client.post(
        f"/farms/{farm['id']}/fields",
        json={"field_name": "South", "soil_type": "Sandy", "previous_crops": ["Wheat", "Soy"]},
        headers=auth_headers,
    )
    assert resp.status_code == 201

    fields = client.get(f"/farms/{farm['id']}/fields", headers=auth_headers).json()
    assert len(fields) == 1
    assert fields[0]["previous_crops"] == ["Wheat", "Soy"]


def test_previous_crops_keep_duplicates(client, auth_headers, farm):
    resp = client.post(
        f"/farms/{farm['id']}/fields",
        json={"field_name": "West", "soil_type": "Peaty", "previous_crops": ["Maize", "Beans", "Maize"]},
        headers=auth_headers,
    )
    assert resp.json()["previous_crops"] == ["Maize", "Beans", "Maize"]


def test_unknown_soil_type_rejected(client, auth_headers, farm):
    resp = client.post(
        f"/farms/{farm['id']}/fields",
        json={"field_name": "Odd", "soil_type": "Volcanic"},
        headers=auth_headers,
    )
    assert resp.status_code == 422


def test_update_and_delete_field(client, auth_headers, farm, field):
    resp = client.put(
        f"/fields/{field['id']}",
        json={"soil_type": "Loamy", "previous_crops": ["Wheat", "Barley"]},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["soil_type"] == "Loamy"
    assert resp.json()["previous_crops"] == ["Wheat", "Barley"]

    assert client.delete(f"/fields/{field['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/farms/{farm['id']}/fields", headers=auth_headers).json() == []


def test_crop_defaults_to_planning(client, auth_headers, farm):
    resp = client.post(f"/farms/{farm['id']}/crops", json={"crop_type": "Maize", "variety": "H614"}, headers=auth_headers)
    assert resp.status_code == 201
    assert resp.json()["current_stage"] == "planning"


def test_crop_stage_must_be_known(client, auth_headers, farm):
    resp = client.post(
        f"/farms/{farm['id']}/crops", json={"crop_type": "Maize", "current_stage": "sleeping"}, headers=auth_headers
    )
    assert resp.status_code == 422


def test_crop_harvest_before_planting_rejected(client, auth_headers, farm):
    resp = client.post(
        f"/farms/{farm['id']}/crops",
        json={"crop_type": "Maize", "planting_date": "2026-03-01", "expected_harvest_date": "2026-02-01"},
        headers=auth_headers,
    )
    assert resp.status_code == 400


def test_crop_list_limit_and_update(client, auth_headers, farm):
    ids = []
    for crop_type in ["Maize", "Beans", "Kale", "Tea"]:
        ids.append(client.post(f"/farms/{farm['id']}/crops", json={"crop_type": crop_type}, headers=auth_headers).json()["id"])

    latest = client.get(f"/farms/{farm['id']}/crops", params={"limit": 3}, headers=auth_headers).json()
    assert [c["crop_type"] for c in latest] == ["Tea", "Kale", "Beans"]

    resp = client.put(f"/crops/{ids[0]}", json={"current_stage": "flowering"}, headers=auth_headers)
    assert resp.json()["current_stage"] == "flowering"
    assert client.delete(f"/crops/{ids[0]}", headers=auth_headers).status_code == 204


def test_reminders_sorted_by_date_and_toggle(client, auth_headers):
    today = date.today()
    later = client.post(
        "/reminders", json={"title": "Harvest", "reminder_date": str(today + timedelta(days=30))}, headers=auth_headers
    ).json()
    sooner = client.post(
        "/reminders",
        json={"title": "Spray", "description": "Aphids", "reminder_date": str(today + timedelta(days=2))},
        headers=auth_headers,
    ).json()

    listed = client.get("/reminders", headers=auth_headers).json()
    assert [r["id"] for r in listed] == [sooner["id"], later["id"]]
    assert listed[0]["is_completed"] is False

    resp = client.put(f"/reminders/{sooner['id']}", json={"is_completed": True}, headers=auth_headers)
    assert resp.json()["is_completed"] is True
    assert resp.json()["title"] == "Spray"


def test_reminder_requires_title_and_date(client, auth_headers):
    assert client.post("/reminders", json={"title": "No date"}, headers=auth_headers).status_code == 422
    resp = client.post("/reminders", json={"title": " ", "reminder_date": "2026-11-01"}, headers=auth_headers)
    assert resp.status_code == 400


def test_profile_update(client, auth_headers):
    resp = client.put("/profile", json={"full_name": "Grace", "phone": "+254700000000"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["full_name"] == "Grace"
    assert client.get("/auth/me", headers=auth_headers).json()["display_name"] == "Grace"


def test_weather_snapshot(client, auth_headers):
    resp = client.get("/weather", params={"location": "Kisumu"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {
        "location": "Kisumu",
        "temperature": 24,
        "condition": "Partly Cloudy",
        "humidity": 65,
        "wind_speed": 12,
    }


def test_dashboard_for_farm(client, register):
    headers = register(email="dash@example.com")
    farm = client.post("/farms", json={"name": "Dash", "location": "Meru"}, headers=headers).json()
    for crop_type in ["A", "B", "C", "D"]:
        client.post(f"/farms/{farm['id']}/crops", json={"crop_type": crop_type}, headers=headers)

    resp = client.get("/dashboard", params={"farm_id": farm["id"]}, headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["display_name"] == "Farmer"
    assert [c["crop_type"] for c in body["crops"]] == ["D", "C", "B"]
    assert body["weather"]["location"] == "Meru"
    assert body["recommendations"] == []


def test_dashboard_without_farm(client, auth_headers):
    body = client.get("/dashboard", headers=auth_headers).json()
    assert body["farm"] is None
    assert body["crops"] == []
    assert body["weather"] is None


def test_owned_field_lookup_is_scoped_to_owner(register, field, db):
    register(email="neighbour@example.com")
    owner = db.query(User).filter(User.email == "farmer@example.com").one()
    neighbour = db.query(User).filter(User.email == "neighbour@example.com").one()
    field_id = uuid.UUID(field["id"])

    assert find_owned_field(db, owner, field_id).field_name == "East Block"
    assert find_owned_field(db, neighbour, field_id) is None
