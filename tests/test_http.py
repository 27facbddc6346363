from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from daybook.services import ServiceContext
from daybook.services.http import create_app

STANDUP = {
    "title": "Standup",
    "date": "2024-03-05",
    "startTime": "09:00",
    "endTime": "09:15",
    "category": "work",
}


@pytest.fixture
def client(context, user, other_user):
    with TestClient(create_app(context)) as test_client:
        yield test_client


def _as(user_id):
    return {"X-User-Id": user_id}


def test_unknown_caller_is_rejected(client):
    assert client.get("/api/events").status_code == 401
    assert client.get("/api/events", headers=_as("nobody")).status_code == 401


def test_health_and_categories(client):
    assert client.get("/api/health").json() == {"status": "ok", "database": True}
    categories = client.get("/api/categories").json()
    assert {"value": "work", "color": "#ef4444"} in categories


def test_create_returns_camel_case_record(client, user):
    response = client.post("/api/events", json=STANDUP, headers=_as(user))

    assert response.status_code == 201
    body = response.json()
    assert body["userId"] == user
    assert body["startTime"] == "09:00"
    assert body["isRecurring"] is False
    assert body["color"] == "#3b82f6"
    assert body["timezone"] == "UTC"
    assert body["createdAt"] == body["updatedAt"]


def test_create_reports_invalid_fields(client, user):
    response = client.post(
        "/api/events",
        json={**STANDUP, "title": "", "startTime": "25:00"},
        headers=_as(user),
    )

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"title", "start_time"}


def test_list_filters_by_query_parameters(client, user):
    client.post("/api/events", json=STANDUP, headers=_as(user))
    client.post("/api/events", json={**STANDUP, "title": "Offsite", "date": "2024-04-02"}, headers=_as(user))

    march = client.get(
        "/api/events",
        params={"startDate": "2024-03-01", "endDate": "2024-03-31", "search": "STAND"},
        headers=_as(user),
    )
    assert [event["title"] for event in march.json()] == ["Standup"]

    invalid = client.get("/api/events", params={"startDate": "March"}, headers=_as(user))
    assert invalid.status_code == 400


def test_get_update_delete_round(client, user, other_user):
    created = client.post("/api/events", json=STANDUP, headers=_as(user)).json()
    url = f"/api/events/{created['id']}"

    assert client.get(url, headers=_as(user)).json()["title"] == "Standup"
    assert client.get(url, headers=_as(other_user)).status_code == 403
    assert client.get("/api/events/missing", headers=_as(user)).status_code == 404

    updated = client.put(url, json={"location": "Room 4"}, headers=_as(user)).json()
    assert updated["location"] == "Room 4"
    assert updated["title"] == "Standup"
    assert updated["updatedAt"] > created["updatedAt"]

    assert client.put(url, json={"title": "x"}, headers=_as(other_user)).status_code == 403
    assert client.delete(url, headers=_as(other_user)).status_code == 403

    deleted = client.delete(url, headers=_as(user))
    assert deleted.status_code == 200
    assert client.get(url, headers=_as(user)).status_code == 404


def test_masked_ownership_errors(settings, clock):
    masked = replace(settings, http=replace(settings.http, mask_forbidden=True))
    context = ServiceContext(settings=masked)
    context.events.clock = clock
    with context, TestClient(create_app(context)) as masked_client:
        owner = context.users.create("carol", "carol@example.com").id
        stranger = context.users.create("dave", "dave@example.com").id
        created = masked_client.post("/api/events", json=STANDUP, headers=_as(owner)).json()

        response = masked_client.get(f"/api/events/{created['id']}", headers=_as(stranger))

    assert response.status_code == 404


def test_export_ical(client, user):
    client.post("/api/events", json=STANDUP, headers=_as(user))

    response = client.get(
        "/api/events/export/ical",
        params={"startDate": "2024-03-01", "endDate": "2024-03-31"},
        headers=_as(user),
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/calendar")
    assert 'filename="calendar.ics"' in response.headers["content-disposition"]
    assert "SUMMARY:Standup" in response.text
    assert "DTSTART:20240305T090000" in response.text


def test_month_view(client, user):
    client.post("/api/events", json=STANDUP, headers=_as(user))

    response = client.get("/api/calendar/month", params={"date": "2024-03-15"}, headers=_as(user))

    body = response.json()
    assert body["reference"] == "2024-03-15"
    assert body["previousMonth"] == "2024-02-15"
    assert len(body["weeks"]) == 6
    days = {cell["day"]: cell for week in body["weeks"] for cell in week}
    assert [event["title"] for event in days["2024-03-05"]["events"]] == ["Standup"]
    assert days["2024-02-25"]["inMonth"] is False

    assert client.get("/api/calendar/month", params={"date": "15/03/2024"}, headers=_as(user)).status_code == 400
