"""
Schedule assignment endpoints.

POST /api/scheduling/check and /api/scheduling/assign:
validation errors (400/404), conflicts (409, nothing persisted),
and the happy path that places matches and publishes the tournament.
"""

from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from league_admin.models.field import PlayingField
from league_admin.models.match import Match
from league_admin.models.tournament import Tournament


@pytest.fixture
def schedule_setup(session: Session):
    """Tournament with two fields and three unplaced matches"""
    tournament = Tournament(name="Summer Cup", start_date=date(2024, 1, 1), end_date=date(2024, 1, 2))
    session.add(tournament)
    session.commit()
    session.refresh(tournament)

    field_a = PlayingField(tournament_id=tournament.id, name="Field A")
    field_b = PlayingField(tournament_id=tournament.id, name="Field B")
    session.add_all([field_a, field_b])
    session.commit()

    matches = [Match(tournament_id=tournament.id, match_number=n, round=1) for n in (1, 2, 3)]
    session.add_all(matches)
    session.commit()

    for obj in (field_a, field_b, *matches):
        session.refresh(obj)

    return {
        "tournament_id": tournament.id,
        "field_a": field_a.id,
        "field_b": field_b.id,
        "match_ids": [m.id for m in matches],
    }


def _placement(match_id, field_id, when="10:00", on="2024-01-01", duration=None):
    body = {"id": match_id, "scheduledDate": on, "scheduledTime": when, "fieldId": field_id}
    if duration is not None:
        body["duration"] = duration
    return body


def test_assign_requires_tournament_id(client: TestClient):
    response = client.post("/api/scheduling/assign", json={"matches": [_placement(1, 1)]})
    assert response.status_code == 400
    assert response.json()["detail"] == "Tournament ID is required"


def test_assign_requires_matches(client: TestClient, schedule_setup):
    response = client.post("/api/scheduling/assign", json={"tournamentId": schedule_setup["tournament_id"]})
    assert response.status_code == 400
    assert response.json()["detail"] == "No matches to assign"


def test_assign_rejects_incomplete_placements(client: TestClient, schedule_setup):
    m1, m2, _ = schedule_setup["match_ids"]
    response = client.post(
        "/api/scheduling/assign",
        json={
            "tournamentId": schedule_setup["tournament_id"],
            "matches": [
                _placement(m1, schedule_setup["field_a"]),
                {"id": m2, "scheduledDate": "2024-01-01", "scheduledTime": "", "fieldId": schedule_setup["field_a"]},
            ],
        },
    )
    assert response.status_code == 400
    assert response.json()["detail"]["incompleteCount"] == 1


def test_assign_unknown_tournament_is_404(client: TestClient):
    response = client.post("/api/scheduling/assign", json={"tournamentId": 999, "matches": [_placement(1, 1)]})
    assert response.status_code == 404


def test_assign_rejects_bad_time(client: TestClient, schedule_setup):
    m1 = schedule_setup["match_ids"][0]
    response = client.post(
        "/api/scheduling/assign",
        json={"tournamentId": schedule_setup["tournament_id"], "matches": [_placement(m1, schedule_setup["field_a"], when="noon")]},
    )
    assert response.status_code == 400


def test_assign_rejects_field_from_other_tournament(client: TestClient, schedule_setup):
    m1 = schedule_setup["match_ids"][0]
    response = client.post(
        "/api/scheduling/assign",
        json={"tournamentId": schedule_setup["tournament_id"], "matches": [_placement(m1, 999)]},
    )
    assert response.status_code == 400
    assert "Fields not found" in response.json()["detail"]


def test_assign_conflict_returns_409_and_persists_nothing(client: TestClient, session: Session, schedule_setup):
    m1, m2, m3 = schedule_setup["match_ids"]
    response = client.post(
        "/api/scheduling/assign",
        json={
            "tournamentId": schedule_setup["tournament_id"],
            "matches": [
                _placement(m1, schedule_setup["field_a"]),
                _placement(m2, schedule_setup["field_a"], when="10:00 AM"),
                _placement(m3, schedule_setup["field_b"]),
            ],
        },
    )

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["error"] == "Scheduling conflicts detected"
    assert len(detail["conflicts"]) == 1
    assert detail["conflicts"][0]["matchIds"] == [m1, m2]
    assert "2024-01-01 10:00" in detail["conflicts"][0]["reason"]

    session.expire_all()
    assert session.get(Match, m1).scheduled_date is None
    assert session.get(Tournament, schedule_setup["tournament_id"]).status == "Setup"


def test_assign_persists_and_publishes(client: TestClient, session: Session, schedule_setup):
    m1, m2, m3 = schedule_setup["match_ids"]
    response = client.post(
        "/api/scheduling/assign",
        json={
            "tournamentId": schedule_setup["tournament_id"],
            "matches": [
                _placement(m1, schedule_setup["field_a"], when="9:00 AM", duration=60),
                _placement(m2, schedule_setup["field_a"], when="10:30"),
                _placement(m3, schedule_setup["field_b"], when="9:00 AM"),
            ],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data == {
        "success": True,
        "message": "Schedule published successfully",
        "assignedMatches": 3,
        "tournamentId": schedule_setup["tournament_id"],
    }

    session.expire_all()
    first = session.get(Match, m1)
    assert first.field_id == schedule_setup["field_a"]
    assert first.scheduled_date == date(2024, 1, 1)
    assert first.scheduled_time == time(9, 0)
    assert first.duration_minutes == 60
    assert first.status == "scheduled"
    assert session.get(Match, m2).duration_minutes == 75

    tournament = session.get(Tournament, schedule_setup["tournament_id"])
    assert tournament.status == "Published"
    assert tournament.published_at is not None


def test_assign_detects_collision_with_already_scheduled_match(client: TestClient, schedule_setup):
    m1, m2, _ = schedule_setup["match_ids"]
    tid = schedule_setup["tournament_id"]
    first = client.post(
        "/api/scheduling/assign", json={"tournamentId": tid, "matches": [_placement(m1, schedule_setup["field_a"])]}
    )
    assert first.status_code == 200

    second = client.post(
        "/api/scheduling/assign", json={"tournamentId": tid, "matches": [_placement(m2, schedule_setup["field_a"])]}
    )
    assert second.status_code == 409
    assert second.json()["detail"]["conflicts"][0]["matchIds"] == [m2, m1]


def test_reassigning_same_match_is_not_a_self_conflict(client: TestClient, schedule_setup):
    m1 = schedule_setup["match_ids"][0]
    tid = schedule_setup["tournament_id"]
    body = {"tournamentId": tid, "matches": [_placement(m1, schedule_setup["field_a"])]}

    assert client.post("/api/scheduling/assign", json=body).status_code == 200
    assert client.post("/api/scheduling/assign", json=body).status_code == 200


def test_check_reports_conflicts_without_saving(client: TestClient, session: Session, schedule_setup):
    m1, m2, _ = schedule_setup["match_ids"]
    response = client.post(
        "/api/scheduling/check",
        json={
            "tournamentId": schedule_setup["tournament_id"],
            "matches": [_placement(m1, schedule_setup["field_b"]), _placement(m2, schedule_setup["field_b"])],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["hasConflicts"] is True
    assert data["conflicts"][0]["matchIds"] == [m1, m2]

    session.expire_all()
    assert session.get(Match, m1).field_id is None


def test_check_clean_batch(client: TestClient, schedule_setup):
    m1, m2, _ = schedule_setup["match_ids"]
    response = client.post(
        "/api/scheduling/check",
        json={
            "tournamentId": schedule_setup["tournament_id"],
            "matches": [_placement(m1, schedule_setup["field_a"]), _placement(m2, schedule_setup["field_b"])],
        },
    )
    assert response.json() == {"conflicts": [], "hasConflicts": False}
