"""Fields and match CRUD for a tournament."""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def tournament_id(client: TestClient):
    response = client.post(
        "/api/tournaments", json={"name": "Winter League", "startDate": "2024-01-01", "endDate": "2024-01-02"}
    )
    return response.json()["id"]


# ============================================================================
# Fields
# ============================================================================


def test_create_and_list_fields(client: TestClient, tournament_id):
    client.post(f"/api/tournaments/{tournament_id}/fields", json={"name": "Field 2"})
    created = client.post(
        f"/api/tournaments/{tournament_id}/fields", json={"name": "Field 1", "location": "Main Complex"}
    )

    assert created.status_code == 201
    assert created.json()["location"] == "Main Complex"
    names = [f["name"] for f in client.get(f"/api/tournaments/{tournament_id}/fields").json()]
    assert names == ["Field 1", "Field 2"]


def test_duplicate_field_name_is_409(client: TestClient, tournament_id):
    client.post(f"/api/tournaments/{tournament_id}/fields", json={"name": "Field 1"})
    response = client.post(f"/api/tournaments/{tournament_id}/fields", json={"name": "Field 1"})
    assert response.status_code == 409


def test_delete_field_in_use_is_409(client: TestClient, tournament_id):
    field_id = client.post(f"/api/tournaments/{tournament_id}/fields", json={"name": "Field 1"}).json()["id"]
    client.post(f"/api/tournaments/{tournament_id}/matches", json={"matches": [{"matchNumber": 1}]})
    match_id = client.get(f"/api/tournaments/{tournament_id}/matches").json()[0]["id"]
    client.post(
        "/api/scheduling/assign",
        json={
            "tournamentId": tournament_id,
            "matches": [{"id": match_id, "scheduledDate": "2024-01-01", "scheduledTime": "09:00", "fieldId": field_id}],
        },
    )

    assert client.delete(f"/api/fields/{field_id}").status_code == 409


def test_delete_unused_field(client: TestClient, tournament_id):
    field_id = client.post(f"/api/tournaments/{tournament_id}/fields", json={"name": "Field 1"}).json()["id"]
    assert client.delete(f"/api/fields/{field_id}").status_code == 204
    assert client.get(f"/api/tournaments/{tournament_id}/fields").json() == []


# ============================================================================
# Matches
# ============================================================================


def test_bulk_create_matches_defaults(client: TestClient, tournament_id):
    response = client.post(
        f"/api/tournaments/{tournament_id}/matches",
        json={"matches": [{"matchNumber": 2, "round": 1}, {"matchNumber": 1, "round": 1, "duration": 90}]},
    )
    assert response.status_code == 201
    assert response.json() == {"success": True, "created": 2}

    matches = client.get(f"/api/tournaments/{tournament_id}/matches").json()
    assert [m["matchNumber"] for m in matches] == [1, 2]
    assert [m["durationMinutes"] for m in matches] == [90, 75]
    assert all(m["status"] == "unscheduled" for m in matches)


def test_bulk_create_rejects_unknown_team(client: TestClient, tournament_id):
    response = client.post(
        f"/api/tournaments/{tournament_id}/matches", json={"matches": [{"team1Id": 42, "team2Id": None}]}
    )
    assert response.status_code == 400
    assert "42" in response.json()["detail"]


def test_bulk_create_rejects_bad_status(client: TestClient, tournament_id):
    response = client.post(f"/api/tournaments/{tournament_id}/matches", json={"matches": [{"status": "live"}]})
    assert response.status_code == 422


def test_scheduled_matches_listed_before_unscheduled(client: TestClient, tournament_id):
    field_id = client.post(f"/api/tournaments/{tournament_id}/fields", json={"name": "Field 1"}).json()["id"]
    client.post(
        f"/api/tournaments/{tournament_id}/matches",
        json={"matches": [{"matchNumber": 1}, {"matchNumber": 2}, {"matchNumber": 3}]},
    )
    ids = [m["id"] for m in client.get(f"/api/tournaments/{tournament_id}/matches").json()]
    client.post(
        "/api/scheduling/assign",
        json={
            "tournamentId": tournament_id,
            "matches": [
                {"id": ids[2], "scheduledDate": "2024-01-01", "scheduledTime": "09:00", "fieldId": field_id},
                {"id": ids[1], "scheduledDate": "2024-01-01", "scheduledTime": "11:00", "fieldId": field_id},
            ],
        },
    )

    ordered = client.get(f"/api/tournaments/{tournament_id}/matches").json()
    assert [m["id"] for m in ordered] == [ids[2], ids[1], ids[0]]
    assert ordered[0]["scheduledTime"] == "09:00:00"


def test_patch_score_and_status(client: TestClient, tournament_id):
    client.post(f"/api/tournaments/{tournament_id}/matches", json={"matches": [{"matchNumber": 1}]})
    match_id = client.get(f"/api/tournaments/{tournament_id}/matches").json()[0]["id"]

    response = client.patch(f"/api/matches/{match_id}", json={"score1": 15, "score2": 12, "status": "completed"})

    assert response.status_code == 200
    data = response.json()
    assert (data["score1"], data["score2"], data["status"]) == (15, 12, "completed")


def test_patch_missing_match_is_404(client: TestClient):
    assert client.patch("/api/matches/999", json={"score1": 1}).status_code == 404


# ============================================================================
# Match generation
# ============================================================================


def _teams(client: TestClient, tournament_id, names, approve=True):
    ids = []
    for name in names:
        team = client.post(f"/api/tournaments/{tournament_id}/teams", json={"name": name}).json()["id"]
        if approve:
            client.post(f"/api/teams/{team}/status", json={"status": "Approved"})
        ids.append(team)
    return ids


def test_generate_bracket_from_seeds(client: TestClient, tournament_id):
    a, b, c, d, e = _teams(client, tournament_id, ["A", "B", "C", "D", "E"])
    seeds = [{"id": t, "seedPosition": i} for i, t in enumerate([a, b, c, d, e], start=1)]

    response = client.post(
        f"/api/tournaments/{tournament_id}/matches/generate", json={"format": "bracket", "teams": seeds}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["format"] == "bracket"
    assert body["totalMatches"] == 7
    first_round = [(m["team1Id"], m["team2Id"]) for m in body["matches"] if m["round"] == 1]
    assert first_round == [(a, None), (b, None), (c, None), (d, e)]
    assert all(m["status"] == "unscheduled" for m in body["matches"])
    assert len(client.get(f"/api/tournaments/{tournament_id}/matches").json()) == 7


def test_generate_defaults_to_approved_teams(client: TestClient, tournament_id):
    _teams(client, tournament_id, ["Comets", "Rockets", "Astros"])
    _teams(client, tournament_id, ["Pending"], approve=False)

    response = client.post(f"/api/tournaments/{tournament_id}/matches/generate", json={"format": "round-robin"})

    assert response.status_code == 201
    assert response.json()["totalMatches"] == 3


def test_generate_pool_play(client: TestClient, tournament_id):
    _teams(client, tournament_id, [f"Team {i}" for i in range(1, 9)])

    response = client.post(
        f"/api/tournaments/{tournament_id}/matches/generate", json={"format": "pool-play", "pools": 2}
    )

    assert response.status_code == 201
    assert response.json()["totalMatches"] == 15
    assert {m["pool"] for m in response.json()["matches"]} == {1, 2, None}


@pytest.mark.parametrize(
    "body,detail",
    [
        ({"format": "swiss"}, "Invalid tournament format"),
        ({"format": "pool-play", "pools": 1}, "Pool play requires at least 2 pools"),
    ],
)
def test_generate_rejects_bad_request(client: TestClient, tournament_id, body, detail):
    _teams(client, tournament_id, ["A", "B", "C", "D"])
    response = client.post(f"/api/tournaments/{tournament_id}/matches/generate", json=body)
    assert response.status_code == 400
    assert response.json()["detail"] == detail


def test_generate_rejects_foreign_and_repeated_teams(client: TestClient, tournament_id):
    (a,) = _teams(client, tournament_id, ["A"])
    other = client.post(
        "/api/tournaments", json={"name": "Other Cup", "startDate": "2024-02-01", "endDate": "2024-02-02"}
    ).json()["id"]
    (stranger,) = _teams(client, other, ["Stranger"])
    url = f"/api/tournaments/{tournament_id}/matches/generate"

    foreign = client.post(url, json={"format": "bracket", "teams": [{"id": a}, {"id": stranger}]})
    repeated = client.post(url, json={"format": "bracket", "teams": [{"id": a}, {"id": a}]})

    assert foreign.status_code == 400
    assert str(stranger) in foreign.json()["detail"]
    assert repeated.status_code == 400
    assert repeated.json()["detail"] == "Each team may only appear once"


def test_generate_missing_tournament_is_404(client: TestClient):
    response = client.post("/api/tournaments/999/matches/generate", json={"format": "bracket"})
    assert response.status_code == 404


def test_generate_keeps_existing_matches_unless_replaced(client: TestClient, tournament_id):
    _teams(client, tournament_id, ["A", "B", "C", "D"])
    url = f"/api/tournaments/{tournament_id}/matches/generate"
    client.post(url, json={"format": "bracket"})

    blocked = client.post(url, json={"format": "round-robin"})
    replaced = client.post(url, json={"format": "round-robin", "replace": True})

    assert blocked.status_code == 409
    assert replaced.status_code == 201
    matches = client.get(f"/api/tournaments/{tournament_id}/matches").json()
    assert len(matches) == 6
    assert all(m["round"] == 1 for m in matches)


def test_generate_never_replaces_placed_matches(client: TestClient, tournament_id):
    _teams(client, tournament_id, ["A", "B"])
    url = f"/api/tournaments/{tournament_id}/matches/generate"
    match_id = client.post(url, json={"format": "bracket"}).json()["matches"][0]["id"]
    field_id = client.post(f"/api/tournaments/{tournament_id}/fields", json={"name": "Field 1"}).json()["id"]
    client.post(
        "/api/scheduling/assign",
        json={
            "tournamentId": tournament_id,
            "matches": [{"id": match_id, "scheduledDate": "2024-01-01", "scheduledTime": "09:00", "fieldId": field_id}],
        },
    )

    response = client.post(url, json={"format": "round-robin", "replace": True})

    assert response.status_code == 409
    assert response.json()["detail"] == "Tournament has placed matches; clear the schedule first"
    assert [m["id"] for m in client.get(f"/api/tournaments/{tournament_id}/matches").json()] == [match_id]
