"""Public roster submission: POST /api/public/rosters/submit."""

import pytest
from fastapi.testclient import TestClient

SUBMIT_URL = "/api/public/rosters/submit"


@pytest.fixture
def team_setup(client: TestClient):
    tournament = client.post(
        "/api/tournaments", json={"name": "Harbour Cup", "startDate": "2024-05-04", "endDate": "2024-05-05"}
    ).json()["id"]
    team = client.post(f"/api/tournaments/{tournament}/teams", json={"name": "Pelicans"}).json()["id"]
    return {"tournament_id": tournament, "team_id": team}


def _add_members(client: TestClient, team_id, names):
    ids = [client.post("/api/players", json={"fullName": n}).json()["id"] for n in names]
    client.put(f"/api/teams/{team_id}/members", json={"playerIds": ids})
    return ids


def test_submit_roster_marks_team_submitted(client: TestClient, team_setup):
    player_ids = _add_members(client, team_setup["team_id"], ["Ana", "Ben"])

    response = client.post(
        SUBMIT_URL, json={"teamId": team_setup["team_id"], "tournamentId": team_setup["tournament_id"]}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Roster submitted successfully"
    assert body["roster"]["teamId"] == team_setup["team_id"]
    assert body["roster"]["playerIds"] == player_ids
    assert body["roster"]["status"] == "Submitted"
    assert body["roster"]["submittedAt"]

    teams = client.get(f"/api/tournaments/{team_setup['tournament_id']}/teams").json()
    assert teams[0]["rosterStatus"] == "Submitted"
    assert teams[0]["rosterSubmittedAt"] is not None


def test_resubmitting_an_approved_roster_resets_status(client: TestClient, team_setup):
    _add_members(client, team_setup["team_id"], ["Ana"])
    client.post(f"/api/teams/{team_setup['team_id']}/status", json={"status": "Approved"})

    response = client.post(
        SUBMIT_URL, json={"teamId": team_setup["team_id"], "tournamentId": team_setup["tournament_id"]}
    )

    assert response.json()["roster"]["status"] == "Submitted"


@pytest.mark.parametrize("body", [{}, {"teamId": 1}, {"tournamentId": 1}])
def test_submit_roster_requires_both_ids(client: TestClient, body):
    response = client.post(SUBMIT_URL, json=body)
    assert response.status_code == 400
    assert response.json()["detail"] == "Team ID and Tournament ID are required"


def test_submit_roster_for_other_tournament_is_404(client: TestClient, team_setup):
    other = client.post(
        "/api/tournaments", json={"name": "Bay Cup", "startDate": "2024-07-01", "endDate": "2024-07-02"}
    ).json()["id"]
    _add_members(client, team_setup["team_id"], ["Ana"])

    response = client.post(SUBMIT_URL, json={"teamId": team_setup["team_id"], "tournamentId": other})

    assert response.status_code == 404
    assert response.json()["detail"] == "Team not found in tournament"


def test_submit_roster_unknown_team_is_404(client: TestClient, team_setup):
    response = client.post(SUBMIT_URL, json={"teamId": 999, "tournamentId": team_setup["tournament_id"]})
    assert response.status_code == 404


def test_submit_empty_roster_is_400(client: TestClient, team_setup):
    response = client.post(
        SUBMIT_URL, json={"teamId": team_setup["team_id"], "tournamentId": team_setup["tournament_id"]}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "No team members found"
    teams = client.get(f"/api/tournaments/{team_setup['tournament_id']}/teams").json()
    assert teams[0]["rosterStatus"] == "Pending"
