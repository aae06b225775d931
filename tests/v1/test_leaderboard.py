# tests/v1/test_leaderboard.py
"""Tests for the leaderboard endpoint and live streams."""

from fastapi import status
from fastapi.testclient import TestClient


def test_leaderboard_ranking(client: TestClient, headers_for, make_submission) -> None:
    first = make_submission("bob")
    second = make_submission("carol")
    third = make_submission("dave")
    for voter in ("v1", "v2"):
        client.post(f"/api/v1/votes/{third}", headers=headers_for(voter))
    client.post(f"/api/v1/votes/{first}", headers=headers_for("v1"))

    response = client.get("/api/v1/leaderboard/")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [item["id"] for item in data] == [third, first, second]
    assert [item["vote_count"] for item in data] == [2, 1, 0]
    assert sorted(data[0]["voters"]) == ["v1", "v2"]


def test_leaderboard_limit(client: TestClient, make_submission) -> None:
    for author in ("bob", "carol", "dave"):
        make_submission(author)

    response = client.get("/api/v1/leaderboard/", params={"limit": 2})

    assert len(response.json()) == 2


def test_leaderboard_rejects_out_of_range_limit(client: TestClient) -> None:
    response = client.get("/api/v1/leaderboard/", params={"limit": 0})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert "limit" in response.json()["fields"]


def test_live_leaderboard_streams_snapshots(client: TestClient, ledger, make_user, make_submission) -> None:
    target = make_submission("bob")
    voter = make_user("alice")

    with client.websocket_connect("/api/v1/live/leaderboard?limit=10") as websocket:
        initial = websocket.receive_json()
        ledger.cast_or_retract_vote(voter, target)
        updated = websocket.receive_json()

    assert [item["vote_count"] for item in initial] == [0]
    assert [item["vote_count"] for item in updated] == [1]
    assert updated[0]["voters"] == [voter]


def test_live_gallery_streams_new_submissions(client: TestClient, make_submission) -> None:
    first = make_submission("bob")

    with client.websocket_connect("/api/v1/live/gallery") as websocket:
        initial = websocket.receive_json()
        second = make_submission("carol")
        updated = websocket.receive_json()

    assert [item["id"] for item in initial] == [first]
    assert [item["id"] for item in updated] == [second, first]
