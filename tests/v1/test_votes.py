# tests/v1/test_votes.py
"""Tests for vote endpoints."""

from fastapi import status
from fastapi.testclient import TestClient

from vibe_gallery.api.v1.dependencies import get_ledger
from vibe_gallery.core.errors import ConflictRetryableError


def test_toggle_vote(client: TestClient, headers_for, make_submission) -> None:
    target = make_submission("bob")
    headers = headers_for("alice")

    cast = client.post(f"/api/v1/votes/{target}", headers=headers)
    retracted = client.post(f"/api/v1/votes/{target}", headers=headers)

    assert cast.status_code == status.HTTP_200_OK
    assert cast.json() == {
        "submission_id": target,
        "voted": True,
        "changed": True,
        "vote_count": 1,
        "votes_remaining": 4,
    }
    assert retracted.json()["voted"] is False
    assert retracted.json()["vote_count"] == 0
    assert retracted.json()["votes_remaining"] == 5


def test_self_vote_is_forbidden(client: TestClient, headers_for, make_submission) -> None:
    target = make_submission("bob")

    response = client.post(f"/api/v1/votes/{target}", headers=headers_for("bob"))

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["code"] == "self_vote"
    assert response.json()["detail"] == "You cannot vote for your own submission!"


def test_budget_exhaustion(client: TestClient, headers_for, make_submission) -> None:
    targets = [make_submission(f"author-{i}") for i in range(6)]
    headers = headers_for("alice")
    for target in targets[:5]:
        assert client.post(f"/api/v1/votes/{target}", headers=headers).status_code == status.HTTP_200_OK

    response = client.post(f"/api/v1/votes/{targets[-1]}", headers=headers)

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["code"] == "vote_budget_exceeded"
    assert response.json()["detail"] == "You have used all 5 votes!"


def test_vote_on_missing_submission(client: TestClient, headers_for) -> None:
    response = client.post("/api/v1/votes/missing", headers=headers_for("alice"))

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["code"] == "submission_not_found"


def test_vote_requires_identity(client: TestClient, make_submission) -> None:
    target = make_submission("bob")

    response = client.post(f"/api/v1/votes/{target}")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_retract_without_vote_is_noop(client: TestClient, headers_for, make_submission) -> None:
    target = make_submission("bob")

    response = client.delete(f"/api/v1/votes/{target}", headers=headers_for("alice"))

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["changed"] is False
    assert response.json()["voted"] is False


def test_retract_held_vote(client: TestClient, headers_for, make_submission) -> None:
    target = make_submission("bob")
    headers = headers_for("alice")
    client.post(f"/api/v1/votes/{target}", headers=headers)

    response = client.delete(f"/api/v1/votes/{target}", headers=headers)

    assert response.json()["changed"] is True
    assert response.json()["vote_count"] == 0


def test_lost_race_is_reported_as_retryable(client: TestClient, app, headers_for, make_submission) -> None:
    target = make_submission("bob")

    class RacingLedger:
        def cast_or_retract_vote(self, user_id: str, submission_id: str):
            raise ConflictRetryableError()

    app.dependency_overrides[get_ledger] = RacingLedger

    response = client.post(f"/api/v1/votes/{target}", headers=headers_for("alice"))

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json() == {"detail": "Vote failed. Please try again.", "code": "conflict"}
