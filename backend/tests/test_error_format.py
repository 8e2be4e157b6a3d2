from __future__ import annotations

import uuid

from app.core.errors import InvalidCredentials, MissingRequiredAnswer, StoreError, TooManyQuestions


def _assert_error_shape(res, *, error: str | None = None):
    data = res.json()
    assert isinstance(data, dict)
    assert isinstance(data.get("error"), str) and data["error"]
    assert isinstance(data.get("message"), str) and data["message"]
    if error is not None:
        assert data["error"] == error


def test_error_shape_401_without_session(anonymous_client):
    res = anonymous_client.get("/forms")
    assert res.status_code == 401
    _assert_error_shape(res, error="UNAUTHORIZED")


def test_error_shape_404_form_not_found(client):
    res = client.get(f"/forms/{uuid.uuid4()}")
    assert res.status_code == 404
    _assert_error_shape(res, error="NOT_FOUND")


def test_error_shape_400_request_validation_error(client):
    res = client.post("/forms", json={"title": 123, "questions": "nope"})
    assert res.status_code == 400
    _assert_error_shape(res, error="VALIDATION_ERROR")
    body = res.json()
    assert isinstance(body.get("details"), dict)
    assert isinstance(body["details"].get("errors"), list)


def test_error_shape_400_duplicate_username(anonymous_client, users, captured_codes):
    res = anonymous_client.post(
        "/api/account/signup",
        json={"username": "alice", "email": "fresh@example.com", "password": "Password_12345"},
    )
    assert res.status_code == 400
    _assert_error_shape(res, error="CONFLICT")
    assert res.json()["details"]["code"] == "DUPLICATE_USERNAME"


def test_error_shape_403_wrong_credentials(anonymous_client, users):
    res = anonymous_client.post("/api/account/signin", json={"email": "alice@example.com", "password": "nope-nope"})
    assert res.status_code == 403
    _assert_error_shape(res, error="INVALID_CREDENTIALS")


def test_unknown_route_uses_standard_shape(anonymous_client):
    res = anonymous_client.get("/does-not-exist")
    assert res.status_code == 404
    _assert_error_shape(res, error="NOT_FOUND")


def test_domain_error_payloads():
    assert TooManyQuestions(50).to_payload() == {
        "error": "VALIDATION_ERROR",
        "message": "Too many questions (max length is 50)",
        "details": {"limit": 50, "code": "TOO_MANY_QUESTIONS"},
    }

    qid = uuid.uuid4()
    payload = MissingRequiredAnswer(qid, "Name?").to_payload()
    assert payload["message"] == "Missing answer for required question: Name?"
    assert payload["details"] == {"question_id": str(qid), "code": "MISSING_REQUIRED_ANSWER"}

    assert InvalidCredentials().to_payload() == {"error": "INVALID_CREDENTIALS", "message": "Wrong credentials"}
    assert StoreError().status_code == 500
