from __future__ import annotations

import uuid


def _form_with_questions(client):
    res = client.post(
        "/forms",
        json={
            "title": "Poll",
            "questions": [
                {"text": "Favourite number?", "is_required": True},
                {"text": "Comments", "is_required": False},
            ],
        },
    )
    assert res.status_code == 201, res.text
    form = res.json()
    q1, q2 = (q["id"] for q in form["questions"])
    return form, q1, q2


def test_submit_response_with_required_answer(client, anonymous_client):
    form, q1, _ = _form_with_questions(client)

    res = anonymous_client.post(
        f"/forms/{form['id']}/responses",
        json={"respondent_user_id": "r1", "answers": [{"question_id": q1, "value": "42"}]},
    )
    assert res.status_code == 201, res.text
    body = res.json()
    assert body["form_id"] == form["id"]
    assert body["respondent_user_id"] == "r1"
    assert [(a["question_id"], a["value"]) for a in body["answers"]] == [(q1, "42")]


def test_missing_required_answer_is_rejected_and_nothing_is_saved(client, anonymous_client):
    form, q1, q2 = _form_with_questions(client)

    res = anonymous_client.post(
        f"/forms/{form['id']}/responses",
        json={"respondent_user_id": "r1", "answers": [{"question_id": q2, "value": "hi"}]},
    )
    assert res.status_code == 400
    details = res.json()["details"]
    assert details["code"] == "MISSING_REQUIRED_ANSWER"
    assert details["question_id"] == q1

    assert anonymous_client.get(f"/forms/{form['id']}/responses").json() == []


def test_unknown_question_is_rejected(client, anonymous_client):
    form, q1, _ = _form_with_questions(client)
    stray = str(uuid.uuid4())

    res = anonymous_client.post(
        f"/forms/{form['id']}/responses",
        json={
            "respondent_user_id": "r1",
            "answers": [{"question_id": q1, "value": "1"}, {"question_id": stray, "value": "x"}],
        },
    )
    assert res.status_code == 400
    assert res.json()["details"] == {"code": "UNKNOWN_QUESTION", "question_id": stray}


def test_submit_to_unknown_form_is_404(anonymous_client):
    res = anonymous_client.post(
        f"/forms/{uuid.uuid4()}/responses",
        json={"respondent_user_id": "r1", "answers": []},
    )
    assert res.status_code == 404


def test_anonymous_submission_requires_respondent_id(client, anonymous_client):
    form, q1, _ = _form_with_questions(client)
    res = anonymous_client.post(
        f"/forms/{form['id']}/responses",
        json={"answers": [{"question_id": q1, "value": "1"}]},
    )
    assert res.status_code == 400
    assert res.json()["error"] == "VALIDATION_ERROR"


def test_signed_in_respondent_overrides_body(client, users):
    user_a, _ = users
    form, q1, _ = _form_with_questions(client)

    res = client.post(
        f"/forms/{form['id']}/responses",
        json={"respondent_user_id": "someone-else", "answers": [{"question_id": q1, "value": "7"}]},
    )
    assert res.status_code == 201
    assert res.json()["respondent_user_id"] == str(user_a.id)


def test_list_and_get_responses(client, anonymous_client):
    form, q1, q2 = _form_with_questions(client)
    ids = []
    for rid in ("r1", "r2"):
        res = anonymous_client.post(
            f"/forms/{form['id']}/responses",
            json={"respondent_user_id": rid, "answers": [{"question_id": q1, "value": rid}]},
        )
        ids.append(res.json()["id"])

    listed = anonymous_client.get(f"/forms/{form['id']}/responses")
    assert listed.status_code == 200
    assert {r["id"] for r in listed.json()} == set(ids)

    one = anonymous_client.get(f"/forms/{form['id']}/responses/{ids[0]}")
    assert one.status_code == 200
    assert one.json()["respondent_user_id"] == "r1"

    assert anonymous_client.get(f"/forms/{form['id']}/responses/{uuid.uuid4()}").status_code == 404


def test_response_is_scoped_to_its_form(client, anonymous_client):
    form_a, qa, _ = _form_with_questions(client)
    form_b, _, _ = _form_with_questions(client)

    res = anonymous_client.post(
        f"/forms/{form_a['id']}/responses",
        json={"respondent_user_id": "r1", "answers": [{"question_id": qa, "value": "x"}]},
    )
    rid = res.json()["id"]
    assert anonymous_client.get(f"/forms/{form_b['id']}/responses/{rid}").status_code == 404


def test_delete_response_soft_deletes(client, db_session):
    from app.models.answer import Answer
    from app.models.response import Response

    form, q1, _ = _form_with_questions(client)
    rid = client.post(
        f"/forms/{form['id']}/responses",
        json={"answers": [{"question_id": q1, "value": "x"}]},
    ).json()["id"]

    assert client.delete(f"/forms/{form['id']}/responses/{rid}").status_code == 204
    assert client.get(f"/forms/{form['id']}/responses/{rid}").status_code == 404
    assert client.get(f"/forms/{form['id']}/responses").json() == []

    assert db_session.query(Response).one().deleted_at is not None
    assert all(a.deleted_at is not None for a in db_session.query(Answer).all())


def test_delete_response_requires_session(client, anonymous_client):
    form, q1, _ = _form_with_questions(client)
    rid = client.post(
        f"/forms/{form['id']}/responses",
        json={"answers": [{"question_id": q1, "value": "x"}]},
    ).json()["id"]
    assert anonymous_client.delete(f"/forms/{form['id']}/responses/{rid}").status_code == 401
