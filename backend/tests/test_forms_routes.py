from __future__ import annotations


def _create_form(client, questions=None, title="Feedback"):
    res = client.post(
        "/forms",
        json={
            "title": title,
            "description": "Tell us",
            "questions": questions
            if questions is not None
            else [
                {"text": "Name?", "is_required": True},
                {"text": "Rating?", "type": "rating", "is_required": False, "extra_info": "1-5"},
            ],
        },
    )
    assert res.status_code == 201, res.text
    return res.json()


def test_create_form_assigns_ids_owner_and_default_type(client, users):
    user_a, _ = users
    form = _create_form(client)

    assert form["id"]
    assert form["creator_user_id"] == str(user_a.id)
    assert [q["text"] for q in form["questions"]] == ["Name?", "Rating?"]
    assert form["questions"][0]["type"] == "text"
    assert form["questions"][1]["type"] == "rating"
    assert all(q["id"] for q in form["questions"])


def test_creator_in_body_is_ignored(client, users):
    user_a, user_b = users
    res = client.post("/forms", json={"title": "T", "creator_user_id": str(user_b.id)})
    assert res.status_code == 201
    assert res.json()["creator_user_id"] == str(user_a.id)


def test_create_form_requires_session(anonymous_client):
    res = anonymous_client.post("/forms", json={"title": "T"})
    assert res.status_code == 401
    assert res.json()["error"] == "UNAUTHORIZED"


def test_create_form_rejects_bad_body(client):
    res = client.post("/forms", json={"description": "missing title"})
    assert res.status_code == 400
    assert res.json()["error"] == "VALIDATION_ERROR"


def test_create_form_rejects_more_than_50_questions(client):
    res = client.post("/forms", json={"title": "Big", "questions": [{"text": f"Q{i}"} for i in range(51)]})
    assert res.status_code == 400
    assert res.json()["details"]["code"] == "TOO_MANY_QUESTIONS"


def test_list_forms_returns_only_callers_forms_newest_first(users, client_for):
    user_a, user_b = users
    with client_for(user_a) as c_a:
        first = _create_form(c_a, title="First")
        second = _create_form(c_a, title="Second")
        res = c_a.get("/forms")
        assert res.status_code == 200
        ids = [f["id"] for f in res.json()]
        assert set(ids) == {first["id"], second["id"]}

    with client_for(user_b) as c_b:
        res = c_b.get("/forms")
        assert res.status_code == 200
        assert res.json() == []


def test_list_forms_requires_session(anonymous_client):
    assert anonymous_client.get("/forms").status_code == 401


def test_get_form_is_public(client, anonymous_client):
    form = _create_form(client)
    res = anonymous_client.get(f"/forms/{form['id']}")
    assert res.status_code == 200
    assert res.json()["title"] == "Feedback"


def test_get_form_unknown_and_malformed_ids(anonymous_client):
    assert anonymous_client.get("/forms/00000000-0000-0000-0000-000000000000").status_code == 404
    assert anonymous_client.get("/forms/not-a-uuid").status_code == 400


def test_delete_form_soft_deletes(client, db_session):
    from app.models.form import Form
    from app.models.question import Question

    form = _create_form(client)
    res = client.delete(f"/forms/{form['id']}")
    assert res.status_code == 204

    assert client.get(f"/forms/{form['id']}").status_code == 404
    assert client.get("/forms").json() == []

    # Rows remain, marked deleted.
    row = db_session.query(Form).one()
    assert row.deleted_at is not None
    assert all(q.deleted_at is not None for q in db_session.query(Question).all())
