"""Tests for the response store endpoints."""
import pytest


@pytest.mark.asyncio
async def test_submit_response(client, create_survey, submit_response):
    survey = await create_survey()

    response = await submit_response(
        survey,
        {0: "vim", 1: 4, 2: ["python", "rust"], 3: "Nothing"},
        completion_time=95,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["survey_id"] == survey["id"]
    assert data["completion_time"] == 95
    assert data["is_complete"] is True
    assert data["submitted_at"] is not None
    assert data["user_agent"]  # httpx sends its own User-Agent
    assert [a["value"] for a in data["answers"]] == ["vim", 4, ["python", "rust"], "Nothing"]

    refreshed = await client.get(f"/surveys/{survey['id']}")
    assert refreshed.json()["response_count"] == 1


@pytest.mark.asyncio
async def test_partial_submission_is_marked_incomplete(create_survey, submit_response):
    survey = await create_survey()

    # question 0 is required
    partial = await submit_response(survey, {1: 3})
    explicit = await submit_response(survey, {1: 3}, is_complete=True)

    assert partial.status_code == 201
    assert partial.json()["is_complete"] is False
    assert explicit.json()["is_complete"] is True


@pytest.mark.asyncio
async def test_empty_text_does_not_satisfy_required_question(create_survey, submit_response):
    survey = await create_survey(
        questions=[{"type": "text", "question": "Why?", "required": True}]
    )

    empty = await submit_response(survey, {0: ""})
    answered = await submit_response(survey, {0: "Because"})

    assert empty.status_code == 201
    assert empty.json()["is_complete"] is False
    assert answered.json()["is_complete"] is True


@pytest.mark.asyncio
async def test_rating_accepts_numeric_strings(create_survey, submit_response):
    survey = await create_survey()

    response = await submit_response(survey, {1: "5"})

    assert response.status_code == 201
    assert response.json()["answers"][0]["value"] == 5


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "answers",
    [
        {1: "invalid"},
        {0: ["vim"]},
        {0: ""},
        {2: []},
        {2: "python"},
    ],
)
async def test_answer_shape_must_match_question_type(create_survey, submit_response, answers):
    survey = await create_survey()

    response = await submit_response(survey, answers)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_submit_rejects_unknown_question(client, create_survey):
    survey = await create_survey()

    response = await client.post(
        "/responses",
        json={
            "survey_id": survey["id"],
            "answers": [{"question_id": "missing", "question_type": "text", "value": "hi"}],
        },
    )

    assert response.status_code == 400
    assert "missing" in response.json()["detail"]


@pytest.mark.asyncio
async def test_submit_rejects_type_mismatch(client, create_survey):
    survey = await create_survey()
    text_question = survey["questions"][3]

    response = await client.post(
        "/responses",
        json={
            "survey_id": survey["id"],
            "answers": [
                {
                    "question_id": text_question["id"],
                    "question_type": "multiple-choice",
                    "value": "vim",
                }
            ],
        },
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_submit_rejects_duplicate_answers(create_survey, client):
    survey = await create_survey()
    question = survey["questions"][3]
    answer = {"question_id": question["id"], "question_type": "text", "value": "x"}

    response = await client.post(
        "/responses", json={"survey_id": survey["id"], "answers": [answer, answer]}
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_rejected_submission_leaves_no_trace(client, create_survey):
    survey = await create_survey()

    await client.post(
        "/responses",
        json={
            "survey_id": survey["id"],
            "answers": [{"question_id": "nope", "question_type": "text", "value": "x"}],
        },
    )

    status = await client.get(f"/surveys/{survey['id']}/response-count")
    assert status.json()["cached_count"] == 0
    assert status.json()["actual_count"] == 0


@pytest.mark.asyncio
async def test_submit_to_inactive_survey(create_survey, submit_response):
    survey = await create_survey(is_active=False)

    response = await submit_response(survey, {0: "vim"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Survey is not active."


@pytest.mark.asyncio
async def test_submit_to_unknown_survey(client):
    response = await client.post(
        "/responses",
        json={
            "survey_id": 999,
            "answers": [{"question_id": "q", "question_type": "text", "value": "x"}],
        },
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_submit_requires_answers(client, create_survey):
    survey = await create_survey()

    response = await client.post("/responses", json={"survey_id": survey["id"], "answers": []})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_negative_completion_time_is_rejected(create_survey, submit_response):
    survey = await create_survey()

    response = await submit_response(survey, {0: "vim"}, completion_time=-1)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_response(client, create_survey, submit_response):
    survey = await create_survey()
    created = (await submit_response(survey, {0: "emacs"})).json()

    response = await client.get(f"/responses/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


@pytest.mark.asyncio
async def test_get_unknown_response_is_404(client):
    assert (await client.get("/responses/123")).status_code == 404


@pytest.mark.asyncio
async def test_list_responses_per_survey(client, create_survey, submit_response):
    first = await create_survey()
    second = await create_survey(title="Second")
    for choice in ("vim", "emacs", "vscode"):
        await submit_response(first, {0: choice})
    await submit_response(second, {0: "vim"})

    everything = await client.get("/responses")
    paged = await client.get(f"/responses/survey/{first['id']}", params={"limit": 2})

    assert everything.json()["pagination"]["total"] == 4
    assert paged.status_code == 200
    assert paged.json()["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
    # newest first
    assert [r["answers"][0]["value"] for r in paged.json()["responses"]] == ["vscode", "emacs"]


@pytest.mark.asyncio
async def test_list_responses_for_unknown_survey(client):
    assert (await client.get("/responses/survey/8")).status_code == 404
