"""Pytest configuration and fixtures."""
import os

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Keep the application engine away from any real database during tests
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_survey_insights.db"
os.environ["REPORTING_TIMEZONE"] = "UTC"

from survey_insights import models  # noqa: E402,F401
from survey_insights.database import Base, get_db_session  # noqa: E402


API_BASE_URL = "http://test/api"


@pytest.fixture
async def test_engine(tmp_path):
    """Fresh SQLite database per test, schema created from the models."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def test_app(session_factory):
    """FastAPI app whose session dependency points at the test database."""
    from survey_insights.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url=API_BASE_URL) as c:
        yield c


def make_survey_payload(**overrides):
    payload = {
        "title": "Developer tooling survey",
        "description": "Which tools do you use every day?",
        "category": "technology",
        "tags": ["tools", "dev"],
        "questions": [
            {
                "type": "multiple-choice",
                "question": "Favourite editor?",
                "options": ["vim", "emacs", "vscode"],
                "required": True,
            },
            {"type": "rating", "question": "How happy are you with it?"},
            {
                "type": "checkbox",
                "question": "Which languages do you use?",
                "options": ["python", "go", "rust"],
            },
            {"type": "text", "question": "Anything else?"},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def survey_payload():
    return make_survey_payload


@pytest.fixture
def create_survey(client):
    """Create a survey through the API and return its JSON body."""

    async def _create_survey(**overrides):
        response = await client.post("/surveys", json=make_survey_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()

    return _create_survey


@pytest.fixture
def submit_response(client):
    """Submit answers keyed by question position: {0: "vim", 1: 4, ...}."""

    async def _submit(survey, answers_by_index, **extra):
        answers = []
        for index, value in answers_by_index.items():
            question = survey["questions"][index]
            answers.append(
                {
                    "question_id": question["id"],
                    "question_type": question["type"],
                    "value": value,
                }
            )
        payload = {"survey_id": survey["id"], "answers": answers, **extra}
        return await client.post("/responses", json=payload)

    return _submit
