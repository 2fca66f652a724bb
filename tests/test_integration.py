"""Integration tests for the full Flatmatch pipeline.

These tests verify the end-to-end flow: raw quiz answers -> profile ->
pairwise score -> ranked matches, and the HTTP layer on top of it.

Note: The database session is replaced with an in-memory stand-in, but the
routers, middleware and services run unmodified.
"""
import asyncio
import pytest
import uuid
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from flatmatch.database import get_db, normalise_database_url
from flatmatch.main import REQUEST_ID_HEADER, InFlightRequests, app
from flatmatch.models.user import User
from flatmatch.schemas.match import PropertyContext
from flatmatch.services.compatibility_service import CompatibilityService


class _FakeSession:
    """Returns queued rows from ``execute`` in call order."""

    def __init__(self, *rows):
        self._rows = list(rows)
        self.added = []

    async def execute(self, stmt):
        result = MagicMock()
        result.scalar_one_or_none.return_value = self._rows.pop(0) if self._rows else None
        return result

    def add(self, obj):
        self.added.append(obj)

    async def flush(self):
        return None


@pytest.fixture
def client_for():
    def make(session):
        async def _override_db():
            yield session

        app.dependency_overrides[get_db] = _override_db
        return TestClient(app)

    yield make
    app.dependency_overrides.clear()


class TestPipeline:
    """Raw answers through to ranked matches."""

    def test_rank_candidates(self, profile_service, profile_a, profile_b):
        night_owl = profile_service.build_profile(
            str(uuid.uuid4()),
            {
                "age": 45,
                "occupation": "Freelancer",
                "state": "Western Australia (WA)",
                "preferred_locations": "Fremantle",
                "morning_person": 1,
                "bedtime": "After 1am",
                "cleanliness": 2,
                "dishes": "What dishes? (takeaway life)",
                "noise_sensitivity": 1,
                "guests": "Multiple times a week",
                "parties": True,
                "smoking": "I smoke inside",
            },
        )
        service = CompatibilityService()

        matches = service.find_best_matches(profile_a, [night_owl, profile_b], minimum_score=0)

        assert [m.user_id for m in matches] == [profile_b.user_id, night_owl.user_id]
        assert matches[0].compatibility_score == 79
        assert matches[0].display_name == "Josh"
        assert matches[0].location == "Newtown, Marrickville"
        assert matches[1].compatibility_score < matches[0].compatibility_score

    def test_owner_ranking_uses_tenant_reliability(self, profile_a, profile_b):
        service = CompatibilityService()
        matches = service.find_best_matches(
            profile_a, [profile_b], is_user_property_owner=True, minimum_score=0
        )
        direct = service.score(profile_a, profile_b, PropertyContext(is_property_owner=True))
        assert matches[0].compatibility_score == direct.overall == 87


class TestHealthEndpoints:
    """Liveness and readiness checks."""

    def test_liveness(self, client_for):
        client = client_for(_FakeSession())
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_readiness_counts_quiz_results(self, client_for):
        session = MagicMock()
        result = MagicMock()
        result.scalar_one.return_value = 3
        session.execute = AsyncMock(return_value=result)
        client = client_for(session)

        response = client.get("/health/deep")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "connected", "quiz_results": 3}

    def test_readiness_degraded(self, client_for):
        session = MagicMock()
        session.execute = AsyncMock(
            side_effect=OperationalError("SELECT count(*)", {}, Exception("connection refused"))
        )
        session.rollback = AsyncMock()
        client = client_for(session)

        response = client.get("/health/deep")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"
        session.rollback.assert_awaited_once()

    def test_request_id_echoed(self, client_for):
        client = client_for(_FakeSession())
        response = client.get("/health", headers={REQUEST_ID_HEADER: "req-42"})
        assert response.headers[REQUEST_ID_HEADER] == "req-42"

    def test_request_id_generated(self, client_for):
        client = client_for(_FakeSession())
        response = client.get("/health")
        assert len(response.headers[REQUEST_ID_HEADER]) == 32


class TestInFlightRequests:
    """Shutdown waits for requests still being served."""

    @pytest.mark.asyncio
    async def test_idle_drains_immediately(self):
        tracker = InFlightRequests()
        assert await tracker.drain(timeout=0.01) is True

    @pytest.mark.asyncio
    async def test_drain_waits_for_last_request(self):
        tracker = InFlightRequests()
        tracker.enter()
        tracker.enter()
        tracker.leave()
        assert await tracker.drain(timeout=0.01) is False
        assert tracker.count == 1

        asyncio.get_running_loop().call_later(0.01, tracker.leave)
        assert await tracker.drain(timeout=1.0) is True
        assert tracker.count == 0


class TestDatabaseUrl:
    """DATABASE_URL is pointed at the asyncpg driver."""

    def test_plain_schemes_rewritten(self):
        assert normalise_database_url("postgres://u:p@db/flatmatch") == (
            "postgresql+asyncpg://u:p@db/flatmatch"
        )
        assert normalise_database_url("postgresql://u:p@db:5432/flatmatch") == (
            "postgresql+asyncpg://u:p@db:5432/flatmatch"
        )

    def test_async_url_unchanged(self):
        url = "postgresql+asyncpg://u:p@db/flatmatch"
        assert normalise_database_url(url) == url


class TestQuizEndpoints:
    """POST/GET /api/v1/quiz/{user_id}."""

    def test_unknown_user(self, client_for, raw_answers_a):
        client = client_for(_FakeSession(None))
        response = client.post(f"/api/v1/quiz/{uuid.uuid4()}", json=raw_answers_a)
        assert response.status_code == 404

    def test_invalid_answers(self, client_for):
        user_id = uuid.uuid4()
        user = User(id=user_id, email="mia@example.com", first_name="Mia", last_name="")
        client = client_for(_FakeSession(user))

        response = client.post(f"/api/v1/quiz/{user_id}", json={"age": 12})

        assert response.status_code == 422
        assert response.json()["detail"] == {
            "field": "age",
            "message": "Age must be between 18 and 100",
        }

    def test_submit(self, client_for, raw_answers_a):
        user_id = uuid.uuid4()
        user = User(id=user_id, email="mia@example.com", first_name="Mia", last_name="")
        session = _FakeSession(user, None, user)
        client = client_for(session)

        response = client.post(f"/api/v1/quiz/{user_id}", json=raw_answers_a)

        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == str(user_id)
        assert body["version"] == 1
        assert body["personality_traits"]["cleanliness"] == "very_clean"
        assert body["match_preferences"]["deal_breakers"] == ["no_smoking", "no_parties"]
        assert len(session.added) == 1
        assert user.quiz_completed is True

    def test_missing_result(self, client_for):
        client = client_for(_FakeSession(None))
        response = client.get(f"/api/v1/quiz/{uuid.uuid4()}")
        assert response.status_code == 404


class TestMatchEndpoints:
    """POST /api/v1/match/score."""

    def test_score_requires_both_profiles(self, client_for):
        user_a, user_b = uuid.uuid4(), uuid.uuid4()
        client = client_for(_FakeSession(None, None))

        response = client.post(
            "/api/v1/match/score",
            json={"user_a_id": str(user_a), "user_b_id": str(user_b)},
        )

        assert response.status_code == 404
        assert response.json()["detail"]["missing_profiles"] == [str(user_a), str(user_b)]
