"""
Tests for batch cooking session and session review endpoints.
"""

from datetime import datetime, timedelta, timezone

import pytest

from admin_api.models import BatchCookingSession, BatchCookingSessionReview, UserProfile
from admin_api.services.domain.batch_cooking_service import algo_name


START = datetime(2025, 3, 1, tzinfo=timezone.utc)


@pytest.fixture
def make_session(db_session):
    """Session factory; ``day`` spaces created_at so ordering is predictable."""

    def _make(day=0, **fields):
        fields.setdefault("meal_count", 4)
        fields.setdefault("people_count", 2)
        session = BatchCookingSession(created_at=START + timedelta(days=day), **fields)
        db_session.add(session)
        db_session.commit()
        return session

    return _make


class TestSessionList:
    """Test GET /api/batch-cooking-sessions ordering and filters."""

    def test_most_children_first_then_newest(self, client, make_session):
        lonely_old = make_session(day=0)
        popular = make_session(day=1)
        lonely_new = make_session(day=2)
        for day in (3, 4):
            make_session(day=day, parent_id=popular.id, is_original=False)

        response = client.get("/api/batch-cooking-sessions", params={"is_original": True})

        assert response.status_code == 200
        data = response.json()
        assert [s["id"] for s in data["items"]] == [popular.id, lonely_new.id, lonely_old.id]
        assert data["items"][0]["children_count"] == 2
        assert data["pagination"]["total"] == 3

    def test_pagination_applies_after_ordering(self, client, make_session):
        make_session(day=0)
        popular = make_session(day=1)
        make_session(day=2, parent_id=popular.id, is_original=False)

        response = client.get("/api/batch-cooking-sessions", params={"page": 1, "page_size": 1})

        assert [s["id"] for s in response.json()["items"]] == [popular.id]
        assert response.json()["pagination"]["total"] == 3

    def test_original_endpoint_hides_regenerations(self, client, make_session):
        parent = make_session(day=0)
        make_session(day=1, parent_id=parent.id, is_original=False)

        response = client.get("/api/batch-cooking-sessions/original")

        assert [s["id"] for s in response.json()["items"]] == [parent.id]

    def test_status_and_cooked_filters(self, client, make_session):
        done = make_session(day=0, recipe_generation_status="completed", is_cooked=True)
        make_session(day=1, recipe_generation_status="completed")
        make_session(day=2, recipe_generation_status="failed", is_cooked=True)

        response = client.get(
            "/api/batch-cooking-sessions",
            params={"recipe_generation_status": "completed", "is_cooked": True},
        )

        assert [s["id"] for s in response.json()["items"]] == [done.id]

    def test_unknown_status_rejected(self, client):
        response = client.get("/api/batch-cooking-sessions", params={"cooking_step_generation_status": "done"})
        assert response.status_code == 400

    def test_search_matches_seed_or_algo_version(self, client, make_session):
        by_seed = make_session(day=0, seed="abc-42")
        by_version = make_session(day=1, algo_version="v42")
        make_session(day=2, seed="zzz", algo_version="v1")

        response = client.get("/api/batch-cooking-sessions", params={"search": "42"})

        assert {s["id"] for s in response.json()["items"]} == {by_seed.id, by_version.id}

    def test_created_by_filter(self, client, db_session, make_session):
        profile = UserProfile(user_id="user-1", email="cook@test.com")
        db_session.add(profile)
        db_session.commit()
        mine = make_session(day=0, created_by=profile.id)
        make_session(day=1)

        response = client.get("/api/batch-cooking-sessions", params={"created_by": profile.id})

        assert [s["id"] for s in response.json()["items"]] == [mine.id]

    def test_algo_name_from_first_recipe(self, client, make_session):
        make_session(recipes=[{"title": "Lasagnes"}, {"title": "Soupe"}])
        item = client.get("/api/batch-cooking-sessions").json()["items"][0]
        assert item["algo_name"] == "Lasagnes"


class TestAlgoName:
    @pytest.mark.parametrize(
        "recipes, expected",
        [
            ([{"title": "Chili"}], "Chili"),
            ([{"title": {"fr": "Gratin", "en": "Bake"}}], "Gratin"),
            ([{"title": ""}], "N/A"),
            ([{}], "N/A"),
            ([], "N/A"),
            (None, "N/A"),
        ],
    )
    def test_first_recipe_title(self, recipes, expected):
        assert algo_name(recipes) == expected


class TestSessionDetail:
    """Single session reads and its children."""

    def test_get_reports_children_count(self, client, make_session):
        parent = make_session(day=0)
        make_session(day=1, parent_id=parent.id, is_original=False)

        response = client.get(f"/api/batch-cooking-sessions/{parent.id}")

        assert response.status_code == 200
        assert response.json()["children_count"] == 1

    def test_get_unknown_session(self, client):
        assert client.get("/api/batch-cooking-sessions/999").status_code == 404

    def test_children_newest_first(self, client, make_session):
        parent = make_session(day=0)
        older = make_session(day=1, parent_id=parent.id, is_original=False)
        newer = make_session(day=2, parent_id=parent.id, is_original=False)
        make_session(day=3)

        response = client.get(f"/api/batch-cooking-sessions/{parent.id}/children")

        assert [s["id"] for s in response.json()] == [newer.id, older.id]

    def test_children_of_unknown_session(self, client):
        assert client.get("/api/batch-cooking-sessions/999/children").status_code == 404


class TestSessionWrites:
    """Create, update, mark cooked and delete."""

    def test_create_original(self, client, admin_headers):
        response = client.post(
            "/api/batch-cooking-sessions",
            json={"meal_count": 5, "people_count": 3, "seed": "s1", "algo_version": "v2"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["is_original"] is True
        assert data["recipe_generation_status"] == "pending"
        assert data["is_cooked"] is False
        assert data["algo_name"] == "N/A"

    def test_create_from_parent(self, client, make_session):
        parent = make_session()
        response = client.post(
            "/api/batch-cooking-sessions",
            json={"meal_count": 5, "people_count": 3, "parent_id": parent.id},
        )
        assert response.status_code == 201
        assert response.json()["is_original"] is False
        assert response.json()["parent_id"] == parent.id

    def test_create_with_unknown_parent(self, client):
        response = client.post(
            "/api/batch-cooking-sessions",
            json={"meal_count": 5, "people_count": 3, "parent_id": 999},
        )
        assert response.status_code == 400

    def test_create_requires_positive_counts(self, client):
        response = client.post("/api/batch-cooking-sessions", json={"meal_count": 0, "people_count": 3})
        assert response.status_code == 422

    def test_update_statuses(self, client, make_session):
        session = make_session(seed="s1")
        response = client.patch(
            f"/api/batch-cooking-sessions/{session.id}",
            json={"cooking_step_generation_status": "processing", "meal_count": None, "seed": None},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["cooking_step_generation_status"] == "processing"
        assert data["meal_count"] == 4
        assert data["seed"] is None

    def test_update_rejects_unknown_status(self, client, make_session):
        session = make_session()
        response = client.patch(
            f"/api/batch-cooking-sessions/{session.id}",
            json={"recipe_generation_status": "done"},
        )
        assert response.status_code == 422

    def test_mark_cooked(self, client, make_session, admin_headers):
        session = make_session()
        response = client.patch(f"/api/batch-cooking-sessions/{session.id}/cooked", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["is_cooked"] is True
        assert response.json()["cooked_at"] is not None

    def test_mark_unknown_session_cooked(self, client):
        assert client.patch("/api/batch-cooking-sessions/999/cooked").status_code == 404

    def test_delete_detaches_children_and_removes_reviews(self, client, db_session, make_session):
        parent_id = make_session(day=0).id
        child_id = make_session(day=1, parent_id=parent_id, is_original=False).id
        db_session.add(BatchCookingSessionReview(session_id=parent_id, rating=4))
        db_session.commit()

        response = client.delete(f"/api/batch-cooking-sessions/{parent_id}")

        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.get(BatchCookingSession, parent_id) is None
        assert db_session.get(BatchCookingSession, child_id).parent_id is None
        assert db_session.query(BatchCookingSessionReview).count() == 0


class TestSessionReviews:
    """Test GET /api/batch-cooking-session-reviews."""

    def test_newest_first_with_author_and_session(self, client, db_session, make_session):
        profile = UserProfile(user_id="user-1", email="cook@test.com", firstname="Camille")
        db_session.add(profile)
        db_session.commit()
        session = make_session(recipes=[{"title": "Chili"}], meal_count=6)
        db_session.add_all([
            BatchCookingSessionReview(
                session_id=session.id, created_by=profile.id, rating=5, comment="Top",
                created_at=START + timedelta(days=1),
            ),
            BatchCookingSessionReview(
                session_id=session.id, rating=2, created_at=START + timedelta(days=2),
            ),
        ])
        db_session.commit()

        response = client.get("/api/batch-cooking-session-reviews")

        assert response.status_code == 200
        data = response.json()
        assert [r["rating"] for r in data["items"]] == [2, 5]
        assert data["items"][0]["user_profile"] is None
        assert data["items"][1]["user_profile"] == {"id": profile.id, "email": "cook@test.com", "firstname": "Camille"}
        assert data["items"][1]["session"]["meal_count"] == 6
        assert data["items"][1]["session"]["recipes"] == [{"title": "Chili"}]
        assert data["pagination"]["total"] == 2

    def test_pagination(self, client, db_session, make_session):
        session = make_session()
        db_session.add_all(
            BatchCookingSessionReview(session_id=session.id, rating=3, created_at=START + timedelta(days=d))
            for d in range(3)
        )
        db_session.commit()

        response = client.get("/api/batch-cooking-session-reviews", params={"page": 2, "page_size": 2})

        assert len(response.json()["items"]) == 1
        assert response.json()["pagination"]["pages"] == 2
