"""
Tests for advice article, advice category and FAQ endpoints.
"""

from datetime import datetime, timedelta, timezone

import pytest

from admin_api.models import AdviceArticle, AdviceArticleCategory, AdviceFaq


START = datetime(2025, 3, 1, tzinfo=timezone.utc)
FULL = {"en": "x", "es": "x"}


@pytest.fixture
def category(db_session):
    category = AdviceArticleCategory(title={"fr": "Organisation"}, short_title={"fr": "Orga"})
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture
def make_article(db_session, category):
    def _make(title_fr, day=0, translations=None, **fields):
        translations = translations or {}
        fields.setdefault("category_id", category.id)
        article = AdviceArticle(
            title={"fr": title_fr, **translations},
            content={"fr": "Texte", **translations},
            created_at=START + timedelta(days=day),
            **fields,
        )
        db_session.add(article)
        db_session.commit()
        return article

    return _make


class TestArticleList:
    """Test GET /api/advice-articles filters."""

    def test_newest_first(self, client, make_article):
        make_article("Congeler", day=0)
        make_article("Planifier", day=1)
        response = client.get("/api/advice-articles")
        assert response.status_code == 200
        assert [a["title"]["fr"] for a in response.json()["items"]] == ["Planifier", "Congeler"]

    def test_search_by_french_title(self, client, make_article):
        make_article("Bien congeler")
        make_article("Planifier")
        response = client.get("/api/advice-articles", params={"search": "CONGEL"})
        assert [a["title"]["fr"] for a in response.json()["items"]] == ["Bien congeler"]

    def test_numeric_search_matches_id(self, client, make_article):
        make_article("Congeler")
        wanted = make_article("Planifier")
        response = client.get("/api/advice-articles", params={"search": str(wanted.id)})
        assert [a["id"] for a in response.json()["items"]] == [wanted.id]

    def test_state_featured_and_category_filters(self, client, db_session, make_article):
        other = AdviceArticleCategory(title={"fr": "Budget"})
        db_session.add(other)
        db_session.commit()
        wanted = make_article("Une", publication_state="published", is_featured=True)
        make_article("Deux", publication_state="draft", is_featured=True)
        make_article("Trois", publication_state="published", is_featured=False)
        make_article("Quatre", publication_state="published", is_featured=True, category_id=other.id)

        response = client.get(
            "/api/advice-articles",
            params={"publication_state": "published", "is_featured": True, "category_id": wanted.category_id},
        )

        assert [a["id"] for a in response.json()["items"]] == [wanted.id]

    def test_unknown_publication_state(self, client):
        assert client.get("/api/advice-articles", params={"publication_state": "live"}).status_code == 400

    def test_translation_filter_checks_every_field(self, client, db_session, make_article):
        make_article("Complet", day=0, translations=FULL)
        partial = make_article("Partiel", day=1, translations=FULL)
        partial.content = {"fr": "Texte", "en": "Text"}
        db_session.commit()

        complete = client.get("/api/advice-articles", params={"translation_filter": "complete"}).json()
        incomplete = client.get("/api/advice-articles", params={"translation_filter": "incomplete"}).json()

        assert [a["title"]["fr"] for a in complete["items"]] == ["Complet"]
        assert [a["title"]["fr"] for a in incomplete["items"]] == ["Partiel"]
        assert incomplete["items"][0]["missing_translations"] == ["es"]
        assert incomplete["pagination"]["total"] == 1

    def test_unknown_translation_filter(self, client):
        assert client.get("/api/advice-articles", params={"translation_filter": "partial"}).status_code == 400


class TestArticleWrites:
    """Create, update and delete articles."""

    def test_create(self, client, category, admin_headers):
        response = client.post(
            "/api/advice-articles",
            json={"title": {"fr": " Congeler ", "en": ""}, "category_id": category.id},
            headers=admin_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["title"] == {"fr": "Congeler"}
        assert data["publication_state"] == "draft"
        assert data["is_featured"] is False
        # content is empty in every language
        assert data["missing_translations"] == ["fr", "en", "es"]

    def test_create_requires_french_title(self, client, category):
        response = client.post("/api/advice-articles", json={"title": {"en": "Freeze"}, "category_id": category.id})
        assert response.status_code == 400

    def test_create_with_unknown_category(self, client):
        response = client.post("/api/advice-articles", json={"title": {"fr": "Congeler"}, "category_id": 42})
        assert response.status_code == 400

    def test_create_with_unknown_state(self, client, category):
        response = client.post(
            "/api/advice-articles",
            json={"title": {"fr": "Congeler"}, "category_id": category.id, "publication_state": "live"},
        )
        assert response.status_code == 422

    def test_publish(self, client, make_article):
        article = make_article("Congeler")
        response = client.patch(
            f"/api/advice-articles/{article.id}",
            json={"publication_state": "published", "is_featured": True},
        )
        assert response.status_code == 200
        assert response.json()["publication_state"] == "published"
        assert response.json()["title"]["fr"] == "Congeler"

    def test_update_cannot_blank_french_title(self, client, make_article):
        article = make_article("Congeler")
        response = client.patch(f"/api/advice-articles/{article.id}", json={"title": {"fr": "  "}})
        assert response.status_code == 400

    def test_delete(self, client, db_session, make_article):
        article_id = make_article("Congeler").id
        assert client.delete(f"/api/advice-articles/{article_id}").status_code == 200
        db_session.expire_all()
        assert db_session.get(AdviceArticle, article_id) is None

    def test_get_unknown_article(self, client):
        assert client.get("/api/advice-articles/999").status_code == 404


class TestAdviceCategories:
    """Test /api/advice-categories."""

    def test_create_and_list_by_french_title(self, client):
        client.post("/api/advice-categories", json={"title": {"fr": "Organisation"}})
        client.post("/api/advice-categories", json={"title": {"fr": "Budget"}, "short_title": {"fr": "€"}})
        response = client.get("/api/advice-categories")
        assert [c["title"]["fr"] for c in response.json()["items"]] == ["Budget", "Organisation"]

    def test_translation_filter_covers_short_title(self, client):
        client.post("/api/advice-categories", json={"title": {"fr": "A", **FULL}, "short_title": {"fr": "A", **FULL}})
        client.post("/api/advice-categories", json={"title": {"fr": "B", **FULL}, "short_title": {"fr": "B"}})
        complete = client.get("/api/advice-categories", params={"translation_filter": "complete"}).json()
        assert [c["title"]["fr"] for c in complete["items"]] == ["A"]

    def test_title_fr_required(self, client):
        assert client.post("/api/advice-categories", json={"title": {"en": "Budget"}}).status_code == 400

    def test_delete_refused_while_holding_articles(self, client, category, make_article):
        make_article("Congeler")
        assert client.delete(f"/api/advice-categories/{category.id}").status_code == 409

    def test_delete_empty_category(self, client, category):
        assert client.delete(f"/api/advice-categories/{category.id}").status_code == 200


class TestAdviceFaq:
    """Test /api/advice-faq."""

    def test_create_and_search_question(self, client):
        client.post("/api/advice-faq", json={"question": {"fr": "Combien de temps au frigo ?"}})
        client.post("/api/advice-faq", json={"question": {"fr": "Peut-on congeler ?"}, "answer": {"fr": "Oui"}})
        response = client.get("/api/advice-faq", params={"search": "frigo"})
        assert [f["question"]["fr"] for f in response.json()["items"]] == ["Combien de temps au frigo ?"]

    def test_newest_first(self, client, db_session):
        db_session.add_all([
            AdviceFaq(question={"fr": "Ancienne"}, created_at=START),
            AdviceFaq(question={"fr": "Récente"}, created_at=START + timedelta(days=1)),
        ])
        db_session.commit()
        response = client.get("/api/advice-faq")
        assert [f["question"]["fr"] for f in response.json()["items"]] == ["Récente", "Ancienne"]

    def test_question_fr_required(self, client):
        assert client.post("/api/advice-faq", json={"question": {"en": "Why?"}}).status_code == 400

    def test_update_and_delete(self, client, db_session):
        created = client.post("/api/advice-faq", json={"question": {"fr": "Pourquoi ?"}}).json()
        updated = client.patch(f"/api/advice-faq/{created['id']}", json={"answer": {"fr": "Parce que"}})
        assert updated.json()["answer"] == {"fr": "Parce que"}
        assert client.delete(f"/api/advice-faq/{created['id']}").status_code == 200
        assert client.delete(f"/api/advice-faq/{created['id']}").status_code == 404
