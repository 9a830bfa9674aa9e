"""
Tests for ingredient, ingredient category and ingredient relation endpoints.
"""

import pytest

from admin_api.models import Ingredient, IngredientCategory, IngredientRecipePivot, IngredientRelation
from admin_api.services.domain.ingredient_service import adjacent


FULL = {"en": "x", "es": "x"}


class TestIngredientList:
    """Test GET /api/ingredients filters and pagination."""

    def test_ordered_by_french_name(self, client, make_ingredient):
        for name in ("Poireau", "Ail", "Carotte"):
            make_ingredient(name)
        response = client.get("/api/ingredients")
        assert response.status_code == 200
        data = response.json()
        assert [i["name"]["fr"] for i in data["items"]] == ["Ail", "Carotte", "Poireau"]
        assert data["pagination"]["total"] == 3

    def test_pagination(self, client, make_ingredient):
        for name in ("A", "B", "C", "D", "E"):
            make_ingredient(name)
        response = client.get("/api/ingredients", params={"page": 2, "page_size": 2})
        data = response.json()
        assert [i["name"]["fr"] for i in data["items"]] == ["C", "D"]
        assert data["pagination"] == {
            "page": 2,
            "page_size": 2,
            "total": 5,
            "pages": 3,
            "has_next": True,
            "has_prev": True,
        }

    def test_search_and_no_image(self, client, make_ingredient):
        make_ingredient("Tomate", img_path="ingredients/tomate.png")
        make_ingredient("Tomate cerise")
        make_ingredient("Thym")
        response = client.get("/api/ingredients", params={"search": "tom", "no_image": True})
        assert [i["name"]["fr"] for i in response.json()["items"]] == ["Tomate cerise"]

    def test_category_filter(self, client, db_session, make_ingredient):
        category = IngredientCategory(title={"fr": "Légumes"})
        db_session.add(category)
        db_session.commit()
        make_ingredient("Poireau", category_id=category.id)
        make_ingredient("Sel")
        response = client.get("/api/ingredients", params={"categories": str(category.id)})
        assert [i["name"]["fr"] for i in response.json()["items"]] == ["Poireau"]

    def test_invalid_category_list(self, client):
        assert client.get("/api/ingredients", params={"categories": "1,x"}).status_code == 400

    def test_namespace_filter_requires_every_bit(self, client, make_ingredient):
        make_ingredient("Brie", mask=0b011)
        make_ingredient("Comté", mask=0b111)
        make_ingredient("Ail", mask=0b010)
        make_ingredient("Sel")
        response = client.get("/api/ingredients", params={"namespaces": "0,1"})
        assert [i["name"]["fr"] for i in response.json()["items"]] == ["Brie", "Comté"]
        assert response.json()["pagination"]["total"] == 2

    def test_navigation_with_namespace_filter(self, client, make_ingredient):
        brie = make_ingredient("Brie", mask=0b1)
        make_ingredient("Cumin")
        emmental = make_ingredient("Emmental", mask=0b1)
        response = client.get(f"/api/ingredients/{brie.id}/navigation", params={"namespaces": "0"})
        assert response.json()["next_id"] == emmental.id

    @pytest.mark.parametrize("namespaces", ["31", "-1", "0,x"])
    def test_invalid_namespace_filter(self, client, namespaces):
        assert client.get("/api/ingredients", params={"namespaces": namespaces}).status_code == 400

    def test_translation_filter(self, client, make_ingredient):
        make_ingredient("Ail", translations=FULL)
        make_ingredient("Basilic", translations={"en": "Basil"})
        make_ingredient("Cumin")

        complete = client.get("/api/ingredients", params={"translation_filter": "complete"}).json()
        incomplete = client.get("/api/ingredients", params={"translation_filter": "incomplete"}).json()

        assert [i["name"]["fr"] for i in complete["items"]] == ["Ail"]
        assert [i["name"]["fr"] for i in incomplete["items"]] == ["Basilic", "Cumin"]
        assert incomplete["pagination"]["total"] == 2
        assert incomplete["items"][0]["missing_translations"] == ["es"]

    def test_unknown_translation_filter(self, client):
        assert client.get("/api/ingredients", params={"translation_filter": "partial"}).status_code == 400


class TestIngredientNavigation:
    """Previous/next under the list filters."""

    def test_adjacent_helper(self):
        assert adjacent([5, 7, 9], 7).model_dump() == {
            "previous_id": 5, "next_id": 9, "position": 2, "total": 3,
        }
        assert adjacent([5, 7, 9], 5).previous_id is None
        assert adjacent([5, 7, 9], 4).model_dump() == {
            "previous_id": None, "next_id": None, "position": None, "total": 3,
        }

    def test_navigation_respects_filters(self, client, make_ingredient):
        ail = make_ingredient("Ail", translations=FULL)
        make_ingredient("Basilic")
        cumin = make_ingredient("Cumin", translations=FULL)
        response = client.get(
            f"/api/ingredients/{cumin.id}/navigation",
            params={"translation_filter": "complete"},
        )
        assert response.status_code == 200
        assert response.json() == {"previous_id": ail.id, "next_id": None, "position": 2, "total": 2}


class TestIngredientWrites:
    """Create, update and delete."""

    def test_create(self, client, admin_headers):
        response = client.post(
            "/api/ingredients",
            json={"name": {"fr": " Poivron ", "en": "Pepper", "es": ""}},
            headers=admin_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == {"fr": "Poivron", "en": "Pepper"}
        assert data["search_namespace_mask"] == 0
        assert data["missing_translations"] == ["es"]

    def test_create_requires_french_name(self, client):
        assert client.post("/api/ingredients", json={"name": {"en": "Pepper"}}).status_code == 422

    def test_create_rejects_wide_namespace_mask(self, client):
        response = client.post(
            "/api/ingredients", json={"name": {"fr": "Poivron"}, "search_namespace_mask": 1 << 31}
        )
        assert response.status_code == 422

    def test_create_with_unknown_category(self, client):
        response = client.post("/api/ingredients", json={"name": {"fr": "Poivron"}, "category_id": 42})
        assert response.status_code == 400

    def test_update_does_not_touch_namespace_mask(self, client, make_ingredient):
        ingredient = make_ingredient("Poivron", mask=0b101)
        response = client.patch(
            f"/api/ingredients/{ingredient.id}",
            json={"is_basic": True, "search_namespace_mask": 0},
        )
        assert response.status_code == 200
        assert response.json()["is_basic"] is True
        assert response.json()["search_namespace_mask"] == 0b101

    def test_update_cannot_blank_french_name(self, client, make_ingredient):
        ingredient = make_ingredient("Poivron")
        response = client.patch(f"/api/ingredients/{ingredient.id}", json={"name": {"fr": "  "}})
        assert response.status_code == 400

    def test_delete_removes_relations(self, client, db_session, cheese_family):
        comte = cheese_family["comte"]
        response = client.delete(f"/api/ingredients/{comte.id}")
        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.get(Ingredient, comte.id) is None
        remaining = db_session.query(IngredientRelation).all()
        assert len(remaining) == 1
        assert remaining[0].related_ingredient_id == cheese_family["brie"].id

    def test_delete_refused_while_used_by_recipe(self, client, db_session, make_ingredient, make_recipe):
        ingredient = make_ingredient("Poivron")
        recipe = make_recipe("Ratatouille")
        db_session.add(IngredientRecipePivot(recipe_id=recipe.id, ingredient_id=ingredient.id))
        db_session.commit()
        assert client.delete(f"/api/ingredients/{ingredient.id}").status_code == 409


class TestIngredientCategories:
    """Test /api/ingredient-categories."""

    def test_create_and_list(self, client):
        client.post("/api/ingredient-categories", json={"title": {"fr": "Légumes"}, "emoji": "🥕"})
        client.post("/api/ingredient-categories", json={"title": {"fr": "Epices"}})
        response = client.get("/api/ingredient-categories")
        assert [c["title"]["fr"] for c in response.json()] == ["Epices", "Légumes"]

    def test_title_fr_required(self, client):
        response = client.post("/api/ingredient-categories", json={"title": {"en": "Spices"}})
        assert response.status_code == 400

    def test_delete_uncategorises_ingredients(self, client, db_session, make_ingredient):
        category = IngredientCategory(title={"fr": "Légumes"})
        db_session.add(category)
        db_session.commit()
        ingredient = make_ingredient("Poireau", category_id=category.id)

        response = client.delete(f"/api/ingredient-categories/{category.id}")

        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.get(Ingredient, ingredient.id).category_id is None


class TestIngredientRelations:
    """Test /api/ingredient-relations."""

    def test_create_and_list_with_names(self, client, make_ingredient):
        fromage = make_ingredient("Fromage")
        brie = make_ingredient("Brie")
        response = client.post(
            "/api/ingredient-relations",
            json={"ingredient_id": fromage.id, "related_ingredient_id": brie.id},
        )
        assert response.status_code == 201
        assert response.json()["relation_type"] == "family"

        listing = client.get("/api/ingredient-relations", params={"ingredient_id": brie.id}).json()
        assert listing["pagination"]["total"] == 1
        assert listing["items"][0]["ingredient_name"] == "Fromage"
        assert listing["items"][0]["related_ingredient_name"] == "Brie"

    def test_self_relation_rejected(self, client, make_ingredient):
        ail = make_ingredient("Ail")
        response = client.post(
            "/api/ingredient-relations",
            json={"ingredient_id": ail.id, "related_ingredient_id": ail.id},
        )
        assert response.status_code == 400

    def test_duplicate_relation(self, client, cheese_family):
        response = client.post(
            "/api/ingredient-relations",
            json={
                "ingredient_id": cheese_family["fromage"].id,
                "related_ingredient_id": cheese_family["brie"].id,
            },
        )
        assert response.status_code == 409

    def test_unknown_ingredient(self, client, make_ingredient):
        ail = make_ingredient("Ail")
        response = client.post(
            "/api/ingredient-relations",
            json={"ingredient_id": ail.id, "related_ingredient_id": 999},
        )
        assert response.status_code == 404

    def test_families(self, client, cheese_family):
        response = client.get("/api/ingredient-relations/families")
        assert response.status_code == 200
        assert [(f["name"]["fr"], f["children_count"]) for f in response.json()] == [
            ("Comté", 1),
            ("Fromage", 2),
        ]

    def test_related_respects_depth(self, client, cheese_family):
        parent_id = cheese_family["fromage"].id
        shallow = client.get(f"/api/ingredient-relations/related/{parent_id}", params={"max_depth": 1}).json()
        deep = client.get(f"/api/ingredient-relations/related/{parent_id}", params={"max_depth": 2}).json()
        assert set(shallow["related_ids"]) == {cheese_family["comte"].id, cheese_family["brie"].id}
        assert cheese_family["comte_24"].id in deep["related_ids"]
        assert parent_id not in deep["related_ids"]

    def test_related_depth_out_of_range(self, client, cheese_family):
        response = client.get(
            f"/api/ingredient-relations/related/{cheese_family['fromage'].id}",
            params={"max_depth": 0},
        )
        assert response.status_code == 400

    def test_bidirectional_create_and_delete(self, client, make_ingredient):
        beurre = make_ingredient("Beurre")
        margarine = make_ingredient("Margarine")
        created = client.post(
            "/api/ingredient-relations/bidirectional",
            json={
                "ingredient_id": beurre.id,
                "related_ingredient_id": margarine.id,
                "relation_type": "substitute",
            },
        )
        assert created.status_code == 201
        assert len(created.json()) == 2

        removed = client.delete(
            "/api/ingredient-relations/bidirectional",
            params={"ingredient_id": margarine.id, "related_ingredient_id": beurre.id},
        )
        assert removed.json() == {"success": True, "removed": 2}

    def test_delete_unknown_relation(self, client):
        assert client.delete("/api/ingredient-relations/999").status_code == 404
