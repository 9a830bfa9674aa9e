"""
Tests for recipe categories: home layout zones and recipe order.
"""

import pytest

from admin_api.models import RecipeCategory


def names(categories):
    return [c["name"]["fr"] for c in categories]


def orders(categories, key):
    return [(c["name"]["fr"], c[key]) for c in categories]


@pytest.fixture
def layout_categories(client, admin_headers):
    """Apéro (chip), Batch (chip + section), Dessert (no zone), created in that order."""
    payloads = [
        {"name": {"fr": "Apéro"}, "display_as_chip": True},
        {"name": {"fr": "Batch"}, "display_as_chip": True, "display_as_section": True},
        {"name": {"fr": "Dessert"}},
    ]
    created = [
        client.post("/api/recipe-categories", json=payload, headers=admin_headers).json()
        for payload in payloads
    ]
    return {c["name"]["fr"]: c["id"] for c in created}


class TestCategoryLayout:
    """Test layout creation, moves and reorders."""

    def test_created_categories_go_last(self, client, layout_categories):
        layout = client.get("/api/recipe-categories/layout").json()
        assert orders(layout["chips"], "chip_order") == [("Apéro", 1), ("Batch", 2)]
        assert orders(layout["sections"], "section_order") == [("Batch", 1)]
        assert names(layout["available_for_chips"]) == ["Dessert"]
        assert names(layout["available_for_sections"]) == ["Apéro", "Dessert"]

    def test_outside_zone_order_is_zero(self, client, layout_categories):
        category = client.get(f"/api/recipe-categories/{layout_categories['Dessert']}").json()
        assert category["chip_order"] == 0
        assert category["section_order"] == 0

    def test_french_name_required(self, client):
        response = client.post("/api/recipe-categories", json={"name": {"en": "Quick"}})
        assert response.status_code == 400

    def test_add_from_available(self, client, layout_categories):
        response = client.post(
            f"/api/recipe-categories/{layout_categories['Dessert']}/move",
            json={"from_zone": None, "to_zone": "chips"},
        )
        assert response.status_code == 200
        assert orders(response.json()["chips"], "chip_order") == [("Apéro", 1), ("Batch", 2), ("Dessert", 3)]

    def test_move_between_zones_compacts_source(self, client, layout_categories):
        response = client.post(
            f"/api/recipe-categories/{layout_categories['Apéro']}/move",
            json={"from_zone": "chips", "to_zone": "sections"},
        )
        layout = response.json()
        assert orders(layout["chips"], "chip_order") == [("Batch", 1)]
        assert orders(layout["sections"], "section_order") == [("Batch", 1), ("Apéro", 2)]
        assert names(layout["available_for_chips"]) == ["Apéro", "Dessert"]

    def test_drop_back_to_available(self, client, layout_categories):
        response = client.post(
            f"/api/recipe-categories/{layout_categories['Batch']}/move",
            json={"from_zone": "sections"},
        )
        layout = response.json()
        assert layout["sections"] == []
        assert names(layout["available_for_sections"]) == ["Apéro", "Batch", "Dessert"]

    @pytest.mark.parametrize(
        "category,body,expected_status",
        [
            ("Apéro", {"from_zone": "chips", "to_zone": "chips"}, 400),
            ("Dessert", {}, 400),
            ("Dessert", {"from_zone": "chips", "to_zone": "sections"}, 400),
            ("Batch", {"from_zone": "chips", "to_zone": "sections"}, 409),
        ],
    )
    def test_invalid_moves(self, client, layout_categories, category, body, expected_status):
        response = client.post(f"/api/recipe-categories/{layout_categories[category]}/move", json=body)
        assert response.status_code == expected_status

    def test_move_unknown_category(self, client):
        response = client.post("/api/recipe-categories/999/move", json={"to_zone": "chips"})
        assert response.status_code == 404

    def test_reorder(self, client, layout_categories):
        response = client.post(
            "/api/recipe-categories/reorder",
            json={"zone": "chips", "category_ids": [layout_categories["Batch"], layout_categories["Apéro"]]},
        )
        assert response.status_code == 200
        assert orders(response.json()["chips"], "chip_order") == [("Batch", 1), ("Apéro", 2)]

    @pytest.mark.parametrize(
        "ids",
        [["Apéro"], ["Apéro", "Batch", "Dessert"], ["Apéro", "Apéro", "Batch"]],
    )
    def test_reorder_requires_exact_members(self, client, layout_categories, ids):
        response = client.post(
            "/api/recipe-categories/reorder",
            json={"zone": "chips", "category_ids": [layout_categories[name] for name in ids]},
        )
        assert response.status_code == 400

    def test_delete_compacts_zones(self, client, db_session, layout_categories):
        response = client.delete(f"/api/recipe-categories/{layout_categories['Apéro']}")
        assert response.status_code == 200
        layout = client.get("/api/recipe-categories/layout").json()
        assert orders(layout["chips"], "chip_order") == [("Batch", 1)]
        db_session.expire_all()
        assert db_session.get(RecipeCategory, layout_categories["Apéro"]) is None

    def test_update_keeps_zone(self, client, layout_categories):
        response = client.patch(
            f"/api/recipe-categories/{layout_categories['Batch']}",
            json={"name": {"fr": "Batch cooking"}, "is_pinned": True},
        )
        data = response.json()
        assert data["name"]["fr"] == "Batch cooking"
        assert data["is_pinned"] is True
        assert data["chip_order"] == 2


class TestCategoryRecipes:
    """Test recipe membership and order inside a category."""

    @pytest.fixture
    def category_with_recipes(self, client, layout_categories, make_recipe):
        category_id = layout_categories["Batch"]
        recipes = [make_recipe(title) for title in ("Curry", "Gratin", "Lasagnes")]
        for recipe in recipes:
            client.post(f"/api/recipe-categories/{category_id}/recipes", json={"recipe_id": recipe.id})
        return category_id, recipes

    def test_added_in_order(self, client, category_with_recipes):
        category_id, _ = category_with_recipes
        response = client.get(f"/api/recipe-categories/{category_id}/recipes")
        assert [(r["title"], r["position"]) for r in response.json()] == [
            ("Curry", 1),
            ("Gratin", 2),
            ("Lasagnes", 3),
        ]

    def test_add_twice(self, client, category_with_recipes):
        category_id, recipes = category_with_recipes
        response = client.post(
            f"/api/recipe-categories/{category_id}/recipes",
            json={"recipe_id": recipes[0].id},
        )
        assert response.status_code == 409

    def test_add_unknown_recipe(self, client, layout_categories):
        response = client.post(
            f"/api/recipe-categories/{layout_categories['Batch']}/recipes",
            json={"recipe_id": 999},
        )
        assert response.status_code == 404

    def test_remove_compacts(self, client, category_with_recipes):
        category_id, recipes = category_with_recipes
        response = client.delete(f"/api/recipe-categories/{category_id}/recipes/{recipes[0].id}")
        assert response.status_code == 200
        assert [(r["title"], r["position"]) for r in response.json()] == [("Gratin", 1), ("Lasagnes", 2)]

    def test_remove_non_member(self, client, layout_categories, make_recipe):
        recipe = make_recipe("Curry")
        response = client.delete(f"/api/recipe-categories/{layout_categories['Batch']}/recipes/{recipe.id}")
        assert response.status_code == 404

    def test_reorder(self, client, category_with_recipes):
        category_id, recipes = category_with_recipes
        wanted = [recipes[2].id, recipes[0].id, recipes[1].id]
        response = client.put(f"/api/recipe-categories/{category_id}/recipes/order", json={"recipe_ids": wanted})
        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == wanted
        assert [r["position"] for r in response.json()] == [1, 2, 3]

    def test_reorder_requires_every_recipe(self, client, category_with_recipes):
        category_id, recipes = category_with_recipes
        response = client.put(
            f"/api/recipe-categories/{category_id}/recipes/order",
            json={"recipe_ids": [recipes[0].id]},
        )
        assert response.status_code == 400
