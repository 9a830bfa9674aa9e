"""
Tests for recipe endpoints: masks from id lists, mask filters, decoded
attributes, categories and structured ingredients.
"""

import pytest

from admin_api.models import Allergy, Recipe, RecipeCategory


@pytest.fixture
def reference_data(seed_allergies, seed_diets, seed_equipments):
    """Allergies, diets and kitchen equipment seeded together."""
    return {"allergies": seed_allergies, "diets": seed_diets, "equipments": seed_equipments}


@pytest.fixture
def filtered_recipes(reference_data, make_recipe):
    """
    Curry: vegetarian + vegan, oven, no allergen.
    Gratin: vegetarian, oven + blender, lactose.
    Steak: every mask unset.
    """
    return {
        "curry": make_recipe("Curry", diet_mask=0b1010, kitchen_equipments_mask=0b01, allergy_mask=0),
        "gratin": make_recipe("Gratin", diet_mask=0b0010, kitchen_equipments_mask=0b11, allergy_mask=0b1),
        "steak": make_recipe("Steak"),
    }


def titles(response):
    return [item["title"] for item in response.json()["items"]]


class TestRecipeCreate:
    """Test POST /api/recipes."""

    def test_id_lists_become_masks(self, client, reference_data, admin_headers):
        response = client.post(
            "/api/recipes",
            json={
                "title": "Tarte",
                "allergy_ids": [1, 2],
                "diet_ids": [1, 2],
                "season_months": [1, 12],
            },
            headers=admin_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["allergy_mask"] == 0b101
        assert data["diet_mask"] == 0b1010
        assert data["seasonality_mask"] == (1 << 0) | (1 << 11)
        assert data["kitchen_equipments_mask"] is None

    def test_id_list_wins_over_raw_mask(self, client, reference_data):
        response = client.post(
            "/api/recipes",
            json={"title": "Tarte", "diet_mask": 1, "diet_ids": [3]},
        )
        assert response.json()["diet_mask"] == 1 << 4

    def test_empty_list_stores_zero(self, client, reference_data):
        response = client.post("/api/recipes", json={"title": "Tarte", "allergy_ids": []})
        assert response.json()["allergy_mask"] == 0

    def test_unknown_ids_ignored(self, client, reference_data):
        response = client.post("/api/recipes", json={"title": "Tarte", "diet_ids": [2, 42]})
        assert response.json()["diet_mask"] == 1 << 3

    def test_raw_mask_kept(self, client):
        response = client.post("/api/recipes", json={"title": "Tarte", "kitchen_equipments_mask": 6})
        assert response.json()["kitchen_equipments_mask"] == 6

    def test_negative_mask_rejected(self, client):
        response = client.post("/api/recipes", json={"title": "Tarte", "allergy_mask": -1})
        assert response.status_code == 422

    @pytest.mark.parametrize("field", ["allergy_mask", "diet_mask", "kitchen_equipments_mask", "seasonality_mask"])
    def test_mask_wider_than_usable_bits_rejected(self, client, field):
        response = client.post("/api/recipes", json={"title": "Tarte", field: 1 << 40})
        assert response.status_code == 422

    def test_widest_mask_accepted(self, client):
        response = client.post("/api/recipes", json={"title": "Tarte", "diet_mask": (1 << 31) - 1})
        assert response.status_code == 201
        assert response.json()["diet_mask"] == (1 << 31) - 1

    def test_update_rejects_wide_mask(self, client, make_recipe):
        recipe = make_recipe("Tarte")
        response = client.patch(f"/api/recipes/{recipe.id}", json={"allergy_mask": 1 << 31})
        assert response.status_code == 422

    def test_month_out_of_range(self, client):
        response = client.post("/api/recipes", json={"title": "Tarte", "season_months": [0, 13]})
        assert response.status_code == 422

    def test_blank_title(self, client):
        assert client.post("/api/recipes", json={"title": "   "}).status_code == 400


class TestRecipeFilters:
    """Test the mask filters of GET /api/recipes."""

    def test_no_filter(self, client, filtered_recipes):
        response = client.get("/api/recipes")
        assert titles(response) == ["Curry", "Gratin", "Steak"]

    def test_single_diet(self, client, filtered_recipes):
        response = client.get("/api/recipes", params={"diets": "1"})
        assert titles(response) == ["Curry", "Gratin"]

    def test_every_diet_required(self, client, filtered_recipes):
        response = client.get("/api/recipes", params={"diets": "1,2"})
        assert titles(response) == ["Curry"]
        assert response.json()["pagination"]["total"] == 1

    def test_unknown_diet_matches_nothing(self, client, filtered_recipes):
        response = client.get("/api/recipes", params={"diets": "1,42"})
        assert titles(response) == []
        assert response.json()["pagination"]["total"] == 0

    def test_equipment(self, client, filtered_recipes):
        response = client.get("/api/recipes", params={"kitchen_equipments": "2"})
        assert titles(response) == ["Gratin"]

    def test_exclude_allergies(self, client, filtered_recipes):
        response = client.get("/api/recipes", params={"exclude_allergies": "2"})
        assert titles(response) == ["Curry", "Steak"]

    def test_unknown_excluded_allergy_ignored(self, client, filtered_recipes):
        response = client.get("/api/recipes", params={"exclude_allergies": "99"})
        assert titles(response) == ["Curry", "Gratin", "Steak"]

    def test_filters_combine(self, client, filtered_recipes):
        response = client.get(
            "/api/recipes",
            params={"diets": "1", "kitchen_equipments": "1", "exclude_allergies": "2"},
        )
        assert titles(response) == ["Curry"]

    def test_malformed_id_list(self, client, filtered_recipes):
        assert client.get("/api/recipes", params={"diets": "vegan"}).status_code == 400

    def test_navigation_under_filter(self, client, filtered_recipes):
        gratin = filtered_recipes["gratin"]
        response = client.get(f"/api/recipes/{gratin.id}/navigation", params={"diets": "1"})
        assert response.json() == {
            "previous_id": filtered_recipes["curry"].id,
            "next_id": None,
            "position": 2,
            "total": 2,
        }


class TestRecipeAttributes:
    """Test GET /api/recipes/{id}/attributes."""

    def test_decoded_dimensions(self, client, reference_data, make_recipe):
        recipe = make_recipe(
            "Quiche",
            allergy_mask=(1 << 0) | (1 << 5),
            seasonality_mask=(1 << 0) | (1 << 11),
        )
        response = client.get(f"/api/recipes/{recipe.id}/attributes")
        assert response.status_code == 200
        data = response.json()

        assert data["allergies"]["count"] == 2
        assert sorted(item["id"] for item in data["allergies"]["items"]) == [2, 3]
        assert {item["label"] for item in data["allergies"]["items"]} == {"Lactose", "Oeufs"}
        assert data["diets"] == {"mask": None, "count": 0, "items": []}
        assert [item["id"] for item in data["seasonality"]["items"]] == [1, 12]

    def test_missing_bit_index(self, client, db_session, reference_data, make_recipe):
        db_session.add(Allergy(id=9, title={"fr": "Soja"}, order=9, bit_index=None))
        db_session.commit()
        recipe = make_recipe("Quiche", allergy_mask=1)
        response = client.get(f"/api/recipes/{recipe.id}/attributes")
        assert response.status_code == 500

    def test_unknown_recipe(self, client):
        assert client.get("/api/recipes/999/attributes").status_code == 404


class TestRecipeUpdate:
    """Test PATCH and DELETE /api/recipes/{id}."""

    def test_id_list_replaces_mask(self, client, reference_data, make_recipe):
        recipe = make_recipe("Curry", diet_mask=0b1010)
        response = client.patch(f"/api/recipes/{recipe.id}", json={"diet_ids": [3]})
        assert response.status_code == 200
        assert response.json()["diet_mask"] == 1 << 4

    def test_untouched_masks_stay(self, client, reference_data, make_recipe):
        recipe = make_recipe("Curry", diet_mask=0b1010, allergy_mask=None)
        response = client.patch(f"/api/recipes/{recipe.id}", json={"title": "Curry vert"})
        data = response.json()
        assert data["title"] == "Curry vert"
        assert data["diet_mask"] == 0b1010
        assert data["allergy_mask"] is None

    def test_empty_list_clears(self, client, reference_data, make_recipe):
        recipe = make_recipe("Curry", diet_mask=0b1010)
        response = client.patch(f"/api/recipes/{recipe.id}", json={"diet_ids": []})
        assert response.json()["diet_mask"] == 0

    def test_blank_title(self, client, make_recipe):
        recipe = make_recipe("Curry")
        assert client.patch(f"/api/recipes/{recipe.id}", json={"title": "  "}).status_code == 400

    def test_delete(self, client, db_session, make_recipe):
        recipe = make_recipe("Curry")
        assert client.delete(f"/api/recipes/{recipe.id}").status_code == 200
        db_session.expire_all()
        assert db_session.get(Recipe, recipe.id) is None
        assert client.get(f"/api/recipes/{recipe.id}").status_code == 404


class TestRecipeCategories:
    """Test GET/PUT /api/recipes/{id}/categories."""

    @pytest.fixture
    def categories(self, db_session):
        rows = [
            RecipeCategory(name={"fr": "Rapide"}),
            RecipeCategory(name={"fr": "Hiver"}),
        ]
        db_session.add_all(rows)
        db_session.commit()
        return rows

    def test_set_and_replace(self, client, make_recipe, categories):
        rapide, hiver = categories
        recipe = make_recipe("Curry")

        response = client.put(
            f"/api/recipes/{recipe.id}/categories",
            json={"category_ids": [rapide.id, hiver.id]},
        )
        assert response.status_code == 200
        assert [c["name"]["fr"] for c in response.json()] == ["Hiver", "Rapide"]

        response = client.put(f"/api/recipes/{recipe.id}/categories", json={"category_ids": [hiver.id]})
        assert [c["id"] for c in response.json()] == [hiver.id]
        assert [c["id"] for c in client.get(f"/api/recipes/{recipe.id}/categories").json()] == [hiver.id]

    def test_new_membership_goes_last(self, client, make_recipe, categories):
        rapide, _ = categories
        first = make_recipe("Curry")
        second = make_recipe("Gratin")
        client.put(f"/api/recipes/{first.id}/categories", json={"category_ids": [rapide.id]})
        client.put(f"/api/recipes/{second.id}/categories", json={"category_ids": [rapide.id]})

        response = client.get(f"/api/recipe-categories/{rapide.id}/recipes")
        assert [(r["title"], r["position"]) for r in response.json()] == [("Curry", 1), ("Gratin", 2)]

    def test_unknown_category(self, client, make_recipe, categories):
        recipe = make_recipe("Curry")
        response = client.put(f"/api/recipes/{recipe.id}/categories", json={"category_ids": [999]})
        assert response.status_code == 400


class TestRecipeIngredients:
    """Test GET/PUT /api/recipes/{id}/ingredients."""

    def test_replace_lines_and_names(self, client, db_session, make_recipe, make_ingredient):
        tomate = make_ingredient("Tomate")
        basilic = make_ingredient("Basilic")
        recipe = make_recipe("Sauce")

        response = client.put(
            f"/api/recipes/{recipe.id}/ingredients",
            json={
                "ingredients": [
                    {"ingredient_id": tomate.id, "quantity": 400, "unit": "g"},
                    {"ingredient_id": basilic.id, "unit": "brin", "is_optional": True},
                ]
            },
        )
        assert response.status_code == 200
        lines = response.json()
        assert [line["ingredient_name"] for line in lines] == ["Tomate", "Basilic"]
        assert lines[0]["quantity"] == 400
        assert lines[1]["is_optional"] is True

        db_session.expire_all()
        assert db_session.get(Recipe, recipe.id).ingredients_name == ["Tomate", "Basilic"]

        response = client.put(
            f"/api/recipes/{recipe.id}/ingredients",
            json={"ingredients": [{"ingredient_id": basilic.id}]},
        )
        assert [line["ingredient_id"] for line in response.json()] == [basilic.id]

    def test_duplicate_ingredient(self, client, make_recipe, make_ingredient):
        tomate = make_ingredient("Tomate")
        recipe = make_recipe("Sauce")
        response = client.put(
            f"/api/recipes/{recipe.id}/ingredients",
            json={"ingredients": [{"ingredient_id": tomate.id}, {"ingredient_id": tomate.id}]},
        )
        assert response.status_code == 400

    def test_unknown_ingredient(self, client, make_recipe):
        recipe = make_recipe("Sauce")
        response = client.put(
            f"/api/recipes/{recipe.id}/ingredients",
            json={"ingredients": [{"ingredient_id": 999}]},
        )
        assert response.status_code == 400

    def test_unknown_unit(self, client, make_recipe, make_ingredient):
        tomate = make_ingredient("Tomate")
        recipe = make_recipe("Sauce")
        response = client.put(
            f"/api/recipes/{recipe.id}/ingredients",
            json={"ingredients": [{"ingredient_id": tomate.id, "unit": "gallon"}]},
        )
        assert response.status_code == 422
