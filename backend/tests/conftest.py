"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Point the application engine at SQLite before anything imports settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from admin_api.main import app
from admin_api.models import (
    Allergy,
    Base,
    Diet,
    Ingredient,
    IngredientRelation,
    IngredientSearchNamespace,
    KitchenEquipment,
    Recipe,
)
from shared.config.constants import RelationType
from shared.infrastructure.db import configure_sqlite, get_db


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = configure_sqlite(
    create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    """Identity headers set by the auth proxy."""
    return {"X-Admin-Id": "admin-1", "X-Admin-Email": "admin@test.com"}


# =============================================================================
# Reference tables
# =============================================================================
# bit_index values deliberately differ from ids so tests catch mix-ups.


@pytest.fixture
def seed_allergies(db_session):
    """Gluten (bit 2), Lactose (bit 0), Eggs (bit 5)."""
    allergies = [
        Allergy(id=1, title={"fr": "Gluten", "en": "Gluten"}, emoji="🌾", order=1, bit_index=2),
        Allergy(id=2, title={"fr": "Lactose", "en": "Lactose"}, emoji="🥛", order=2, bit_index=0),
        Allergy(id=3, title={"fr": "Oeufs", "en": "Eggs"}, emoji="🥚", order=3, bit_index=5),
    ]
    db_session.add_all(allergies)
    db_session.commit()
    return allergies


@pytest.fixture
def seed_diets(db_session):
    """Vegetarian (bit 1), Vegan (bit 3), Gluten free (bit 4)."""
    diets = [
        Diet(id=1, title={"fr": "Végétarien"}, slug="vegetarian", order=1, bit_index=1),
        Diet(id=2, title={"fr": "Vegan"}, slug="vegan", order=2, bit_index=3),
        Diet(id=3, title={"fr": "Sans gluten"}, slug="gluten-free", order=3, bit_index=4),
    ]
    db_session.add_all(diets)
    db_session.commit()
    return diets


@pytest.fixture
def seed_equipments(db_session):
    """Oven (bit 0), Blender (bit 1)."""
    equipments = [
        KitchenEquipment(id=1, name={"fr": "Four", "en": "Oven"}, order=1, bit_index=0),
        KitchenEquipment(id=2, name={"fr": "Mixeur", "en": "Blender"}, order=2, bit_index=1),
    ]
    db_session.add_all(equipments)
    db_session.commit()
    return equipments


@pytest.fixture
def seed_namespaces(db_session):
    """fromages (bit 0), legumes (bit 1), epices (bit 4)."""
    namespaces = [
        IngredientSearchNamespace(id=1, name="fromages", bit_index=0),
        IngredientSearchNamespace(id=2, name="legumes", bit_index=1),
        IngredientSearchNamespace(id=3, name="epices", bit_index=4),
    ]
    db_session.add_all(namespaces)
    db_session.commit()
    return namespaces


# =============================================================================
# Catalog
# =============================================================================


@pytest.fixture
def make_ingredient(db_session):
    """Factory creating a committed ingredient."""
    def _make(name_fr, mask=0, translations=None, **fields):
        name = {"fr": name_fr, **(translations or {})}
        ingredient = Ingredient(name=name, search_namespace_mask=mask, **fields)
        db_session.add(ingredient)
        db_session.commit()
        db_session.refresh(ingredient)
        return ingredient
    return _make


@pytest.fixture
def make_recipe(db_session):
    """Factory creating a committed recipe (main dish by default)."""
    def _make(title, **fields):
        fields.setdefault("dish_type", 2)
        recipe = Recipe(title=title, **fields)
        db_session.add(recipe)
        db_session.commit()
        db_session.refresh(recipe)
        return recipe
    return _make


@pytest.fixture
def cheese_family(db_session, make_ingredient):
    """
    Fromage → Comté → Comté 24 mois, plus Fromage → Brie.
    Every ingredient starts in namespaces 0 and 1 (mask 3).
    """
    fromage = make_ingredient("Fromage", mask=3)
    comte = make_ingredient("Comté", mask=3)
    comte_24 = make_ingredient("Comté 24 mois", mask=3)
    brie = make_ingredient("Brie", mask=3)
    db_session.add_all([
        IngredientRelation(ingredient_id=fromage.id, related_ingredient_id=comte.id, relation_type=RelationType.FAMILY),
        IngredientRelation(ingredient_id=comte.id, related_ingredient_id=comte_24.id, relation_type=RelationType.FAMILY),
        IngredientRelation(ingredient_id=fromage.id, related_ingredient_id=brie.id, relation_type=RelationType.FAMILY),
    ])
    db_session.commit()
    return {"fromage": fromage, "comte": comte, "comte_24": comte_24, "brie": brie}
