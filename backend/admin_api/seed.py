"""
Seed data for development.
Creates the reference tables with their bit indexes, a few ingredient
categories and ingredients, and one home layout.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from admin_api.models import (
    Allergy,
    Diet,
    Ingredient,
    IngredientCategory,
    IngredientRelation,
    IngredientSearchNamespace,
    KitchenEquipment,
    RecipeCategory,
)
from shared.config.constants import RelationType
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit

logger = get_logger(__name__)


ALLERGIES = [
    ("gluten", "Gluten", "Gluten", "🌾"),
    ("lactose", "Lactose", "Lactose", "🥛"),
    ("eggs", "Oeufs", "Eggs", "🥚"),
    ("peanuts", "Arachides", "Peanuts", "🥜"),
    ("nuts", "Fruits à coque", "Tree nuts", "🌰"),
    ("fish", "Poisson", "Fish", "🐟"),
    ("shellfish", "Crustacés", "Shellfish", "🦐"),
    ("soy", "Soja", "Soy", "🫘"),
]

DIETS = [
    ("all", "Tout", "Everything", "🍽️", True),
    ("vegetarian", "Végétarien", "Vegetarian", "🥕", False),
    ("vegan", "Vegan", "Vegan", "🌱", False),
    ("pescatarian", "Pescétarien", "Pescatarian", "🐟", False),
    ("gluten-free", "Sans gluten", "Gluten free", "🚫", False),
]

KITCHEN_EQUIPMENTS = [
    ("oven", "Four", "Oven", "🔥"),
    ("blender", "Mixeur", "Blender", "🌀"),
    ("pressure-cooker", "Cocotte-minute", "Pressure cooker", "♨️"),
    ("microwave", "Micro-ondes", "Microwave", "📡"),
]

NAMESPACES = ["fromages", "legumes", "viandes", "epices"]

INGREDIENT_CATEGORIES = [
    ("Fromages", "Cheeses", "🧀", ["Comté", "Emmental", "Mozzarella"]),
    ("Légumes", "Vegetables", "🥕", ["Carotte", "Poireau", "Courgette"]),
]

RECIPE_CATEGORIES = [
    # name fr, name en, emoji, chip, section
    ("Rapide", "Quick", "⚡", True, True),
    ("Végétarien", "Vegetarian", "🥕", True, False),
    ("Réconfortant", "Comfort food", "🍲", False, True),
]


def seed_reference_tables(db: Session) -> None:
    """
    Reference rows, bit_index following declaration order.
    Idempotent: only inserts if allergies are empty.
    """
    if db.scalar(select(Allergy.id).limit(1)):
        logger.info("Reference tables already seeded, skipping")
        return

    logger.info("Seeding reference tables")

    for bit_index, (slug, fr, en, emoji) in enumerate(ALLERGIES):
        db.add(Allergy(title={"fr": fr, "en": en}, slug=slug, emoji=emoji, order=bit_index, bit_index=bit_index))

    for bit_index, (slug, fr, en, emoji, is_all) in enumerate(DIETS):
        db.add(Diet(
            title={"fr": fr, "en": en},
            slug=slug,
            emoji=emoji,
            order=bit_index,
            is_all=is_all,
            bit_index=bit_index,
        ))

    for bit_index, (slug, fr, en, emoji) in enumerate(KITCHEN_EQUIPMENTS):
        db.add(KitchenEquipment(name={"fr": fr, "en": en}, slug=slug, emoji=emoji, order=bit_index, bit_index=bit_index))

    for bit_index, name in enumerate(NAMESPACES):
        db.add(IngredientSearchNamespace(name=name, bit_index=bit_index))

    safe_commit(db)


def seed_ingredients(db: Session) -> None:
    """
    Ingredient categories and a family per category (first ingredient is the parent).
    Idempotent: only inserts if ingredient categories are empty.
    """
    if db.scalar(select(IngredientCategory.id).limit(1)):
        logger.info("Ingredients already seeded, skipping")
        return

    logger.info("Seeding ingredients")

    for fr, en, emoji, names in INGREDIENT_CATEGORIES:
        category = IngredientCategory(title={"fr": fr, "en": en}, emoji=emoji)
        db.add(category)
        db.flush()

        ingredients = [Ingredient(name={"fr": name}, category_id=category.id) for name in names]
        db.add_all(ingredients)
        db.flush()

        parent, *children = ingredients
        for child in children:
            db.add(IngredientRelation(
                ingredient_id=parent.id,
                related_ingredient_id=child.id,
                relation_type=RelationType.FAMILY,
            ))

    safe_commit(db)


def seed_recipe_categories(db: Session) -> None:
    """Home layout categories. Idempotent."""
    if db.scalar(select(RecipeCategory.id).limit(1)):
        logger.info("Recipe categories already seeded, skipping")
        return

    logger.info("Seeding recipe categories")

    chip_order = section_order = 0
    for fr, en, emoji, as_chip, as_section in RECIPE_CATEGORIES:
        if as_chip:
            chip_order += 1
        if as_section:
            section_order += 1
        db.add(RecipeCategory(
            name={"fr": fr, "en": en},
            emoji=emoji,
            display_as_chip=as_chip,
            display_as_section=as_section,
            chip_order=chip_order if as_chip else 0,
            section_order=section_order if as_section else 0,
        ))

    safe_commit(db)


def seed(db: Session) -> None:
    """Seed everything. Each step skips itself when its data exists."""
    seed_reference_tables(db)
    seed_ingredients(db)
    seed_recipe_categories(db)
    logger.info("Seed complete")
