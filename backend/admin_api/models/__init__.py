"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class, AuditMixin, ReferenceItemMixin
- reference: Allergy, Diet, KitchenEquipment, IngredientSearchNamespace, SeasonMonth
- ingredient: IngredientCategory, Ingredient, IngredientRelation
- recipe: Recipe, IngredientRecipePivot
- recipe_category: RecipeCategory, RecipeCategoryPivot
- subscription: PromoCode, UserProfile, SubscriptionAuditLog
- batch_cooking: BatchCookingSession, BatchCookingSessionReview
- advice: AdviceArticleCategory, AdviceArticle, AdviceFaq
"""

# Base classes
from .base import Base, AuditMixin, ReferenceItemMixin, as_utc, utcnow

# Bit-indexed reference tables
from .reference import (
    Allergy,
    Diet,
    KitchenEquipment,
    IngredientSearchNamespace,
    SeasonMonth,
    SEASON_MONTHS,
)

# Ingredients
from .ingredient import IngredientCategory, Ingredient, IngredientRelation

# Recipes
from .recipe import Recipe, IngredientRecipePivot
from .recipe_category import RecipeCategory, RecipeCategoryPivot

# Subscriptions
from .subscription import PromoCode, UserProfile, SubscriptionAuditLog

# Batch cooking sessions
from .batch_cooking import BatchCookingSession, BatchCookingSessionReview

# Advice tab
from .advice import AdviceArticleCategory, AdviceArticle, AdviceFaq

__all__ = [
    "Base",
    "AuditMixin",
    "ReferenceItemMixin",
    "as_utc",
    "utcnow",
    "Allergy",
    "Diet",
    "KitchenEquipment",
    "IngredientSearchNamespace",
    "SeasonMonth",
    "SEASON_MONTHS",
    "IngredientCategory",
    "Ingredient",
    "IngredientRelation",
    "Recipe",
    "IngredientRecipePivot",
    "RecipeCategory",
    "RecipeCategoryPivot",
    "PromoCode",
    "UserProfile",
    "SubscriptionAuditLog",
    "BatchCookingSession",
    "BatchCookingSessionReview",
    "AdviceArticleCategory",
    "AdviceArticle",
    "AdviceFaq",
]
