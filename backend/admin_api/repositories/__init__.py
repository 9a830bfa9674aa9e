"""
Repository Pattern implementation.
Centralizes data access; services never build queries themselves.

Usage:
    from admin_api.repositories import get_recipe_repository, RecipeFilters

    repo = get_recipe_repository(db)
    recipes = repo.find_all(RecipeFilters(dish_type=2, diet_mask=0b101))
    recipe = repo.find_by_id(123)
"""

from .base import BaseRepository, RepositoryFilters, mask_contains_all, mask_contains_none
from .reference import (
    ReferenceItemRepository,
    get_allergy_repository,
    get_diet_repository,
    get_kitchen_equipment_repository,
    get_namespace_repository,
)
from .ingredient import (
    IngredientRepository,
    IngredientCategoryRepository,
    IngredientFilters,
    get_ingredient_repository,
    get_ingredient_category_repository,
)
from .ingredient_relation import (
    IngredientRelationRepository,
    RelationFilters,
    get_ingredient_relation_repository,
)
from .recipe import RecipeRepository, RecipeFilters, get_recipe_repository
from .recipe_category import RecipeCategoryRepository, get_recipe_category_repository
from .subscription import (
    PromoCodeRepository,
    PromoCodeFilters,
    UserProfileRepository,
    SubscriptionAuditLogRepository,
    get_promo_code_repository,
    get_user_profile_repository,
    get_subscription_audit_repository,
)
from .batch_cooking import (
    BatchCookingSessionRepository,
    BatchCookingSessionFilters,
    BatchCookingSessionReviewRepository,
    get_batch_cooking_session_repository,
    get_session_review_repository,
)
from .advice import (
    AdviceArticleRepository,
    AdviceArticleFilters,
    AdviceArticleCategoryRepository,
    AdviceFaqRepository,
    get_advice_article_repository,
    get_advice_article_category_repository,
    get_advice_faq_repository,
)

__all__ = [
    # Base
    "BaseRepository",
    "RepositoryFilters",
    "mask_contains_all",
    "mask_contains_none",
    # Reference tables
    "ReferenceItemRepository",
    "get_allergy_repository",
    "get_diet_repository",
    "get_kitchen_equipment_repository",
    "get_namespace_repository",
    # Ingredients
    "IngredientRepository",
    "IngredientCategoryRepository",
    "IngredientFilters",
    "get_ingredient_repository",
    "get_ingredient_category_repository",
    "IngredientRelationRepository",
    "RelationFilters",
    "get_ingredient_relation_repository",
    # Recipes
    "RecipeRepository",
    "RecipeFilters",
    "get_recipe_repository",
    "RecipeCategoryRepository",
    "get_recipe_category_repository",
    # Subscriptions
    "PromoCodeRepository",
    "PromoCodeFilters",
    "UserProfileRepository",
    "SubscriptionAuditLogRepository",
    "get_promo_code_repository",
    "get_user_profile_repository",
    "get_subscription_audit_repository",
    # Batch cooking sessions
    "BatchCookingSessionRepository",
    "BatchCookingSessionFilters",
    "BatchCookingSessionReviewRepository",
    "get_batch_cooking_session_repository",
    "get_session_review_repository",
    # Advice
    "AdviceArticleRepository",
    "AdviceArticleFilters",
    "AdviceArticleCategoryRepository",
    "AdviceFaqRepository",
    "get_advice_article_repository",
    "get_advice_article_category_repository",
    "get_advice_faq_repository",
]
