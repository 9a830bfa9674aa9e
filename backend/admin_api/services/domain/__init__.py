"""
Domain Services - Application Layer.

Services contain business logic and orchestrate operations.
They use Repositories for data access.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Repository (data access)
        ↓
    Model (entity)

Usage:
    from admin_api.services.domain import NamespaceService

    # In router
    service = NamespaceService(db)
    result = service.add_ingredient(ingredient_id, bit_index)
"""

from .reference_service import (
    REFERENCE_TABLES,
    ReferenceTableService,
    get_reference_service,
    reference_items,
    summarize,
)
from .mask_service import MaskService, get_mask_service
from .namespace_service import NamespaceService, get_namespace_service
from .ingredient_service import (
    IngredientService,
    IngredientCategoryService,
    get_ingredient_service,
    get_ingredient_category_service,
)
from .ingredient_relation_service import IngredientRelationService, get_ingredient_relation_service
from .recipe_service import RecipeService, get_recipe_service
from .recipe_category_service import RecipeCategoryService, get_recipe_category_service
from .promo_code_service import PromoCodeService, generate_promo_code, get_promo_code_service
from .subscription_service import SubscriptionService, get_subscription_service
from .statistics_service import StatisticsService, get_statistics_service
from .batch_cooking_service import (
    BatchCookingSessionService,
    SessionReviewService,
    get_batch_cooking_session_service,
    get_session_review_service,
)
from .advice_service import (
    AdviceArticleService,
    AdviceCategoryService,
    AdviceFaqService,
    get_advice_article_service,
    get_advice_category_service,
    get_advice_faq_service,
)

__all__ = [
    # Reference tables & masks
    "REFERENCE_TABLES",
    "ReferenceTableService",
    "get_reference_service",
    "reference_items",
    "summarize",
    "MaskService",
    "get_mask_service",
    "NamespaceService",
    "get_namespace_service",
    # Ingredients
    "IngredientService",
    "IngredientCategoryService",
    "get_ingredient_service",
    "get_ingredient_category_service",
    "IngredientRelationService",
    "get_ingredient_relation_service",
    # Recipes
    "RecipeService",
    "get_recipe_service",
    "RecipeCategoryService",
    "get_recipe_category_service",
    # Subscriptions & statistics
    "PromoCodeService",
    "generate_promo_code",
    "get_promo_code_service",
    "SubscriptionService",
    "get_subscription_service",
    "StatisticsService",
    "get_statistics_service",
    # Batch cooking sessions
    "BatchCookingSessionService",
    "SessionReviewService",
    "get_batch_cooking_session_service",
    "get_session_review_service",
    # Advice
    "AdviceArticleService",
    "AdviceCategoryService",
    "AdviceFaqService",
    "get_advice_article_service",
    "get_advice_category_service",
    "get_advice_faq_service",
]
