"""
Admin API router - combines all sub-routers.

- health: liveness and dependency checks
- masks: stateless encode/decode helpers
- reference: allergies, diets, kitchen equipment, seasonality
- namespaces: ingredient search namespaces and their membership bits
- ingredients / ingredient_relations: ingredient catalog and families
- recipes / recipe_categories: recipe catalog and home layout
- promo_codes / subscriptions / statistics: premium management
- batch_cooking_sessions: generated sessions and their reviews
- advice: advice articles, article categories and FAQ

All routes are prefixed with /api
"""

from fastapi import APIRouter

from .health import router as health_router
from .masks import router as masks_router
from .reference import router as reference_router
from .namespaces import router as namespaces_router
from .ingredients import router as ingredients_router
from .ingredient_relations import router as ingredient_relations_router
from .recipes import router as recipes_router
from .recipe_categories import router as recipe_categories_router
from .promo_codes import router as promo_codes_router
from .subscriptions import router as subscriptions_router
from .statistics import router as statistics_router
from .batch_cooking_sessions import router as batch_cooking_sessions_router
from .advice import router as advice_router


router = APIRouter(prefix="/api")

router.include_router(health_router)
router.include_router(masks_router)

# Bit-indexed reference tables
router.include_router(reference_router)
router.include_router(namespaces_router)

# Catalog
router.include_router(ingredients_router)
router.include_router(ingredient_relations_router)
router.include_router(recipes_router)
router.include_router(recipe_categories_router)

# Premium
router.include_router(promo_codes_router)
router.include_router(subscriptions_router)
router.include_router(statistics_router)

# Sessions & advice tab
router.include_router(batch_cooking_sessions_router)
router.include_router(advice_router)


__all__ = ["router"]
