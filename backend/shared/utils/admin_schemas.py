"""
Pydantic schemas for admin API endpoints.
Centralized so services and routers share them without circular imports.

This file contains all request/response schemas used by admin routers.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from shared.config.constants import (
    BitLimits,
    DishType,
    DynamicCategoryType,
    IngredientUnit,
    Limits,
    PromoDuration,
    PublicationState,
    QuantificationType,
    RelationType,
)
from shared.utils.validators import validate_hex_color, validate_image_path, validate_quantity

ReferenceTableName = Literal[
    "allergies", "diets", "kitchen_equipments", "seasonality", "ingredient_search_namespaces"
]
Translations = dict[str, str]


# =============================================================================
# Mask Schemas
# =============================================================================


class MaskEncodeRequest(BaseModel):
    selected_ids: list[int] = Field(default_factory=list)
    reference_table: ReferenceTableName


class MaskEncodeOutput(BaseModel):
    reference_table: str
    mask: int


class ReferenceItemSummary(BaseModel):
    """Reference item as it appears inside a decoded mask."""
    id: int
    bit_index: int
    label: str
    emoji: str | None = None


class MaskDecodeOutput(BaseModel):
    reference_table: str
    mask: int
    count: int
    items: list[ReferenceItemSummary]


class MaskCountOutput(BaseModel):
    mask: int
    count: int


# =============================================================================
# Reference Table Schemas
# =============================================================================


class AllergyOutput(BaseModel):
    id: int
    bit_index: int | None = None
    title: Translations
    emoji: str | None = None
    slug: str | None = None
    order: int
    created_at: datetime

    class Config:
        from_attributes = True


class AllergyCreate(BaseModel):
    title: Translations
    emoji: str | None = Field(default=None, max_length=Limits.MAX_EMOJI_LENGTH)
    slug: str | None = None
    order: int = 0
    bit_index: int | None = None


class AllergyUpdate(BaseModel):
    title: Translations | None = None
    emoji: str | None = Field(default=None, max_length=Limits.MAX_EMOJI_LENGTH)
    slug: str | None = None
    order: int | None = None
    bit_index: int | None = None


class DietOutput(BaseModel):
    id: int
    bit_index: int | None = None
    title: Translations
    description: Translations | None = None
    emoji: str | None = None
    slug: str
    order: int
    is_all: bool
    created_at: datetime

    class Config:
        from_attributes = True


class DietCreate(BaseModel):
    title: Translations
    description: Translations | None = None
    emoji: str | None = Field(default=None, max_length=Limits.MAX_EMOJI_LENGTH)
    slug: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    order: int = 0
    is_all: bool = False
    bit_index: int | None = None


class DietUpdate(BaseModel):
    title: Translations | None = None
    description: Translations | None = None
    emoji: str | None = Field(default=None, max_length=Limits.MAX_EMOJI_LENGTH)
    slug: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    order: int | None = None
    is_all: bool | None = None
    bit_index: int | None = None


class KitchenEquipmentOutput(BaseModel):
    id: int
    bit_index: int | None = None
    name: Translations
    emoji: str | None = None
    slug: str | None = None
    order: int
    created_at: datetime

    class Config:
        from_attributes = True


class KitchenEquipmentCreate(BaseModel):
    name: Translations
    emoji: str | None = Field(default=None, max_length=Limits.MAX_EMOJI_LENGTH)
    slug: str | None = None
    order: int = 0
    bit_index: int | None = None


class KitchenEquipmentUpdate(BaseModel):
    name: Translations | None = None
    emoji: str | None = Field(default=None, max_length=Limits.MAX_EMOJI_LENGTH)
    slug: str | None = None
    order: int | None = None
    bit_index: int | None = None


class SeasonMonthOutput(BaseModel):
    id: int
    bit_index: int
    name: Translations

    class Config:
        from_attributes = True


# =============================================================================
# Namespace Schemas
# =============================================================================


class NamespaceOutput(BaseModel):
    id: int
    name: str
    bit_index: int | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class NamespaceCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    bit_index: int | None = None


class NamespaceUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    bit_index: int | None = None


class NamespaceToggleOutput(BaseModel):
    success: bool
    ingredient_id: int
    bit_index: int
    mask: int


class NamespaceIngredientStatus(BaseModel):
    id: int
    name: Translations
    is_in_namespace: bool


class ExcludeChildrenRequest(BaseModel):
    parent_ingredient_id: int
    bit_indexes: list[int] = Field(min_length=1)


class ExcludeChildFailure(BaseModel):
    ingredient_id: int
    error: str


class ExcludeChildrenOutput(BaseModel):
    excluded_count: int
    children_ids: list[int]
    failed: list[ExcludeChildFailure] = Field(default_factory=list)


# =============================================================================
# Ingredient Schemas
# =============================================================================


class IngredientCategoryOutput(BaseModel):
    id: int
    title: Translations
    emoji: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class IngredientCategoryCreate(BaseModel):
    title: Translations
    emoji: str | None = Field(default=None, max_length=Limits.MAX_EMOJI_LENGTH)


class IngredientCategoryUpdate(BaseModel):
    title: Translations | None = None
    emoji: str | None = Field(default=None, max_length=Limits.MAX_EMOJI_LENGTH)


class IngredientOutput(BaseModel):
    id: int
    name: Translations
    suffix_singular: Translations
    suffix_plural: Translations
    category_id: int | None = None
    img_path: str | None = None
    is_basic: bool
    search_namespace_mask: int
    missing_translations: list[str] = Field(default_factory=list)
    created_at: datetime

    class Config:
        from_attributes = True


class IngredientCreate(BaseModel):
    name: Translations
    suffix_singular: Translations = Field(default_factory=dict)
    suffix_plural: Translations = Field(default_factory=dict)
    category_id: int | None = None
    img_path: str | None = None
    is_basic: bool = False
    search_namespace_mask: int = Field(default=0, ge=0, le=BitLimits.MAX_MASK)

    @field_validator("name")
    @classmethod
    def _french_name_required(cls, value: Translations) -> Translations:
        if not (value.get("fr") or "").strip():
            raise ValueError("name.fr is required")
        return value

    @field_validator("img_path")
    @classmethod
    def _image_path(cls, value: str | None) -> str | None:
        return validate_image_path(value)


class IngredientUpdate(BaseModel):
    name: Translations | None = None
    suffix_singular: Translations | None = None
    suffix_plural: Translations | None = None
    category_id: int | None = None
    img_path: str | None = None
    is_basic: bool | None = None

    @field_validator("img_path")
    @classmethod
    def _image_path(cls, value: str | None) -> str | None:
        return validate_image_path(value)


class AdjacentOutput(BaseModel):
    """Neighbours of an item in a filtered, ordered listing."""
    previous_id: int | None = None
    next_id: int | None = None
    position: int | None = None
    total: int


# =============================================================================
# Ingredient Relation Schemas
# =============================================================================


class IngredientRelationOutput(BaseModel):
    id: int
    ingredient_id: int
    related_ingredient_id: int
    relation_type: str
    ingredient_name: str = "Unknown"
    related_ingredient_name: str = "Unknown"
    created_at: datetime

    class Config:
        from_attributes = True


class IngredientRelationCreate(BaseModel):
    ingredient_id: int
    related_ingredient_id: int
    relation_type: Literal["family", "substitute"] = RelationType.FAMILY


class FamilyOutput(BaseModel):
    id: int
    name: Translations
    children_count: int


class RelatedIngredientsOutput(BaseModel):
    ingredient_id: int
    relation_type: str
    max_depth: int
    related_ids: list[int]


# =============================================================================
# Recipe Schemas
# =============================================================================


class RecipeOutput(BaseModel):
    id: int
    title: str
    ingredients_name: list[str]
    img_path: str | None = None
    allergy_mask: int | None = None
    diet_mask: int | None = None
    kitchen_equipments_mask: int | None = None
    seasonality_mask: int | None = None
    instructions: str | None = None
    dish_type: int
    quantification_type: int
    is_folklore: bool
    is_visible: bool
    base_servings: int | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class _RecipeFields(BaseModel):
    """
    Attribute masks can be given raw or as id lists. An id list wins over
    the raw mask of the same dimension.
    """

    allergy_mask: int | None = Field(default=None, ge=0, le=BitLimits.MAX_MASK)
    diet_mask: int | None = Field(default=None, ge=0, le=BitLimits.MAX_MASK)
    kitchen_equipments_mask: int | None = Field(default=None, ge=0, le=BitLimits.MAX_MASK)
    seasonality_mask: int | None = Field(default=None, ge=0, le=BitLimits.MAX_MASK)

    allergy_ids: list[int] | None = None
    diet_ids: list[int] | None = None
    kitchen_equipment_ids: list[int] | None = None
    # Months 1..12
    season_months: list[int] | None = None

    img_path: str | None = None
    instructions: str | None = None

    @field_validator("season_months")
    @classmethod
    def _months_in_range(cls, value: list[int] | None) -> list[int] | None:
        if value is not None and any(not 1 <= month <= 12 for month in value):
            raise ValueError("season_months must be between 1 and 12")
        return value

    @field_validator("img_path")
    @classmethod
    def _image_path(cls, value: str | None) -> str | None:
        return validate_image_path(value)


class RecipeCreate(_RecipeFields):
    title: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    dish_type: Literal[1, 2, 3] = DishType.MAIN
    quantification_type: Literal[1, 2] = QuantificationType.PER_PERSON
    is_folklore: bool = False
    is_visible: bool = True
    base_servings: int | None = Field(default=None, ge=Limits.MIN_SERVINGS, le=Limits.MAX_SERVINGS)


class RecipeUpdate(_RecipeFields):
    title: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    dish_type: Literal[1, 2, 3] | None = None
    quantification_type: Literal[1, 2] | None = None
    is_folklore: bool | None = None
    is_visible: bool | None = None
    base_servings: int | None = Field(default=None, ge=Limits.MIN_SERVINGS, le=Limits.MAX_SERVINGS)


class AttributeDimension(BaseModel):
    """One decoded mask of a recipe."""
    mask: int | None = None
    count: int
    items: list[ReferenceItemSummary]


class RecipeAttributesOutput(BaseModel):
    recipe_id: int
    allergies: AttributeDimension
    diets: AttributeDimension
    kitchen_equipments: AttributeDimension
    seasonality: AttributeDimension


class RecipeCategoriesUpdate(BaseModel):
    category_ids: list[int]


class RecipeIngredientLine(BaseModel):
    ingredient_id: int
    quantity: float | None = None
    unit: str | None = None
    is_optional: bool = False

    @field_validator("quantity")
    @classmethod
    def _positive_quantity(cls, value: float | None) -> float | None:
        return None if value is None else validate_quantity(value)

    @field_validator("unit")
    @classmethod
    def _known_unit(cls, value: str | None) -> str | None:
        if value is not None and value not in IngredientUnit.ALL:
            raise ValueError(f"Unknown unit: {value}")
        return value


class RecipeIngredientOutput(RecipeIngredientLine):
    id: int
    ingredient_name: str

    class Config:
        from_attributes = True


class RecipeIngredientsUpdate(BaseModel):
    ingredients: list[RecipeIngredientLine]


# =============================================================================
# Recipe Category Schemas
# =============================================================================


class RecipeCategoryOutput(BaseModel):
    id: int
    name: Translations
    emoji: str | None = None
    color: str | None = None
    is_pinned: bool
    display_as_chip: bool
    display_as_section: bool
    chip_order: int
    section_order: int
    is_dynamic: bool
    dynamic_type: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class _CategoryFields(BaseModel):
    emoji: str | None = Field(default=None, max_length=Limits.MAX_EMOJI_LENGTH)
    color: str | None = None
    dynamic_type: str | None = None

    @field_validator("color")
    @classmethod
    def _hex_color(cls, value: str | None) -> str | None:
        return validate_hex_color(value)

    @field_validator("dynamic_type")
    @classmethod
    def _known_dynamic_type(cls, value: str | None) -> str | None:
        if value is not None and value not in DynamicCategoryType.ALL:
            raise ValueError(f"Unknown dynamic_type: {value}")
        return value


class RecipeCategoryCreate(_CategoryFields):
    name: Translations
    is_pinned: bool = False
    display_as_chip: bool = False
    display_as_section: bool = False
    is_dynamic: bool = False


class RecipeCategoryUpdate(_CategoryFields):
    name: Translations | None = None
    is_pinned: bool | None = None
    is_dynamic: bool | None = None


class CategoryLayoutOutput(BaseModel):
    chips: list[RecipeCategoryOutput]
    sections: list[RecipeCategoryOutput]
    available_for_chips: list[RecipeCategoryOutput]
    available_for_sections: list[RecipeCategoryOutput]


class CategoryReorderRequest(BaseModel):
    zone: Literal["chips", "sections"]
    category_ids: list[int]


class CategoryMoveRequest(BaseModel):
    """Drag of a category from one zone (or from outside any zone) to another."""
    from_zone: Literal["chips", "sections"] | None = None
    to_zone: Literal["chips", "sections"] | None = None


class CategoryRecipeItem(BaseModel):
    id: int
    title: str
    img_path: str | None = None
    position: int


class CategoryRecipeAdd(BaseModel):
    recipe_id: int


class CategoryRecipeReorder(BaseModel):
    recipe_ids: list[int]


# =============================================================================
# Promo Code & Subscription Schemas
# =============================================================================


class PromoCodeOutput(BaseModel):
    id: int
    code: str
    premium_end_at: datetime
    used_at: datetime | None = None
    used_by_user_id: str | None = None
    duration_label: str
    created_at: datetime


class PromoCodeCreate(BaseModel):
    duration: Literal["1_month", "1_year"] = PromoDuration.ONE_MONTH


class SubscriptionOutput(BaseModel):
    user_id: str
    email: str | None = None
    premium_sub_end_at: datetime | None = None
    is_premium: bool
    created_at: datetime


class SubscriptionUpdate(BaseModel):
    user_id: str = Field(min_length=1)
    action: Literal["add_1_month", "add_1_year", "custom_date"]
    custom_date: datetime | None = None
    note: str | None = None

    @field_validator("custom_date")
    @classmethod
    def _aware_date(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            raise ValueError("custom_date must include a timezone")
        return value


class SubscriptionAuditOutput(BaseModel):
    id: int
    user_id: str
    admin_id: str | None = None
    admin_email: str | None = None
    action: str
    previous_end_at: datetime | None = None
    new_end_at: datetime
    note: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


# =============================================================================
# Statistics Schemas
# =============================================================================


class OnboardingKpis(BaseModel):
    total_users: int
    premium_users: int
    premium_percentage: float
    avg_household_size: float
    avg_session_count: float


class MonthCount(BaseModel):
    month: str
    count: int


class LabelCount(BaseModel):
    label: str
    count: int


class SizeCount(BaseModel):
    size: int
    count: int


class OnboardingStatsOutput(BaseModel):
    kpis: OnboardingKpis
    registrations_by_month: list[MonthCount]
    diet_distribution: list[LabelCount]
    allergy_distribution: list[LabelCount]
    equipment_distribution: list[LabelCount]
    frequency_distribution: list[LabelCount]
    household_size_distribution: list[SizeCount]
    appetite_distribution: list[LabelCount]
    goals_distribution: list[LabelCount]


# =============================================================================
# Batch Cooking Session Schemas
# =============================================================================

GenerationStatusValue = Literal["pending", "processing", "completed", "failed"]


class BatchCookingSessionOutput(BaseModel):
    id: int
    meal_count: int
    people_count: int
    recipe_count: int
    recipes: list[Any]
    ingredients: list[Any]
    detailed_ingredients: list[Any]
    starting_steps: list[Any]
    cooking_steps: list[Any]
    assembly_steps: list[Any]
    meals: list[Any]
    cooking_steps_text: str | None = None
    recipe_generation_status: str
    ingredient_generation_status: str
    cooking_step_generation_status: str
    assembly_step_generation_status: str
    is_cooked: bool
    cooked_at: datetime | None = None
    time_saved: float
    money_saved: float
    is_original: bool
    seed: str | None = None
    algo_version: str | None = None
    parent_id: int | None = None
    created_by: int | None = None
    created_at: datetime
    # Computed
    children_count: int = 0
    algo_name: str = "N/A"

    class Config:
        from_attributes = True


class BatchCookingSessionCreate(BaseModel):
    meal_count: int = Field(ge=1)
    people_count: int = Field(ge=1, le=Limits.MAX_SERVINGS)
    seed: str | None = Field(default=None, max_length=64)
    algo_version: str | None = Field(default=None, max_length=32)
    parent_id: int | None = None


class BatchCookingSessionUpdate(BaseModel):
    meal_count: int | None = Field(default=None, ge=1)
    people_count: int | None = Field(default=None, ge=1, le=Limits.MAX_SERVINGS)
    seed: str | None = Field(default=None, max_length=64)
    algo_version: str | None = Field(default=None, max_length=32)
    recipe_generation_status: GenerationStatusValue | None = None
    ingredient_generation_status: GenerationStatusValue | None = None
    cooking_step_generation_status: GenerationStatusValue | None = None
    assembly_step_generation_status: GenerationStatusValue | None = None


class ReviewAuthor(BaseModel):
    id: int
    email: str | None = None
    firstname: str | None = None

    class Config:
        from_attributes = True


class ReviewedSession(BaseModel):
    id: int
    meal_count: int
    people_count: int
    recipes: list[Any]
    ingredients: list[Any]
    cooking_steps: list[Any]
    assembly_steps: list[Any]

    class Config:
        from_attributes = True


class SessionReviewOutput(BaseModel):
    id: int
    rating: int
    comment: str | None = None
    session_id: int
    created_by: int | None = None
    created_at: datetime
    user_profile: ReviewAuthor | None = None
    session: ReviewedSession | None = None

    class Config:
        from_attributes = True


# =============================================================================
# Advice Schemas
# =============================================================================


class AdviceArticleOutput(BaseModel):
    id: int
    title: Translations
    content: Translations
    is_featured: bool
    publication_state: str
    category_id: int
    cover_url: str | None = None
    missing_translations: list[str] = Field(default_factory=list)
    created_at: datetime

    class Config:
        from_attributes = True


class AdviceArticleCreate(BaseModel):
    title: Translations
    content: Translations = Field(default_factory=dict)
    is_featured: bool = False
    publication_state: Literal["draft", "published", "archived"] = PublicationState.DRAFT
    category_id: int
    cover_url: str | None = Field(default=None, max_length=Limits.MAX_URL_LENGTH)


class AdviceArticleUpdate(BaseModel):
    title: Translations | None = None
    content: Translations | None = None
    is_featured: bool | None = None
    publication_state: Literal["draft", "published", "archived"] | None = None
    category_id: int | None = None
    cover_url: str | None = Field(default=None, max_length=Limits.MAX_URL_LENGTH)


class AdviceCategoryOutput(BaseModel):
    id: int
    title: Translations
    short_title: Translations
    missing_translations: list[str] = Field(default_factory=list)
    created_at: datetime

    class Config:
        from_attributes = True


class AdviceCategoryCreate(BaseModel):
    title: Translations
    short_title: Translations = Field(default_factory=dict)


class AdviceCategoryUpdate(BaseModel):
    title: Translations | None = None
    short_title: Translations | None = None


class AdviceFaqOutput(BaseModel):
    id: int
    question: Translations
    answer: Translations
    missing_translations: list[str] = Field(default_factory=list)
    created_at: datetime

    class Config:
        from_attributes = True


class AdviceFaqCreate(BaseModel):
    question: Translations
    answer: Translations = Field(default_factory=dict)


class AdviceFaqUpdate(BaseModel):
    question: Translations | None = None
    answer: Translations | None = None


# =============================================================================
# Generic
# =============================================================================


class PaginatedOutput(BaseModel):
    items: list[Any]
    pagination: dict[str, Any]


class DeleteOutput(BaseModel):
    success: bool = True
    id: int
