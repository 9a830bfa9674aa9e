"""
Centralized constants for the backend application.
Avoid magic strings and repeated constants.

Usage:
    from shared.config.constants import DishType, Limits, ReferenceTables

    if recipe.dish_type == DishType.DESSERT:
        ...

    if table not in ReferenceTables.ALL:
        ...
"""

from typing import Final


# =============================================================================
# Bitmask Limits
# =============================================================================


class BitLimits:
    """
    Bit positions usable in a mask column.

    Masks live in signed 32-bit integer columns, so bit 31 is left alone.
    """

    MIN_BIT_INDEX: Final[int] = 0
    MAX_BIT_INDEX: Final[int] = 30
    BIT_COUNT: Final[int] = MAX_BIT_INDEX - MIN_BIT_INDEX + 1
    # Widest storable mask: every usable bit set
    MAX_MASK: Final[int] = (1 << (MAX_BIT_INDEX + 1)) - 1


class ReferenceTables:
    """Names of the bit-indexed reference tables exposed by the API."""

    ALLERGIES: Final[str] = "allergies"
    DIETS: Final[str] = "diets"
    KITCHEN_EQUIPMENTS: Final[str] = "kitchen_equipments"
    SEASONALITY: Final[str] = "seasonality"
    SEARCH_NAMESPACES: Final[str] = "ingredient_search_namespaces"

    ALL: Final[list[str]] = [ALLERGIES, DIETS, KITCHEN_EQUIPMENTS, SEASONALITY, SEARCH_NAMESPACES]


# =============================================================================
# Recipe Constants
# =============================================================================


class DishType:
    """Recipe dish type codes."""

    STARTER: Final[int] = 1
    MAIN: Final[int] = 2
    DESSERT: Final[int] = 3

    ALL: Final[list[int]] = [STARTER, MAIN, DESSERT]
    LABELS: Final[dict[int, str]] = {STARTER: "Entrée", MAIN: "Plat", DESSERT: "Dessert"}


class QuantificationType:
    """How recipe quantities scale."""

    PER_PERSON: Final[int] = 1
    PER_UNIT: Final[int] = 2

    ALL: Final[list[int]] = [PER_PERSON, PER_UNIT]


class IngredientUnit:
    """Closed list of units accepted on a recipe ingredient line."""

    ALL: Final[list[str]] = [
        "g", "kg", "ml", "cl", "l",
        "càs", "càc", "cup",
        "pièce", "tranche", "feuille", "gousse",
        "poignée", "pincée", "bouquet", "botte", "brin",
    ]


# =============================================================================
# Ingredient Relations
# =============================================================================


class RelationType:
    """Ingredient relation kinds."""

    FAMILY: Final[str] = "family"
    SUBSTITUTE: Final[str] = "substitute"

    ALL: Final[list[str]] = [FAMILY, SUBSTITUTE]


class TranslationFilter:
    """Ingredient translation completeness filter values."""

    COMPLETE: Final[str] = "complete"
    INCOMPLETE: Final[str] = "incomplete"

    ALL: Final[list[str]] = [COMPLETE, INCOMPLETE]


# =============================================================================
# Batch Cooking Sessions & Advice
# =============================================================================


class GenerationStatus:
    """Progress of each generated part of a batch cooking session."""

    PENDING: Final[str] = "pending"
    PROCESSING: Final[str] = "processing"
    COMPLETED: Final[str] = "completed"
    FAILED: Final[str] = "failed"

    ALL: Final[list[str]] = [PENDING, PROCESSING, COMPLETED, FAILED]


class PublicationState:
    """Lifecycle of an advice article."""

    DRAFT: Final[str] = "draft"
    PUBLISHED: Final[str] = "published"
    ARCHIVED: Final[str] = "archived"

    ALL: Final[list[str]] = [DRAFT, PUBLISHED, ARCHIVED]


# =============================================================================
# Recipe Categories
# =============================================================================


class CategoryZone:
    """Layout zones a recipe category can be displayed in."""

    CHIPS: Final[str] = "chips"
    SECTIONS: Final[str] = "sections"

    ALL: Final[list[str]] = [CHIPS, SECTIONS]


class DynamicCategoryType:
    """Kinds of categories whose recipes are computed by the app."""

    SEASONALITY: Final[str] = "seasonality"
    USER_RECOMMENDATIONS: Final[str] = "user_recommendations"

    ALL: Final[list[str]] = [SEASONALITY, USER_RECOMMENDATIONS]


# =============================================================================
# Promo Codes & Subscriptions
# =============================================================================


class PromoDuration:
    """Premium durations a promo code can grant."""

    ONE_MONTH: Final[str] = "1_month"
    ONE_YEAR: Final[str] = "1_year"

    ALL: Final[list[str]] = [ONE_MONTH, ONE_YEAR]
    DAYS: Final[dict[str, int]] = {ONE_MONTH: 30, ONE_YEAR: 365}

    # Codes granting fewer days than this are labelled as monthly
    MONTH_LABEL_THRESHOLD_DAYS: Final[int] = 35
    MONTH_LABEL: Final[str] = "1 mois"
    YEAR_LABEL: Final[str] = "1 an"


class PromoCodeStatus:
    """Promo code listing filter values."""

    ALL_CODES: Final[str] = "all"
    USED: Final[str] = "used"
    UNUSED: Final[str] = "unused"

    ALL: Final[list[str]] = [ALL_CODES, USED, UNUSED]


class PromoCodeFormat:
    """Shape of generated promo codes."""

    LENGTH: Final[int] = 8
    ALPHABET: Final[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


class SubscriptionAction:
    """Actions an admin can apply to a user's premium subscription."""

    ADD_1_MONTH: Final[str] = "add_1_month"
    ADD_1_YEAR: Final[str] = "add_1_year"
    CUSTOM_DATE: Final[str] = "custom_date"

    ALL: Final[list[str]] = [ADD_1_MONTH, ADD_1_YEAR, CUSTOM_DATE]
    DAYS: Final[dict[str, int]] = {ADD_1_MONTH: 30, ADD_1_YEAR: 365}


# =============================================================================
# Onboarding Answers
# =============================================================================


class OnboardingLabels:
    """Display labels for the onboarding questionnaire answers."""

    FREQUENCY: Final[dict[int, str]] = {
        0: "Jamais / Rarement",
        1: "1 fois par semaine",
        2: "2 fois par semaine",
        3: "3+ fois par semaine",
    }
    APPETITE: Final[dict[str, str]] = {
        "0": "Petit appetit",
        "1": "Appetit normal",
        "2": "Grand appetit",
    }
    GOALS: Final[dict[int, str]] = {
        0: "Economiser de l'argent",
        1: "Gagner du temps",
        2: "Manger sain",
        3: "Liberer la charge mentale",
    }
    HOUSEHOLD_SIZES: Final[list[int]] = list(range(1, 11))


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 200
    MAX_EMOJI_LENGTH: Final[int] = 16
    MAX_URL_LENGTH: Final[int] = 2048
    MAX_SEARCH_TERM_LENGTH: Final[int] = 100

    # Pagination defaults
    DEFAULT_PAGE_SIZE: Final[int] = 50
    MAX_PAGE_SIZE: Final[int] = 200

    # Rows fetched when a filter has to run in Python after the query
    MAX_SUPERSET_FETCH: Final[int] = 1000

    # Ingredient relations
    DEFAULT_RELATION_DEPTH: Final[int] = 3
    MAX_RELATION_DEPTH: Final[int] = 10

    # Recipes
    MIN_SERVINGS: Final[int] = 1
    MAX_SERVINGS: Final[int] = 50

    # Statistics
    REGISTRATION_MONTHS: Final[int] = 12


# =============================================================================
# Admin Identity
# =============================================================================


class AdminHeaders:
    """Headers forwarded by the auth proxy in front of the API."""

    ADMIN_ID: Final[str] = "X-Admin-Id"
    ADMIN_EMAIL: Final[str] = "X-Admin-Email"
