"""
Advice Service - articles, article categories and FAQ entries of the advice tab.

Each entity has translated text fields. Listings accept the same
translation_filter as ingredients: an entry is complete when every
translated field has text in every configured language.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from admin_api.models import AdviceArticle, AdviceArticleCategory, AdviceFaq
from admin_api.repositories import (
    AdviceArticleCategoryRepository,
    AdviceArticleFilters,
    AdviceArticleRepository,
    AdviceFaqRepository,
    RepositoryFilters,
)
from admin_api.services.base_service import BaseCRUDService
from shared.config.constants import Limits, PublicationState, TranslationFilter
from shared.config.logging import get_logger
from shared.config.settings import get_settings
from shared.utils.admin_schemas import AdviceArticleOutput, AdviceCategoryOutput, AdviceFaqOutput
from shared.utils.exceptions import ConflictError, ValidationError
from shared.utils.i18n import clean_translations, missing_languages

logger = get_logger(__name__)


class TranslatedContentService(BaseCRUDService):
    """
    CRUD plus translation-aware listing.

    Subclasses set TRANSLATED_FIELDS; the first one must carry French text.
    """

    TRANSLATED_FIELDS: tuple[str, ...] = ()

    def __init__(self, db: Session, repo, output_schema, entity_name: str):
        super().__init__(db=db, repo=repo, output_schema=output_schema, entity_name=entity_name)
        self._languages = get_settings().translation_language_list

    # =========================================================================
    # Query Methods
    # =========================================================================

    def missing_translations(self, entity) -> list[str]:
        """Languages missing from at least one translated field."""
        missing: set[str] = set()
        for field_name in self.TRANSLATED_FIELDS:
            missing.update(missing_languages(getattr(entity, field_name), self._languages))
        return [language for language in self._languages if language in missing]

    def list_page(
        self,
        filters: RepositoryFilters,
        translation_filter: str | None = None,
    ) -> tuple[list[Any], int]:
        if translation_filter is None:
            rows = self._repo.find_all(filters)
            return [self.to_output(row) for row in rows], self._repo.count(filters)

        if translation_filter not in TranslationFilter.ALL:
            raise ValidationError(
                f"translation_filter must be one of {', '.join(TranslationFilter.ALL)}",
                translation_filter=translation_filter,
            )

        rows = self._repo.find_superset(filters, cap=Limits.MAX_SUPERSET_FETCH)
        if len(rows) >= Limits.MAX_SUPERSET_FETCH:
            logger.warning(
                "Translation filter hit the fetch cap; results are truncated",
                entity=self.entity_name,
                cap=Limits.MAX_SUPERSET_FETCH,
            )
        want_complete = translation_filter == TranslationFilter.COMPLETE
        matching = [row for row in rows if (not self.missing_translations(row)) == want_complete]
        page = matching[filters.offset:filters.offset + filters.limit]
        return [self.to_output(row) for row in page], len(matching)

    def to_output(self, entity):
        output = self._output_schema.model_validate(entity)
        output.missing_translations = self.missing_translations(entity)
        return output

    # =========================================================================
    # Validation Hooks
    # =========================================================================

    def _clean(self, data: dict[str, Any]) -> dict[str, Any]:
        for field_name in self.TRANSLATED_FIELDS:
            if field_name in data:
                data[field_name] = clean_translations(data[field_name])
        required = self.TRANSLATED_FIELDS[0]
        if required in data and not data[required].get("fr"):
            raise ValidationError(f"{required}.fr is required")
        return data

    def _validate_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data.setdefault(self.TRANSLATED_FIELDS[0], {})
        return self._clean(data)

    def _validate_update(self, entity, data: dict[str, Any]) -> dict[str, Any]:
        for field_name in self.TRANSLATED_FIELDS:
            if field_name in data and data[field_name] is None:
                data.pop(field_name)
        return self._clean(data)


class AdviceArticleService(TranslatedContentService):
    """
    Advice articles.

    Business rules:
    - title.fr is required
    - the category must exist
    - publication_state is draft, published or archived
    """

    TRANSLATED_FIELDS = ("title", "content")

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=AdviceArticleRepository(db),
            output_schema=AdviceArticleOutput,
            entity_name="Advice article",
        )

    def list_page(
        self,
        filters: AdviceArticleFilters,
        translation_filter: str | None = None,
    ) -> tuple[list[AdviceArticleOutput], int]:
        if filters.publication_state and filters.publication_state not in PublicationState.ALL:
            raise ValidationError(
                f"publication_state must be one of {', '.join(PublicationState.ALL)}",
                publication_state=filters.publication_state,
            )
        return super().list_page(filters, translation_filter)

    def _clean(self, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._clean(data)
        for field_name in ("is_featured", "publication_state", "category_id"):
            if field_name in data and data[field_name] is None:
                data.pop(field_name)

        category_id = data.get("category_id")
        if category_id is not None and self._db.get(AdviceArticleCategory, category_id) is None:
            raise ValidationError(f"Unknown advice category {category_id}", category_id=category_id)
        return data

    def _get_entity_info(self, entity: AdviceArticle) -> dict[str, Any]:
        return {"id": entity.id, "title": (entity.title or {}).get("fr")}


class AdviceCategoryService(TranslatedContentService):
    """Article categories. A category holding articles cannot be deleted."""

    TRANSLATED_FIELDS = ("title", "short_title")

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=AdviceArticleCategoryRepository(db),
            output_schema=AdviceCategoryOutput,
            entity_name="Advice category",
        )

    def _validate_delete(self, entity: AdviceArticleCategory) -> None:
        article_count = self._repo.count_articles(entity.id)
        if article_count:
            raise ConflictError(
                f"Advice category {entity.id} still holds {article_count} article(s)",
                category_id=entity.id,
            )


class AdviceFaqService(TranslatedContentService):
    TRANSLATED_FIELDS = ("question", "answer")

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=AdviceFaqRepository(db),
            output_schema=AdviceFaqOutput,
            entity_name="FAQ entry",
        )

    def _get_entity_info(self, entity: AdviceFaq) -> dict[str, Any]:
        return {"id": entity.id, "question": (entity.question or {}).get("fr")}


def get_advice_article_service(db: Session) -> AdviceArticleService:
    return AdviceArticleService(db)


def get_advice_category_service(db: Session) -> AdviceCategoryService:
    return AdviceCategoryService(db)


def get_advice_faq_service(db: Session) -> AdviceFaqService:
    return AdviceFaqService(db)
