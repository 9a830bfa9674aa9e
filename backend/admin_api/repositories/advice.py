"""
Advice Repositories - articles, article categories and FAQ entries.

A search made only of digits matches an id; anything else is matched
against the French text.
"""

from dataclasses import dataclass

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from admin_api.models import AdviceArticle, AdviceArticleCategory, AdviceFaq
from shared.utils.validators import escape_like_pattern
from .base import BaseRepository, RepositoryFilters
from .ingredient import french_name


def search_by_id_or_french(query: Select, model, column, search: str | None) -> Select:
    if not search:
        return query
    if search.isdigit():
        return query.where(model.id == int(search))
    pattern = f"%{escape_like_pattern(search)}%"
    return query.where(french_name(column).ilike(pattern, escape="\\"))


@dataclass
class AdviceArticleFilters(RepositoryFilters):
    category_id: int | None = None
    publication_state: str | None = None
    is_featured: bool | None = None


class AdviceArticleRepository(BaseRepository[AdviceArticle]):
    """Repository for AdviceArticle entities, newest first."""

    @property
    def model(self) -> type[AdviceArticle]:
        return AdviceArticle

    def _base_query(self) -> Select:
        return select(AdviceArticle).order_by(AdviceArticle.created_at.desc(), AdviceArticle.id.desc())

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, AdviceArticleFilters):
            filters = AdviceArticleFilters(**filters.__dict__)

        query = search_by_id_or_french(query, AdviceArticle, AdviceArticle.title, filters.search)

        if filters.category_id is not None:
            query = query.where(AdviceArticle.category_id == filters.category_id)

        if filters.publication_state:
            query = query.where(AdviceArticle.publication_state == filters.publication_state)

        if filters.is_featured is not None:
            query = query.where(AdviceArticle.is_featured == filters.is_featured)

        return query


class AdviceArticleCategoryRepository(BaseRepository[AdviceArticleCategory]):
    """Article categories ordered by French title."""

    @property
    def model(self) -> type[AdviceArticleCategory]:
        return AdviceArticleCategory

    def _base_query(self) -> Select:
        return select(AdviceArticleCategory).order_by(
            french_name(AdviceArticleCategory.title), AdviceArticleCategory.id
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        return search_by_id_or_french(
            query, AdviceArticleCategory, AdviceArticleCategory.title, filters.search
        )

    def count_articles(self, category_id: int) -> int:
        return AdviceArticleRepository(self._db).count(AdviceArticleFilters(category_id=category_id))


class AdviceFaqRepository(BaseRepository[AdviceFaq]):
    @property
    def model(self) -> type[AdviceFaq]:
        return AdviceFaq

    def _base_query(self) -> Select:
        return select(AdviceFaq).order_by(AdviceFaq.created_at.desc(), AdviceFaq.id.desc())

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        return search_by_id_or_french(query, AdviceFaq, AdviceFaq.question, filters.search)


def get_advice_article_repository(db: Session) -> AdviceArticleRepository:
    return AdviceArticleRepository(db)


def get_advice_article_category_repository(db: Session) -> AdviceArticleCategoryRepository:
    return AdviceArticleCategoryRepository(db)


def get_advice_faq_repository(db: Session) -> AdviceFaqRepository:
    return AdviceFaqRepository(db)
