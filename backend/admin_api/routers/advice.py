"""
Advice tab endpoints: articles, article categories and FAQ.

A search made only of digits matches an id.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from admin_api.repositories import AdviceArticleFilters, RepositoryFilters
from admin_api.routers._common import AdminIdentity, Pagination, current_admin, get_pagination, paginated
from admin_api.services.domain import (
    get_advice_article_service,
    get_advice_category_service,
    get_advice_faq_service,
)
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    AdviceArticleCreate,
    AdviceArticleOutput,
    AdviceArticleUpdate,
    AdviceCategoryCreate,
    AdviceCategoryOutput,
    AdviceCategoryUpdate,
    AdviceFaqCreate,
    AdviceFaqOutput,
    AdviceFaqUpdate,
    DeleteOutput,
    PaginatedOutput,
)


router = APIRouter(tags=["advice"])

TRANSLATION_HELP = "complete or incomplete"


# =============================================================================
# Articles
# =============================================================================


@router.get("/advice-articles", response_model=PaginatedOutput)
def list_advice_articles(
    search: str | None = Query(default=None, description="Article id or part of the French title"),
    category_id: int | None = Query(default=None),
    publication_state: str | None = Query(default=None, description="draft, published or archived"),
    is_featured: bool | None = Query(default=None),
    translation_filter: str | None = Query(default=None, description=TRANSLATION_HELP),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Articles, newest first."""
    filters = AdviceArticleFilters(
        limit=pagination.limit,
        offset=pagination.offset,
        search=search,
        category_id=category_id,
        publication_state=publication_state,
        is_featured=is_featured,
    )
    items, total = get_advice_article_service(db).list_page(filters, translation_filter)
    return paginated(items, total, pagination)


@router.get("/advice-articles/{article_id}", response_model=AdviceArticleOutput)
def get_advice_article(article_id: int, db: Session = Depends(get_db)) -> AdviceArticleOutput:
    return get_advice_article_service(db).get_by_id(article_id)


@router.post("/advice-articles", response_model=AdviceArticleOutput, status_code=status.HTTP_201_CREATED)
def create_advice_article(
    body: AdviceArticleCreate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> AdviceArticleOutput:
    return get_advice_article_service(db).create(body.model_dump(), admin.email)


@router.patch("/advice-articles/{article_id}", response_model=AdviceArticleOutput)
def update_advice_article(
    article_id: int,
    body: AdviceArticleUpdate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> AdviceArticleOutput:
    return get_advice_article_service(db).update(article_id, body.model_dump(exclude_unset=True), admin.email)


@router.delete("/advice-articles/{article_id}", response_model=DeleteOutput)
def delete_advice_article(
    article_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> DeleteOutput:
    get_advice_article_service(db).delete(article_id, admin.email)
    return DeleteOutput(id=article_id)


# =============================================================================
# Article categories
# =============================================================================


@router.get("/advice-categories", response_model=PaginatedOutput)
def list_advice_categories(
    search: str | None = Query(default=None),
    translation_filter: str | None = Query(default=None, description=TRANSLATION_HELP),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Categories ordered by French title."""
    filters = RepositoryFilters(limit=pagination.limit, offset=pagination.offset, search=search)
    items, total = get_advice_category_service(db).list_page(filters, translation_filter)
    return paginated(items, total, pagination)


@router.post("/advice-categories", response_model=AdviceCategoryOutput, status_code=status.HTTP_201_CREATED)
def create_advice_category(
    body: AdviceCategoryCreate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> AdviceCategoryOutput:
    return get_advice_category_service(db).create(body.model_dump(), admin.email)


@router.patch("/advice-categories/{category_id}", response_model=AdviceCategoryOutput)
def update_advice_category(
    category_id: int,
    body: AdviceCategoryUpdate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> AdviceCategoryOutput:
    return get_advice_category_service(db).update(
        category_id, body.model_dump(exclude_unset=True), admin.email
    )


@router.delete("/advice-categories/{category_id}", response_model=DeleteOutput)
def delete_advice_category(
    category_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> DeleteOutput:
    """Refused while the category holds articles."""
    get_advice_category_service(db).delete(category_id, admin.email)
    return DeleteOutput(id=category_id)


# =============================================================================
# FAQ
# =============================================================================


@router.get("/advice-faq", response_model=PaginatedOutput)
def list_advice_faq(
    search: str | None = Query(default=None, description="Entry id or part of the French question"),
    translation_filter: str | None = Query(default=None, description=TRANSLATION_HELP),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    filters = RepositoryFilters(limit=pagination.limit, offset=pagination.offset, search=search)
    items, total = get_advice_faq_service(db).list_page(filters, translation_filter)
    return paginated(items, total, pagination)


@router.post("/advice-faq", response_model=AdviceFaqOutput, status_code=status.HTTP_201_CREATED)
def create_advice_faq(
    body: AdviceFaqCreate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> AdviceFaqOutput:
    return get_advice_faq_service(db).create(body.model_dump(), admin.email)


@router.patch("/advice-faq/{faq_id}", response_model=AdviceFaqOutput)
def update_advice_faq(
    faq_id: int,
    body: AdviceFaqUpdate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> AdviceFaqOutput:
    return get_advice_faq_service(db).update(faq_id, body.model_dump(exclude_unset=True), admin.email)


@router.delete("/advice-faq/{faq_id}", response_model=DeleteOutput)
def delete_advice_faq(
    faq_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> DeleteOutput:
    get_advice_faq_service(db).delete(faq_id, admin.email)
    return DeleteOutput(id=faq_id)
