"""
Base Service Classes.

Provides abstract base classes for application services that:
- Use a Repository for data access (not direct queries)
- Convert entities to output schemas
- Handle business rules and commits

Architecture:
    Router (thin) → Service (business logic) → Repository (data access) → Model

Usage:
    from admin_api.services.base_service import BaseCRUDService

    class IngredientCategoryService(BaseCRUDService[IngredientCategory, IngredientCategoryOutput]):
        def __init__(self, db: Session):
            super().__init__(
                db=db,
                repo=IngredientCategoryRepository(db),
                output_schema=IngredientCategoryOutput,
                entity_name="Ingredient category",
            )
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, Type

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from admin_api.models import Base
from admin_api.repositories.base import BaseRepository
from shared.infrastructure.db import safe_commit
from shared.config.logging import get_logger
from shared.utils.exceptions import ConflictError, DatabaseError, NotFoundError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
OutputT = TypeVar("OutputT", bound=BaseModel)


class BaseService(Generic[ModelT]):
    """
    Base service for domain operations.

    Holds the session and the repository; subclasses add the rules.
    """

    def __init__(self, db: Session, repo: BaseRepository[ModelT]):
        self._db = db
        self._repo = repo

    @property
    def db(self) -> Session:
        """Database session."""
        return self._db

    @property
    def repo(self) -> BaseRepository[ModelT]:
        """Repository for data access."""
        return self._repo

    def _commit(self, operation: str, **log_context: Any) -> None:
        """
        Commit the unit of work.

        Raises:
            ConflictError: A unique or check constraint rejected the change.
            DatabaseError: Any other database failure.
        """
        try:
            safe_commit(self._db)
        except IntegrityError as e:
            raise ConflictError(
                f"{operation} conflicts with existing data",
                error=str(e.orig),
                **log_context,
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to {operation}", error=str(e), **log_context)
            raise DatabaseError(operation, **log_context)


class BaseCRUDService(BaseService[ModelT], Generic[ModelT, OutputT]):
    """
    Base service for entities with CRUD operations.

    Provides standard CRUD methods that can be overridden for
    custom business logic. Uses the Repository for all data access.
    """

    def __init__(
        self,
        db: Session,
        repo: BaseRepository[ModelT],
        output_schema: Type[OutputT],
        entity_name: str,
    ):
        super().__init__(db, repo)
        self._output_schema = output_schema
        self._entity_name = entity_name

    @property
    def entity_name(self) -> str:
        """Human-readable entity name for messages."""
        return self._entity_name

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_entity(self, entity_id: int) -> ModelT:
        """
        Get raw entity (for internal use).

        Raises:
            NotFoundError: If entity not found.
        """
        entity = self._repo.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self._entity_name, entity_id)
        return entity

    def get_by_id(self, entity_id: int) -> OutputT:
        return self.to_output(self.get_entity(entity_id))

    def list_all(self) -> list[OutputT]:
        """Every entity in the repository's default order."""
        return [self.to_output(e) for e in self._repo.find_every()]

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(self, data: dict[str, Any], user_email: str | None = None) -> OutputT:
        """
        Create new entity.

        Raises:
            ValidationError: If data is invalid.
            ConflictError: If a unique constraint is violated.
        """
        data = self._validate_create(data)

        entity = self._repo.model(**data)
        entity.updated_by_email = user_email
        self._db.add(entity)
        self._commit(f"create {self._entity_name.lower()}")
        self._db.refresh(entity)

        logger.info(f"{self._entity_name} created", entity_id=entity.id, admin=user_email)
        self._after_create(entity)
        return self.to_output(entity)

    def update(self, entity_id: int, data: dict[str, Any], user_email: str | None = None) -> OutputT:
        """
        Update existing entity with the given fields only.

        Raises:
            NotFoundError: If entity not found.
            ValidationError: If data is invalid.
        """
        entity = self.get_entity(entity_id)
        data = self._validate_update(entity, data)

        for field_name, value in data.items():
            if hasattr(entity, field_name):
                setattr(entity, field_name, value)
        entity.set_updated_by(user_email)

        self._commit(f"update {self._entity_name.lower()}", entity_id=entity_id)
        self._db.refresh(entity)
        return self.to_output(entity)

    def delete(self, entity_id: int, user_email: str | None = None) -> None:
        """
        Hard delete entity.

        Raises:
            NotFoundError: If entity not found.
            ConflictError: If the entity is still referenced.
        """
        entity = self.get_entity(entity_id)
        self._validate_delete(entity)
        entity_info = self._get_entity_info(entity)

        self._repo.delete(entity)
        self._commit(f"delete {self._entity_name.lower()}", entity_id=entity_id)

        logger.info(f"{self._entity_name} deleted", entity_id=entity_id, admin=user_email)
        self._after_delete(entity_info)

    # =========================================================================
    # Transformation
    # =========================================================================

    def to_output(self, entity: ModelT) -> OutputT:
        """
        Convert entity to output DTO.

        Override this method for custom transformation logic.
        """
        return self._output_schema.model_validate(entity)

    # =========================================================================
    # Validation Hooks (override in subclasses)
    # =========================================================================

    def _validate_create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Validate (and possibly complete) data before create."""
        return data

    def _validate_update(self, entity: ModelT, data: dict[str, Any]) -> dict[str, Any]:
        """Validate data before update."""
        return data

    def _validate_delete(self, entity: ModelT) -> None:
        """Validate before delete. Override to check for dependent rows."""
        pass

    # =========================================================================
    # Lifecycle Hooks (override in subclasses)
    # =========================================================================

    def _after_create(self, entity: ModelT) -> None:
        pass

    def _after_delete(self, entity_info: dict[str, Any]) -> None:
        pass

    def _get_entity_info(self, entity: ModelT) -> dict[str, Any]:
        """Entity info kept before deletion for logging."""
        return {"id": entity.id}
