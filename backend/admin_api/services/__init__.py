"""
Services module for business logic.

- base_service: BaseService / BaseCRUDService shared by every domain service
- domain/: Application services (business logic) - USE THESE

Usage:
    from admin_api.services.domain import RecipeService
    service = RecipeService(db)
    recipe = service.get_by_id(recipe_id)
"""

from .base_service import BaseService, BaseCRUDService

__all__ = ["BaseService", "BaseCRUDService"]
