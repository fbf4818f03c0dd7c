"""Base repository for common CRUD operations."""

from __future__ import annotations

from typing import Any, Generic, Type, TypeVar

from tortoise.models import Model

ModelType = TypeVar("ModelType", bound=Model)


class BaseRepository(Generic[ModelType]):
    """Generic repository with basic CRUD methods."""

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, pk: int) -> ModelType | None:
        """Get a model instance by its primary key."""
        return await self.model.get_or_none(id=pk)

    async def update_or_create(
        self, defaults: dict[str, Any] | None = None, **kwargs: Any
    ) -> tuple[ModelType, bool]:
        """Update the instance matching ``kwargs`` or create it, atomically."""
        return await self.model.update_or_create(defaults=defaults, **kwargs)

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new model instance."""
        return await self.model.create(**kwargs)

    async def update(self, instance: ModelType, **changes: Any) -> ModelType:
        """Apply ``changes`` to an instance and persist them."""
        instance.update_from_dict(changes)
        await instance.save()
        return instance
