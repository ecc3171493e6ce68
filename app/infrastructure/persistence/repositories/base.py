"""Base repository: generic get/create/update/delete over one model."""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository bound to a session and a model.

    Writes flush but never commit; the session owner (request dependency
    or background scope) decides when to commit.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and load server defaults."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush changes on an attached record and reload it."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update_fields(self, entity_id: str, **values: Any) -> ModelType | None:
        """Set attributes on the record with this id; None if it does not exist."""
        obj = await self.get_by_id(entity_id)
        if obj is None:
            return None
        for key, value in values.items():
            setattr(obj, key, value)
        return await self.update(obj)

    async def update_where(self, *criteria: Any, **values: Any) -> int:
        """Single UPDATE ... WHERE; returns the number of rows changed.

        Used for compare-and-swap transitions: put the expected state in
        criteria and check the returned count.
        """
        if hasattr(self.model, "updated_at"):
            values.setdefault("updated_at", func.now())
        result = await self.db.execute(
            update(self.model).where(*criteria).values(**values)
        )
        return result.rowcount or 0

    async def delete(self, obj: ModelType) -> None:
        await self.db.delete(obj)
        await self.db.flush()

    async def count(self, *criteria: Any) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(self.model).where(*criteria)
        )
        return int(result.scalar_one())
