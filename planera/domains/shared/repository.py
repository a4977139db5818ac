"""Generic async repository shared by every domain.

Repositories flush but never commit; the owning service decides when a
unit of work ends.
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import Select, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.exceptions import NotFoundError
from planera.infra.database import Base

# Type variables for generic repository
ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


def _as_dict(data: BaseModel | dict[str, Any]) -> dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    return data


class GenericRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Standard CRUD operations over one SQLAlchemy model.

    Type Parameters:
        ModelType: The SQLAlchemy model class
        CreateSchemaType: Pydantic schema for creation
        UpdateSchemaType: Pydantic schema for updates

    Example:
        class TravelerRepository(GenericRepository[Traveler, TravelerCreate, TravelerUpdate]):
            def __init__(self, session: AsyncSession):
                super().__init__(Traveler, session)
    """

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        self._model = model
        self._session = session

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        return self._session

    @property
    def model(self) -> type[ModelType]:
        """Get the model class."""
        return self._model

    # ==================== CREATE Operations ====================

    async def create(self, data: CreateSchemaType | dict[str, Any]) -> ModelType:
        """Create a new record.

        Args:
            data: Pydantic schema or dict with creation data

        Returns:
            The created model instance
        """
        db_obj = self._model(**_as_dict(data))
        self._session.add(db_obj)
        await self._session.flush()
        await self._session.refresh(db_obj)
        return db_obj

    # ==================== READ Operations ====================

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """Get a record by its ID, or None."""
        result = await self._session.execute(
            select(self._model).where(self._model.id == id)
        )
        return result.scalar_one_or_none()

    async def get_owned(self, id: UUID, user_id: UUID) -> ModelType:
        """Get a record that belongs to ``user_id``.

        Records owned by someone else are reported as missing.

        Raises:
            NotFoundError: If the record is absent or not owned by the user
        """
        obj = await self.find_one(self._model.id == id, self._model.user_id == user_id)
        if obj is None:
            raise NotFoundError(f"{self._model.__name__} not found")
        return obj

    async def find_one(self, *conditions: Any) -> ModelType | None:
        """Find a single record matching the conditions."""
        result = await self._session.execute(select(self._model).where(*conditions))
        return result.scalars().first()

    async def find_many(
        self,
        *conditions: Any,
        skip: int = 0,
        limit: int = 100,
        order_by: Any | None = None,
    ) -> Sequence[ModelType]:
        """Find multiple records matching the conditions.

        Args:
            *conditions: SQLAlchemy filter conditions
            skip: Number of records to skip (offset)
            limit: Maximum number of records to return
            order_by: Column or list of columns; newest first when omitted

        Returns:
            Sequence of model instances
        """
        stmt = select(self._model)
        if conditions:
            stmt = stmt.where(*conditions)
        stmt = self._apply_ordering(stmt, order_by).offset(skip).limit(limit)
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def count(self, *conditions: Any) -> int:
        """Count records matching the conditions."""
        stmt = select(func.count()).select_from(self._model)
        if conditions:
            stmt = stmt.where(*conditions)
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    # ==================== UPDATE Operations ====================

    async def apply(
        self,
        db_obj: ModelType,
        data: UpdateSchemaType | dict[str, Any],
    ) -> ModelType:
        """Copy the set fields of ``data`` onto a loaded record.

        Args:
            db_obj: The record to modify
            data: Pydantic schema or dict with update data

        Returns:
            The refreshed record
        """
        for field, value in _as_dict(data).items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        await self._session.flush()
        await self._session.refresh(db_obj)
        return db_obj

    async def update_many(self, *conditions: Any, data: dict[str, Any]) -> int:
        """Update every record matching the conditions.

        Returns:
            Number of updated records
        """
        stmt = update(self._model).where(*conditions).values(**data)
        result = await self._session.execute(stmt)
        return result.rowcount

    # ==================== DELETE Operations ====================

    async def remove(self, db_obj: ModelType) -> None:
        """Delete a loaded record."""
        await self._session.delete(db_obj)
        await self._session.flush()

    async def delete_many(self, *conditions: Any) -> int:
        """Delete every record matching the conditions.

        Returns:
            Number of deleted records
        """
        result = await self._session.execute(delete(self._model).where(*conditions))
        return result.rowcount

    # ==================== Helper Methods ====================

    def _apply_ordering(
        self,
        stmt: Select[tuple[ModelType]],
        order_by: Any | None,
    ) -> Select[tuple[ModelType]]:
        if order_by is None:
            return stmt.order_by(self._model.created_at.desc())
        if isinstance(order_by, (list, tuple)):
            return stmt.order_by(*order_by)
        return stmt.order_by(order_by)

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self._session.commit()
