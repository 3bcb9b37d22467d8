"""Base repository: generic lookups for ledger models."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from arthub.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository for fingerprint-keyed ledger models.

    Works on a caller-owned session (get_db); the caller decides
    transaction boundaries.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_model_by_fingerprint(self, fingerprint: str) -> ModelType | None:
        model: Any = self.model
        result = await self.db.execute(
            select(self.model).where(model.fingerprint == fingerprint)
        )
        return result.scalar_one_or_none()
