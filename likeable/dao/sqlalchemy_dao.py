from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from likeable.dao.base_dao import BaseDAO
from likeable.logger import logger

T = TypeVar("T")


class SQLAlchemyDAO(BaseDAO[T], Generic[T]):
    def __init__(self, model: type[T], db: AsyncSession):
        self.model = model
        self.db = db

    async def find_by_id(self, _id: Any) -> T | None:
        # populate_existing so server-side defaults are read back, not served from the identity map
        query = (
            select(self.model)
            .where(self.model.id == _id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalars().first()

    async def find_paginated(
        self,
        conditions: Sequence[Any],
        order_by: Sequence[Any],
        limit: int,
        offset: int,
        include_count: bool = True,
    ) -> tuple[Sequence[T], int | None]:
        query = select(self.model)
        if conditions:
            query = query.where(*conditions)

        total_count = None
        if include_count:
            count_query = select(func.count()).select_from(self.model)
            if conditions:
                count_query = count_query.where(*conditions)
            count_result = await self.db.execute(count_query)
            total_count = count_result.scalar() or 0

        query = query.order_by(*order_by).offset(offset).limit(limit)
        result = await self.db.execute(query)
        return result.scalars().all(), total_count

    async def insert_one(self, obj: T) -> T:
        try:
            self.db.add(obj)
            await self.db.commit()
            logger.info(f"Inserted new {self.model.__name__} with ID: {obj.id}")
            return obj
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error while inserting {self.model.__name__}: {e}")
            raise

    async def update_one(self, obj: T) -> T:
        try:
            await self.db.commit()
            logger.info(f"Updated {self.model.__name__} with ID: {obj.id}")
            return obj
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error while updating {self.model.__name__}: {e}")
            raise

    async def delete_one(self, _id: Any) -> bool:
        try:
            obj = await self.db.get(self.model, _id)
            if not obj:
                logger.error(f"{self.model.__name__} with ID: {_id} not found")
                return False

            await self.db.delete(obj)
            await self.db.commit()
            logger.info(f"Deleted {self.model.__name__} with ID: {_id}")
            return True
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error deleting {self.model.__name__}: {e}")
            raise
