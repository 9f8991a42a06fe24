from abc import ABC
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from likeable.dao.base_dao import BaseDAO

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Binds a model to its DAO; subclasses add the domain queries"""
    model: type[T] = None
    dao_class: type[BaseDAO] = BaseDAO

    def __init__(self, db: AsyncSession):
        self.dao = self.dao_class(self.model, db)

    async def find_by_id(self, _id: Any) -> T | None:
        return await self.dao.find_by_id(_id)

    async def find_page(
        self,
        conditions: Sequence[Any],
        order_by: Sequence[Any],
        limit: int,
        offset: int,
        include_count: bool = True,
    ) -> tuple[Sequence[T], int | None]:
        return await self.dao.find_paginated(
            conditions=conditions,
            order_by=order_by,
            limit=limit,
            offset=offset,
            include_count=include_count,
        )

    async def insert_one(self, obj: T) -> T:
        return await self.dao.insert_one(obj)

    async def update_one(self, obj: T) -> T:
        return await self.dao.update_one(obj)

    async def delete_one(self, _id: Any) -> bool:
        return await self.dao.delete_one(_id)
