from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class BaseDAO(ABC, Generic[T]):
    """Generic CRUD data access contract"""

    @abstractmethod
    async def find_by_id(self, _id: Any) -> T | None: ...

    @abstractmethod
    async def find_paginated(
        self,
        conditions: Sequence[Any],
        order_by: Sequence[Any],
        limit: int,
        offset: int,
        include_count: bool = True,
    ) -> tuple[Sequence[T], int | None]: ...

    @abstractmethod
    async def insert_one(self, obj: T) -> T: ...

    @abstractmethod
    async def update_one(self, obj: T) -> T: ...

    @abstractmethod
    async def delete_one(self, _id: Any) -> bool: ...
