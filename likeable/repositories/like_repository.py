from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import asc, desc

from likeable.dao.sqlalchemy_dao import SQLAlchemyDAO
from likeable.models.like import Like
from likeable.repositories.base_repository import BaseRepository
from likeable.schemas.like import LikeFiltersDTO, LikePaginationDTO
from likeable.utils.exceptions import LikeValidationError

# JSON field name -> model attribute
FIELD_MAPPING = {
    "id": "id",
    "likerId": "liker_id",
    "likedId": "liked_id",
    "likeableId": "likeable_id",
    "likeable": "likeable",
    "ipAddress": "ip_address",
    "userAgent": "user_agent",
    "likedAt": "liked_at",
    "updatedAt": "updated_at",
    "createdAt": "created_at",
}


class LikeRepository(BaseRepository[Like]):
    model = Like
    dao_class = SQLAlchemyDAO

    async def create_like(self, like: Like) -> Like:
        return await self.insert_one(like)

    async def get_like(self, like_id: str) -> Like | None:
        return await self.find_by_id(like_id)

    async def touch_like(self, like: Like) -> Like:
        """Re-stamp liked_at and updated_at, nothing else"""
        now = datetime.now(UTC)
        like.liked_at = now
        like.updated_at = now
        return await self.update_one(like)

    async def delete_like(self, like_id: str) -> bool:
        return await self.delete_one(like_id)

    async def list_likes(
        self,
        filters: LikeFiltersDTO,
        pagination: LikePaginationDTO
    ) -> tuple[Sequence[Like], int | None]:
        conditions = [
            getattr(self.model, column) == value
            for column, value in filters.model_dump(exclude_none=True).items()
        ]

        return await self.find_page(
            conditions=conditions,
            order_by=self.order_clauses(pagination.order_by),
            limit=pagination.limit,
            offset=pagination.offset,
            include_count=pagination.include_count,
        )

    def order_clauses(self, order_by: Sequence[str]) -> list:
        clauses = []
        for field in order_by:
            direction = desc if field.startswith("-") else asc
            name = field.lstrip("-+")
            column = FIELD_MAPPING.get(name)
            if column is None:
                raise LikeValidationError(f"invalid order field: {name}")
            clauses.append(direction(getattr(self.model, column)))
        # Stable paging when the requested keys tie
        clauses.append(asc(self.model.id))
        return clauses
