import uuid
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from likeable.config import USER_LIKEABLE, LikeableConfig
from likeable.logger import logger
from likeable.models.like import Like
from likeable.repositories.like_repository import LikeRepository
from likeable.schemas.like import (
    LikeCreateDTO,
    LikeFiltersDTO,
    LikeListResponseDTO,
    LikePaginationDTO,
    LikeResponseDTO,
)
from likeable.services.like.authorization import AllowAll, Authorizer, LikeAction
from likeable.services.like.conflicts import StoreOutcome, classify_store_error
from likeable.services.like.identity import Actor, AnonymousActor, AuthenticatedActor
from likeable.utils.exceptions import (
    AuthenticationRequiredError,
    LikeConflictError,
    LikeNotFoundError,
    LikeValidationError,
    StoreError,
)


def validate_like_request(like_data: LikeCreateDTO, config: LikeableConfig) -> None:
    """Check the target type against the plugin options, no side effects"""
    if like_data.likeable == USER_LIKEABLE:
        if not config.enable_user_likes:
            raise LikeValidationError("user likes are not enabled")
        if like_data.liked_id is None or not like_data.liked_id.strip():
            raise LikeValidationError("likedId is required when liking a user")
    elif not config.is_allowed_type(like_data.likeable):
        raise LikeValidationError("likeable type is not allowed")


def build_like(like_data: LikeCreateDTO, actor: Actor) -> Like:
    like = Like(
        id=str(uuid.uuid4()),
        likeable_id=like_data.likeable_id,
        likeable=like_data.likeable,
        liked_id=like_data.liked_id,
        liked_at=datetime.now(UTC),
    )
    if isinstance(actor, AuthenticatedActor):
        like.liker_id = actor.liker_id
    else:
        like.ip_address = actor.ip_address
        like.user_agent = actor.user_agent
    return like


class LikeService:
    def __init__(self, db: AsyncSession, config: LikeableConfig, authorizer: Authorizer | None = None):
        self.like_repository = LikeRepository(db)
        self.config = config
        self.authorizer = authorizer or AllowAll()

    def _require_actor(self, actor: Actor) -> None:
        if self.config.require_auth and isinstance(actor, AnonymousActor):
            raise AuthenticationRequiredError()

    async def create_like(self, like_data: LikeCreateDTO, actor: Actor) -> LikeResponseDTO:
        """Register a like; the store's unique indexes reject duplicates"""
        self._require_actor(actor)
        validate_like_request(like_data, self.config)

        like = build_like(like_data, actor)
        await self.authorizer.authorize(LikeAction.CREATE, actor, like)

        try:
            await self.like_repository.create_like(like)
        except SQLAlchemyError as e:
            if classify_store_error(e) == StoreOutcome.CONFLICT:
                logger.info(f"Duplicate like on {like.likeable}:{like.likeable_id} rejected")
                raise LikeConflictError() from e
            raise StoreError() from e

        try:
            created = await self.like_repository.get_like(like.id)
        except SQLAlchemyError as e:
            logger.warning(f"Could not re-read like {like.id}, returning inserted row: {e}")
            created = None

        return LikeResponseDTO.model_validate(created or like)

    async def _find_like(self, like_id: str) -> Like:
        try:
            normalized = str(uuid.UUID(like_id))
        except ValueError:
            raise LikeNotFoundError()

        like = await self.like_repository.get_like(normalized)
        if like is None:
            raise LikeNotFoundError()
        return like

    async def get_like(self, like_id: str) -> LikeResponseDTO:
        like = await self._find_like(like_id)
        return LikeResponseDTO.model_validate(like)

    async def list_likes(
        self,
        filters: LikeFiltersDTO,
        pagination: LikePaginationDTO
    ) -> LikeListResponseDTO:
        try:
            likes, total = await self.like_repository.list_likes(filters, pagination)
        except SQLAlchemyError as e:
            raise StoreError() from e

        total_pages = None
        if total is not None:
            total_pages = (total + pagination.limit - 1) // pagination.limit
            has_next = pagination.page < total_pages
        else:
            has_next = len(likes) == pagination.limit

        return LikeListResponseDTO(
            likes=[LikeResponseDTO.model_validate(like) for like in likes],
            total=total,
            page=pagination.page,
            limit=pagination.limit,
            total_pages=total_pages,
            has_next=has_next,
            has_prev=pagination.page > 1,
        )

    async def update_like(self, like_id: str, actor: Actor) -> LikeResponseDTO:
        """Re-like: only liked_at and updated_at move"""
        self._require_actor(actor)
        like = await self._find_like(like_id)

        await self.authorizer.authorize(LikeAction.UPDATE, actor, like)

        try:
            like = await self.like_repository.touch_like(like)
        except SQLAlchemyError as e:
            raise StoreError() from e
        return LikeResponseDTO.model_validate(like)

    async def delete_like(self, like_id: str, actor: Actor) -> None:
        self._require_actor(actor)
        like = await self._find_like(like_id)

        await self.authorizer.authorize(LikeAction.DELETE, actor, like)

        try:
            deleted = await self.like_repository.delete_like(like.id)
        except SQLAlchemyError as e:
            raise StoreError() from e
        if not deleted:
            raise LikeNotFoundError()
