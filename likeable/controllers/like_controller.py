from typing import Optional

from fastapi import APIRouter, Query, status

from likeable.dependencies import ActorDep, LikeServiceDep, LikeableStateDep
from likeable.logger import logger
from likeable.schemas.like import (
    LikeCreateDTO,
    LikeFiltersDTO,
    LikeListResponseDTO,
    LikePaginationDTO,
    LikeResponseDTO,
)
from likeable.utils.exceptions import LikeableError, StoreError

router = APIRouter()


@router.get('', status_code=200, response_model=LikeListResponseDTO)
async def get_likes(
    like_service: LikeServiceDep,
    state: LikeableStateDep,
    page: int = Query(1, ge=1, le=10000, description="Page number"),
    limit: Optional[int] = Query(None, ge=1, description="Items per page"),
    count: bool = Query(True, description="Include the total count"),
    order_by: Optional[str] = Query(None, description="Comma separated fields, '-' prefix for descending"),
    liker_id: Optional[str] = Query(None, alias="likerId"),
    liked_id: Optional[str] = Query(None, alias="likedId"),
    likeable_id: Optional[str] = Query(None, alias="likeableId"),
    likeable: Optional[str] = Query(None),
    ip_address: Optional[str] = Query(None, alias="ipAddress"),
):
    """List likes with filters and pagination"""
    config = state.config
    order_fields = [field.strip() for field in (order_by or "").split(",") if field.strip()]
    try:
        filters = LikeFiltersDTO(
            liker_id=liker_id,
            liked_id=liked_id,
            likeable_id=likeable_id,
            likeable=likeable,
            ip_address=ip_address,
        )
        pagination = LikePaginationDTO(
            page=page,
            limit=min(limit or config.pagination_limit, config.max_pagination_limit),
            include_count=count,
            order_by=order_fields or ["-likedAt"],
        )
        return await like_service.list_likes(filters, pagination)
    except LikeableError:
        raise
    except Exception as e:
        logger.error(f"Error listing likes: {e}")
        raise StoreError() from e


@router.get('/{like_id}', status_code=200, response_model=LikeResponseDTO)
async def get_like(like_id: str, like_service: LikeServiceDep):
    """Get like by ID"""
    try:
        return await like_service.get_like(like_id)
    except LikeableError:
        raise
    except Exception as e:
        logger.error(f"Error getting like: {e}")
        raise StoreError() from e


@router.post('', status_code=status.HTTP_201_CREATED, response_model=LikeResponseDTO)
async def create_like(
    like_data: LikeCreateDTO,
    like_service: LikeServiceDep,
    actor: ActorDep,
):
    """Like a target as the current user, or anonymously"""
    try:
        return await like_service.create_like(like_data, actor)
    except LikeableError:
        raise
    except Exception as e:
        logger.error(f"Error creating like: {e}")
        raise StoreError() from e


@router.put('/{like_id}', status_code=200, response_model=LikeResponseDTO)
async def update_like(like_id: str, like_service: LikeServiceDep, actor: ActorDep):
    """Re-like: refresh likedAt"""
    try:
        return await like_service.update_like(like_id, actor)
    except LikeableError:
        raise
    except Exception as e:
        logger.error(f"Error updating like: {e}")
        raise StoreError() from e


@router.delete('/{like_id}', status_code=status.HTTP_204_NO_CONTENT)
async def delete_like(like_id: str, like_service: LikeServiceDep, actor: ActorDep):
    """Remove a like permanently"""
    try:
        await like_service.delete_like(like_id, actor)
    except LikeableError:
        raise
    except Exception as e:
        logger.error(f"Error deleting like: {e}")
        raise StoreError() from e
