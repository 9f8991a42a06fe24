import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class LikeCreateDTO(BaseModel):
    """DTO for registering a like"""
    likeable_id: str = Field(..., alias="likeableId", min_length=1, max_length=64, description="Target entity id")
    likeable: str = Field(..., min_length=1, max_length=255, description="Target entity type")
    liked_id: Optional[str] = Field(None, alias="likedId", max_length=64, description="Target person id, for user likes")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("likeable_id", "likeable")
    @classmethod
    def strip_required(cls, v):
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class LikeResponseDTO(BaseModel):
    id: uuid.UUID
    liker_id: Optional[str] = None
    liked_id: Optional[str] = None
    likeable_id: str
    likeable: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    liked_at: datetime
    updated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class LikeFiltersDTO(BaseModel):
    liker_id: Optional[str] = None
    liked_id: Optional[str] = None
    likeable_id: Optional[str] = None
    likeable: Optional[str] = None
    ip_address: Optional[str] = None


class LikePaginationDTO(BaseModel):
    """DTO for pagination and ordering"""
    page: int = Field(1, ge=1, le=10000, description="Page number")
    limit: int = Field(50, ge=1, description="Items per page")
    include_count: bool = Field(True, description="Whether to compute the total")
    order_by: List[str] = Field(default_factory=lambda: ["-likedAt"], description="Sort fields, '-' prefix for descending")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class LikeListResponseDTO(BaseModel):
    """DTO for response with like list"""
    likes: List[LikeResponseDTO]
    total: Optional[int] = None
    page: int
    limit: int
    total_pages: Optional[int] = None
    has_next: bool
    has_prev: bool

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
