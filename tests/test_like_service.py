import pytest
from sqlalchemy.exc import OperationalError

from likeable.config import load_config
from likeable.schemas.like import LikeCreateDTO, LikeFiltersDTO, LikePaginationDTO
from likeable.services.like import AnonymousActor, AuthenticatedActor, LikeService
from likeable.utils.exceptions import (
    AuthenticationRequiredError,
    LikeConflictError,
    LikeNotFoundError,
    LikeValidationError,
    StoreError,
)

from .conftest import DEFAULT_OPTIONS

ALICE = AuthenticatedActor(liker_id="alice")
ANONYMOUS = AnonymousActor(ip_address="1.2.3.4", user_agent="curl/8")


@pytest.fixture
def like_service(db_session):
    return LikeService(db_session, load_config(DEFAULT_OPTIONS))


def post_like(likeable_id="post-1"):
    return LikeCreateDTO(likeableId=likeable_id, likeable="post")


class TestCreate:
    """Test the like creation flow."""

    @pytest.mark.asyncio
    async def test_create_returns_stored_row(self, like_service):
        like = await like_service.create_like(post_like(), ALICE)

        assert like.liker_id == "alice"
        assert like.created_at is not None

    @pytest.mark.asyncio
    async def test_duplicate_is_conflict(self, like_service):
        await like_service.create_like(post_like(), ALICE)

        with pytest.raises(LikeConflictError):
            await like_service.create_like(post_like(), ALICE)

    @pytest.mark.asyncio
    async def test_session_usable_after_conflict(self, like_service):
        """A rejected insert rolls back and leaves the session usable."""
        await like_service.create_like(post_like(), ANONYMOUS)
        with pytest.raises(LikeConflictError):
            await like_service.create_like(post_like(), ANONYMOUS)

        other = await like_service.create_like(post_like("post-2"), ANONYMOUS)
        listing = await like_service.list_likes(LikeFiltersDTO(), LikePaginationDTO())

        assert other.likeable_id == "post-2"
        assert listing.total == 2

    @pytest.mark.asyncio
    async def test_validation_happens_before_insert(self, like_service):
        with pytest.raises(LikeValidationError):
            await like_service.create_like(LikeCreateDTO(likeableId="v", likeable="video"), ALICE)

        listing = await like_service.list_likes(LikeFiltersDTO(), LikePaginationDTO())
        assert listing.total == 0

    @pytest.mark.asyncio
    async def test_refetch_failure_returns_inserted_row(self, like_service, monkeypatch):
        """The write already succeeded, so a failed re-read is not an error."""
        async def broken_get_like(like_id):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(like_service.like_repository, "get_like", broken_get_like)

        like = await like_service.create_like(post_like(), ALICE)

        assert like.liker_id == "alice"
        assert like.likeable_id == "post-1"

    @pytest.mark.asyncio
    async def test_other_insert_errors_are_store_errors(self, like_service, monkeypatch):
        async def broken_create_like(like):
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(like_service.like_repository, "create_like", broken_create_like)

        with pytest.raises(StoreError):
            await like_service.create_like(post_like(), ALICE)

    @pytest.mark.asyncio
    async def test_require_auth(self, db_session):
        service = LikeService(db_session, load_config({**DEFAULT_OPTIONS, "require_auth": True}))

        with pytest.raises(AuthenticationRequiredError):
            await service.create_like(post_like(), ANONYMOUS)


class TestUpdateAndDelete:
    """Test re-like and removal."""

    @pytest.mark.asyncio
    async def test_update_restamps(self, like_service):
        created = await like_service.create_like(post_like(), ALICE)

        updated = await like_service.update_like(str(created.id), ALICE)

        assert updated.updated_at is not None
        assert updated.liked_at.replace(tzinfo=None) >= created.liked_at.replace(tzinfo=None)
        assert updated.likeable_id == created.likeable_id

    @pytest.mark.asyncio
    async def test_get_accepts_uppercase_id(self, like_service):
        created = await like_service.create_like(post_like(), ALICE)

        fetched = await like_service.get_like(str(created.id).upper())

        assert fetched.id == created.id

    @pytest.mark.asyncio
    async def test_delete(self, like_service):
        created = await like_service.create_like(post_like(), ALICE)

        await like_service.delete_like(str(created.id), ALICE)

        with pytest.raises(LikeNotFoundError):
            await like_service.get_like(str(created.id))
        with pytest.raises(LikeNotFoundError):
            await like_service.delete_like(str(created.id), ALICE)
