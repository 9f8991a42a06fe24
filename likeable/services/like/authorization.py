import enum
from typing import Optional, Protocol

from likeable.config import LikeableConfig
from likeable.models.like import Like
from likeable.services.like.identity import Actor, AuthenticatedActor
from likeable.utils.exceptions import AuthorizationError


class LikeAction(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class Authorizer(Protocol):
    """Hook consulted before every write.

    Raise AuthorizationError to refuse; returning means allowed.
    """

    async def authorize(self, action: LikeAction, actor: Actor, like: Like) -> None: ...


class AllowAll:
    async def authorize(self, action: LikeAction, actor: Actor, like: Like) -> None:
        return None


class OwnerOnly:
    """Only the authenticated creator may change or remove a like.

    Anonymous likes cannot be touched: there is no way to prove who owns one.
    """

    async def authorize(self, action: LikeAction, actor: Actor, like: Like) -> None:
        if action == LikeAction.CREATE:
            return None
        if not isinstance(actor, AuthenticatedActor) or like.is_anonymous:
            raise AuthorizationError("You can only modify your own likes")
        if like.liker_id != actor.liker_id:
            raise AuthorizationError("You can only modify your own likes")


def build_authorizer(config: LikeableConfig, authorizer: Optional[Authorizer] = None) -> Authorizer:
    if authorizer is not None:
        return authorizer
    return OwnerOnly() if config.enforce_ownership else AllowAll()
