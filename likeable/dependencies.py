from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from likeable.config import LikeableConfig
from likeable.database import DatabaseSessionManager, get_db_session
from likeable.services.like import Actor, Authorizer, LikeService, classify_actor
from likeable.utils.exceptions import AuthenticationRequiredError
from likeable.utils.token import verify_token

# Keys host middleware may use to hand over an already-authenticated user
STATE_USER_KEYS = ("user_id", "userId")

optional_security = HTTPBearer(auto_error=False)


@dataclass
class LikeableState:
    config: LikeableConfig
    authorizer: Authorizer
    sessionmanager: DatabaseSessionManager


DBSessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def get_likeable_state(request: Request) -> LikeableState:
    return request.app.state.likeable


LikeableStateDep = Annotated[LikeableState, Depends(get_likeable_state)]


async def get_actor_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> Optional[str]:
    """Resolve the authenticated actor, if any.

    A bearer token wins over ids left on request.state by host middleware.
    A token that is present but invalid is refused instead of falling back
    to an anonymous like.
    """
    if credentials is not None:
        payload = verify_token(credentials.credentials)
        user_id = payload.get("user_id") or payload.get("sub")
        if not user_id:
            raise AuthenticationRequiredError("Invalid token payload")
        return str(user_id)

    for key in STATE_USER_KEYS:
        user_id = getattr(request.state, key, None)
        if isinstance(user_id, str) and user_id:
            return user_id
    return None


def get_client_fingerprint(request: Request) -> tuple[str, str]:
    ip_address = request.client.host if request.client else ""
    user_agent = request.headers.get("User-Agent", "")
    return ip_address, user_agent


async def get_actor(
    request: Request,
    actor_id: Optional[str] = Depends(get_actor_id),
) -> Actor:
    ip_address, user_agent = get_client_fingerprint(request)
    return classify_actor(actor_id, ip_address, user_agent)


ActorDep = Annotated[Actor, Depends(get_actor)]


def get_like_service(db: DBSessionDep, state: LikeableStateDep) -> LikeService:
    return LikeService(db, state.config, state.authorizer)


LikeServiceDep = Annotated[LikeService, Depends(get_like_service)]
