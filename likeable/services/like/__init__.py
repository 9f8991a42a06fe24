from .authorization import AllowAll, Authorizer, LikeAction, OwnerOnly, build_authorizer
from .conflicts import StoreOutcome, classify_store_error
from .identity import Actor, AnonymousActor, AuthenticatedActor, classify_actor
from .like_service import LikeService, build_like, validate_like_request

__all__ = [
    "Actor",
    "AllowAll",
    "AnonymousActor",
    "AuthenticatedActor",
    "Authorizer",
    "LikeAction",
    "LikeService",
    "OwnerOnly",
    "StoreOutcome",
    "build_authorizer",
    "build_like",
    "classify_actor",
    "classify_store_error",
    "validate_like_request",
]
