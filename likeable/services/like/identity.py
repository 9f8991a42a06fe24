"""Who is liking: an authenticated actor or an anonymous fingerprint."""
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class AuthenticatedActor:
    liker_id: str


@dataclass(frozen=True)
class AnonymousActor:
    ip_address: str
    user_agent: str


Actor = Union[AuthenticatedActor, AnonymousActor]


def classify_actor(actor_id: Optional[str], ip_address: Optional[str], user_agent: Optional[str]) -> Actor:
    """Anonymous is the default whenever no actor id resolves."""
    if actor_id:
        return AuthenticatedActor(liker_id=actor_id)
    return AnonymousActor(ip_address=ip_address or "", user_agent=user_agent or "")
