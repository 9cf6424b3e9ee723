"""User and session domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserProfile:
    """The signed-in user as known to the client."""

    id: str
    email: str
    name: str
    conditions: tuple[str, ...] = ()


@dataclass(frozen=True)
class AuthSession:
    """Bearer token and the user it belongs to."""

    token: str
    user: UserProfile
