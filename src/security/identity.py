"""Caller identity for new posts.

There is no authentication layer yet, so every post is owned by a fixed
user id. Swap FixedIdentityProvider for one that reads the API Gateway
authorizer context once an authorizer is configured.
"""

from abc import ABC, abstractmethod

from src.config.settings import Settings


class IdentityProvider(ABC):
    """Resolves the owning user id for a request event."""

    @abstractmethod
    def user_id(self, event: dict) -> int:
        ...


class FixedIdentityProvider(IdentityProvider):
    def __init__(self, user_id: int = 1):
        self._user_id = user_id

    def user_id(self, event: dict) -> int:
        return self._user_id


def build_identity_provider(settings: Settings) -> IdentityProvider:
    return FixedIdentityProvider(settings.default_user_id)
