"""Post store abstraction + in-memory implementation."""

import dataclasses
from abc import ABC, abstractmethod

from src.api.errors import condition_failed
from src.posts.models import Post


class PostStore(ABC):
    """Abstract base for the post record store."""

    @abstractmethod
    async def put(self, post: Post) -> None:
        """Insert or overwrite a post by id."""
        ...

    @abstractmethod
    async def scan(self, limit: int | None = None) -> list[Post]:
        """Unordered read of the collection.

        Args:
            limit: Max number of items to examine. None reads everything.
        """
        ...

    @abstractmethod
    async def get(self, post_id: str) -> Post | None:
        """Look up a post by id. Returns None if not found."""
        ...

    @abstractmethod
    async def update(self, post_id: str, changes: dict) -> dict:
        """Set fields on an existing post.

        Raises StoreError (ConditionalCheckFailedException) when the post
        does not exist. Returns the store's update response, with the
        updated record under "Attributes".
        """
        ...

    @abstractmethod
    async def delete(self, post_id: str) -> None:
        """Remove a post by id. Missing ids are not an error."""
        ...

    async def close(self) -> None:
        """Release connections. Override if the backend holds any."""
        pass


class InMemoryPostStore(PostStore):
    """Process-local store for development and tests.

    Mirrors DynamoDB semantics: unconditional put/delete, conditional
    update, scan in insertion order.
    """

    def __init__(self, posts: list[Post] | None = None):
        self._items: dict[str, dict] = {}
        for post in posts or []:
            self._items[post.id] = post.to_item()

    async def put(self, post: Post) -> None:
        self._items[post.id] = post.to_item()

    async def scan(self, limit: int | None = None) -> list[Post]:
        items = list(self._items.values())
        if limit is not None:
            items = items[:limit]
        return [Post.from_item(item) for item in items]

    async def get(self, post_id: str) -> Post | None:
        item = self._items.get(post_id)
        return Post.from_item(item) if item is not None else None

    async def update(self, post_id: str, changes: dict) -> dict:
        if post_id not in self._items:
            raise condition_failed()
        post = dataclasses.replace(Post.from_item(self._items[post_id]), **changes)
        self._items[post_id] = post.to_item()
        return {"Attributes": post.to_item()}

    async def delete(self, post_id: str) -> None:
        self._items.pop(post_id, None)
