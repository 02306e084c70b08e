"""Factory for post store backends."""

from src.config.settings import Settings
from src.posts.store import InMemoryPostStore, PostStore


def build_post_store(settings: Settings) -> PostStore:
    """Construct the configured store. The caller owns its lifecycle."""
    backend = settings.post_store_backend

    if backend == "memory":
        return InMemoryPostStore()

    if backend == "dynamodb":
        # Lazy import to avoid boto3 dependency when not needed
        from src.posts.dynamodb_store import DynamoDBPostStore
        return DynamoDBPostStore(
            table_name=settings.posts_table,
            region=settings.aws_region,
            endpoint_url=settings.dynamodb_endpoint_url,
        )

    raise ValueError(f"Unknown post store backend: {backend}")
