"""Shared fixtures for the posts API test suite."""

import json

import pytest

from src.config.settings import get_settings
from src.posts.models import Post
from src.posts.store import InMemoryPostStore
from src.security.identity import FixedIdentityProvider


@pytest.fixture
def sample_posts() -> list[Post]:
    """Three posts with increasing createdAt, stored oldest first."""
    return [
        Post(id="p1", created_at="2024-01-01T00:00:00.000Z", user_id=1, title="First", body="one"),
        Post(id="p2", created_at="2024-01-02T00:00:00.000Z", user_id=1, title="Second", body="two"),
        Post(id="p3", created_at="2024-01-03T00:00:00.000Z", user_id=1, title="Third", body="three"),
    ]


@pytest.fixture
def memory_store(sample_posts) -> InMemoryPostStore:
    return InMemoryPostStore(sample_posts)


@pytest.fixture
def empty_store() -> InMemoryPostStore:
    return InMemoryPostStore()


@pytest.fixture
def identity() -> FixedIdentityProvider:
    return FixedIdentityProvider(1)


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Usage:
        override_settings(POST_STORE_BACKEND="memory", EXPOSE_STORE_ERRORS="false")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()

    yield _override

    get_settings.cache_clear()


def make_event(path_params: dict | None = None, body=None) -> dict:
    """API Gateway proxy style event. Dict bodies are JSON-encoded."""
    if isinstance(body, dict):
        body = json.dumps(body)
    return {"pathParameters": path_params, "body": body}


def body_of(result: dict):
    return json.loads(result["body"])
