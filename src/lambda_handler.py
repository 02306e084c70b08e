"""AWS Lambda entry points.

`handler` serves the whole API behind one proxy integration: Mangum
translates API Gateway events into ASGI for the FastAPI app. The
per-operation functions serve one integration per route and call the
event handlers directly.

The store is constructed once per execution environment (cold start)
and reused across invocations.
"""

import asyncio

from mangum import Mangum

from src.api import handlers
from src.config.settings import get_settings
from src.logging.audit import generate_request_id, request_id_var, setup_logging
from src.main import create_app
from src.posts.factory import build_post_store
from src.security.identity import build_identity_provider

setup_logging()

store = build_post_store(get_settings())
identity = build_identity_provider(get_settings())

handler = Mangum(create_app(store=store, identity=identity), lifespan="off")


def _invoke(coro_factory, event, context) -> dict:
    request_id_var.set(getattr(context, "aws_request_id", None) or generate_request_id())
    return asyncio.run(coro_factory(event or {}))


def create_post(event, context):
    return _invoke(lambda e: handlers.create_post(e, store, identity), event, context)


def list_posts(event, context):
    return _invoke(lambda e: handlers.list_posts(e, store), event, context)


def list_posts_limited(event, context):
    return _invoke(lambda e: handlers.list_posts_limited(e, store), event, context)


def get_post(event, context):
    return _invoke(lambda e: handlers.get_post(e, store), event, context)


def update_post(event, context):
    return _invoke(lambda e: handlers.update_post(e, store), event, context)


def delete_post(event, context):
    return _invoke(lambda e: handlers.delete_post(e, store), event, context)
