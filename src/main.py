"""Posts API — FastAPI application entry point.

Routes HTTP requests to the event handlers in src.api.handlers. The
store is built once per process (lifespan) or injected by the caller,
then shared with the routes through app.state.
"""

from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request, Response

from src.api import handlers
from src.config.settings import get_settings
from src.logging.audit import (
    generate_request_id,
    get_audit_logger,
    request_id_var,
    setup_logging,
)
from src.posts.factory import build_post_store
from src.posts.store import PostStore
from src.security.identity import IdentityProvider, build_identity_provider

VERSION = "1.0.0"

router = APIRouter()


def get_store(request: Request) -> PostStore:
    return request.app.state.store


def get_identity(request: Request) -> IdentityProvider:
    return request.app.state.identity


async def build_event(request: Request) -> dict:
    """Shape an HTTP request like an API Gateway proxy event.

    The body stays as bytes; parse_body decodes it strictly.
    """
    raw = await request.body()
    return {
        "pathParameters": dict(request.path_params) or None,
        "body": raw or None,
    }


def to_response(result: dict) -> Response:
    return Response(
        content=result["body"],
        status_code=result["statusCode"],
        media_type="application/json",
    )


@router.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}


@router.post("/posts")
async def create_post(
    request: Request,
    store: PostStore = Depends(get_store),
    identity: IdentityProvider = Depends(get_identity),
):
    return to_response(await handlers.create_post(await build_event(request), store, identity))


@router.get("/posts")
async def list_posts(request: Request, store: PostStore = Depends(get_store)):
    return to_response(await handlers.list_posts(await build_event(request), store))


@router.get("/posts/limit/{number}")
async def list_posts_limited(request: Request, store: PostStore = Depends(get_store)):
    return to_response(await handlers.list_posts_limited(await build_event(request), store))


@router.get("/posts/{id}")
async def get_post(request: Request, store: PostStore = Depends(get_store)):
    return to_response(await handlers.get_post(await build_event(request), store))


@router.put("/posts/{id}")
async def update_post(request: Request, store: PostStore = Depends(get_store)):
    return to_response(await handlers.update_post(await build_event(request), store))


@router.delete("/posts/{id}")
async def delete_post(request: Request, store: PostStore = Depends(get_store)):
    return to_response(await handlers.delete_post(await build_event(request), store))


def create_app(
    store: PostStore | None = None,
    identity: IdentityProvider | None = None,
) -> FastAPI:
    """Build the app. A store passed in is owned (and closed) by the caller."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        owns_store = app.state.store is None
        if owns_store:
            app.state.store = build_post_store(get_settings())
        get_audit_logger().info("Posts API started")
        yield
        if owns_store:
            await app.state.store.close()
            app.state.store = None
        get_audit_logger().info("Posts API stopped")

    app = FastAPI(
        title="Posts API",
        description="CRUD over post records",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.identity = identity or build_identity_provider(get_settings())

    @app.middleware("http")
    async def assign_request_id(request: Request, call_next):
        rid = generate_request_id()
        request_id_var.set(rid)
        resp = await call_next(request)
        resp.headers["X-Request-Id"] = rid
        return resp

    app.include_router(router)
    return app


app = create_app()
