"""Posts request handlers.

Each handler takes an API Gateway proxy style event (pathParameters,
body) plus its injected collaborators, performs at most one store call
and returns a {statusCode, body} response. Store failures are caught
here, logged, and passed through with the store's status code.
"""

import base64
import json
import uuid

from src.api.errors import ApiError, NotFoundError, StoreError, ValidationError
from src.api.response import error_response, response, store_error_response
from src.logging.audit import StoreTimer, log_operation, log_rejection, log_store_failure
from src.posts.models import Post, utc_timestamp
from src.posts.store import PostStore
from src.security.identity import IdentityProvider

NOT_FOUND_MESSAGE = "Post not found"
DELETED_MESSAGE = "Post deleted successfully"

EDITABLE_FIELDS = ("title", "body")


def parse_body(event: dict) -> dict:
    """Decode the event body as a JSON object. A missing body is {}.

    The body may be text (API Gateway), raw bytes (the HTTP app) or an
    already-decoded dict (direct invocation).
    """
    raw = event.get("body")
    if raw is None or raw == "" or raw == b"":
        return {}
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, (str, bytes)):
        raise ValidationError("Request body must be a JSON object")

    try:
        if event.get("isBase64Encoded"):
            raw = base64.b64decode(raw)
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        data = json.loads(raw)
    except ValueError:
        raise ValidationError("Request body must be valid UTF-8 JSON")

    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def path_param(event: dict, name: str) -> str:
    params = event.get("pathParameters") or {}
    value = params.get(name)
    if not value:
        raise ValidationError(f"Missing path parameter: {name}")
    return value


def _required_text(data: dict, field_name: str) -> str:
    value = data.get(field_name)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{field_name}' is required and must be a non-empty string")
    return value


def _parse_limit(raw: str) -> int:
    try:
        limit = int(raw)
    except ValueError:
        limit = 0
    if limit < 1:
        raise ValidationError("'number' must be a positive integer")
    return limit


# --- Outcome helpers ---

def _rejected(operation: str, exc: ApiError, **fields) -> dict:
    log_rejection(operation, exc.status_code, exc.message, **fields)
    return error_response(exc)


def _store_failed(operation: str, exc: StoreError, timer: StoreTimer, **fields) -> dict:
    log_store_failure(operation, exc.payload, exc.status_code, timer, **fields)
    return store_error_response(exc)


# --- Handlers ---

async def create_post(event: dict, store: PostStore, identity: IdentityProvider) -> dict:
    """Validate title/body, then persist a new post. 201 with the record."""
    try:
        data = parse_body(event)
        fields = {name: _required_text(data, name) for name in EDITABLE_FIELDS}
    except ValidationError as e:
        return _rejected("create", e)

    post = Post(
        id=str(uuid.uuid4()),
        created_at=utc_timestamp(),
        user_id=identity.user_id(event),
        **fields,
    )

    timer = StoreTimer()
    try:
        with timer:
            await store.put(post)
    except StoreError as e:
        return _store_failed("create", e, timer, post_id=post.id)

    log_operation("Post created", "create", 201, timer, post_id=post.id)
    return response(201, post.to_item())


async def list_posts(event: dict, store: PostStore) -> dict:
    """All posts, newest first."""
    return await _list("list", store, limit=None)


async def list_posts_limited(event: dict, store: PostStore) -> dict:
    """The N most recent posts, N taken from the "number" path parameter."""
    try:
        limit = _parse_limit(path_param(event, "number"))
    except ValidationError as e:
        return _rejected("list_limited", e)
    return await _list("list_limited", store, limit=limit)


async def _list(operation: str, store: PostStore, limit: int | None) -> dict:
    # Scan order is arbitrary: read the whole collection, then order and truncate
    timer = StoreTimer()
    try:
        with timer:
            posts = await store.scan()
    except StoreError as e:
        return _store_failed(operation, e, timer)

    posts = sorted(posts, key=lambda p: p.created_at, reverse=True)
    if limit is not None:
        posts = posts[:limit]

    log_operation("Posts listed", operation, 200, timer, count=len(posts), limit=limit)
    return response(200, [p.to_item() for p in posts])


async def get_post(event: dict, store: PostStore) -> dict:
    try:
        post_id = path_param(event, "id")
    except ValidationError as e:
        return _rejected("get", e)

    timer = StoreTimer()
    try:
        with timer:
            post = await store.get(post_id)
    except StoreError as e:
        return _store_failed("get", e, timer, post_id=post_id)

    if post is None:
        return _rejected("get", NotFoundError(NOT_FOUND_MESSAGE), post_id=post_id)

    log_operation("Post fetched", "get", 200, timer, post_id=post_id)
    return response(200, post.to_item())


async def update_post(event: dict, store: PostStore) -> dict:
    """Conditionally update title and/or body of an existing post.

    Only supplied fields are written. A missing post surfaces as the
    store's ConditionalCheckFailedException, not as a 404.
    """
    try:
        post_id = path_param(event, "id")
        data = parse_body(event)
        changes = {name: _required_text(data, name) for name in EDITABLE_FIELDS if name in data}
        if not changes:
            raise ValidationError("Provide 'title' and/or 'body' to update")
    except ValidationError as e:
        return _rejected("update", e)

    timer = StoreTimer()
    try:
        with timer:
            result = await store.update(post_id, changes)
    except StoreError as e:
        return _store_failed("update", e, timer, post_id=post_id)

    log_operation("Post updated", "update", 200, timer, post_id=post_id, fields=sorted(changes))
    return response(200, result)


async def delete_post(event: dict, store: PostStore) -> dict:
    """Unconditional delete; unknown ids still report success."""
    try:
        post_id = path_param(event, "id")
    except ValidationError as e:
        return _rejected("delete", e)

    timer = StoreTimer()
    try:
        with timer:
            await store.delete(post_id)
    except StoreError as e:
        return _store_failed("delete", e, timer, post_id=post_id)

    log_operation("Post deleted", "delete", 200, timer, post_id=post_id)
    return response(200, {"message": DELETED_MESSAGE})
