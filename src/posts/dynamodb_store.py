"""DynamoDB-backed post store."""

import asyncio
import threading

from botocore.exceptions import BotoCoreError, ClientError

from src.api.errors import StoreError
from src.posts.models import Post
from src.posts.store import PostStore


def _store_error(exc: ClientError) -> StoreError:
    """Translate a botocore ClientError into a StoreError."""
    error = exc.response.get("Error", {})
    metadata = exc.response.get("ResponseMetadata", {})
    status = int(metadata.get("HTTPStatusCode", 500))
    code = error.get("Code", "UnknownError")
    return StoreError(
        status_code=status,
        code=code,
        message=error.get("Message", str(exc)),
        request_id=metadata.get("RequestId", ""),
        retryable=status >= 500 or code in _RETRYABLE_CODES,
    )


_RETRYABLE_CODES = {
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
}


class DynamoDBPostStore(PostStore):
    """Posts in a DynamoDB table with string partition key "id"."""

    def __init__(
        self,
        table_name: str,
        region: str = "us-east-1",
        endpoint_url: str = "",
        table=None,
    ):
        self._table_name = table_name
        self._region = region
        self._endpoint_url = endpoint_url
        # An injected table is shared as-is; otherwise each worker thread
        # gets its own, since boto3 resources are not thread-safe.
        self._table = table
        self._session = None
        self._lock = threading.Lock()
        self._local = threading.local()
        self._opened: list = []

    def _get_table(self):
        """Table resource for the calling thread, created on first use."""
        if self._table is not None:
            return self._table

        table = getattr(self._local, "table", None)
        if table is None:
            with self._lock:
                if self._session is None:
                    import boto3

                    self._session = boto3.session.Session(region_name=self._region)
                kwargs = {}
                if self._endpoint_url:
                    kwargs["endpoint_url"] = self._endpoint_url
                table = self._session.resource("dynamodb", **kwargs).Table(self._table_name)
                self._opened.append(table)
            self._local.table = table
        return table

    async def _call(self, fn, *args):
        """Run a blocking table call off the event loop, mapping SDK errors."""
        try:
            return await asyncio.to_thread(fn, *args)
        except ClientError as e:
            raise _store_error(e) from e
        except BotoCoreError as e:
            raise StoreError(
                status_code=503,
                code=type(e).__name__,
                message=str(e),
                retryable=True,
            ) from e

    async def put(self, post: Post) -> None:
        await self._call(self._put, post)

    def _put(self, post: Post) -> None:
        self._get_table().put_item(Item=post.to_item())

    async def scan(self, limit: int | None = None) -> list[Post]:
        return await self._call(self._scan, limit)

    def _scan(self, limit: int | None) -> list[Post]:
        """Scan, following LastEvaluatedKey until exhausted or limit examined."""
        table = self._get_table()
        items: list[dict] = []
        kwargs: dict = {}

        while True:
            if limit is not None:
                kwargs["Limit"] = limit - len(items)
            resp = table.scan(**kwargs)
            items.extend(resp.get("Items", []))

            last_key = resp.get("LastEvaluatedKey")
            if not last_key or (limit is not None and len(items) >= limit):
                break
            kwargs["ExclusiveStartKey"] = last_key

        return [Post.from_item(item) for item in items]

    async def get(self, post_id: str) -> Post | None:
        return await self._call(self._get, post_id)

    def _get(self, post_id: str) -> Post | None:
        resp = self._get_table().get_item(Key={"id": post_id})
        item = resp.get("Item")
        return Post.from_item(item) if item is not None else None

    async def update(self, post_id: str, changes: dict) -> dict:
        return await self._call(self._update, post_id, changes)

    def _update(self, post_id: str, changes: dict) -> dict:
        names = {"#id": "id"}
        values = {}
        assignments = []
        for i, (field_name, value) in enumerate(changes.items()):
            names[f"#f{i}"] = field_name
            values[f":v{i}"] = value
            assignments.append(f"#f{i} = :v{i}")

        return self._get_table().update_item(
            Key={"id": post_id},
            UpdateExpression="SET " + ", ".join(assignments),
            ConditionExpression="attribute_exists(#id)",
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values,
            ReturnValues="ALL_NEW",
        )

    async def delete(self, post_id: str) -> None:
        await self._call(self._delete, post_id)

    def _delete(self, post_id: str) -> None:
        self._get_table().delete_item(Key={"id": post_id})

    async def close(self) -> None:
        with self._lock:
            tables, self._opened = self._opened, []
            self._local = threading.local()
        if self._table is not None:
            tables.append(self._table)
            self._table = None
        for table in tables:
            table.meta.client.close()
