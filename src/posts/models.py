"""Post record model."""

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass
class Post:
    id: str
    created_at: str  # ISO-8601 UTC, e.g. "2024-05-01T12:00:00.000Z"
    user_id: int
    title: str
    body: str

    def to_item(self) -> dict:
        """Stored/wire representation (camelCase keys)."""
        return {
            "id": self.id,
            "createdAt": self.created_at,
            "userId": self.user_id,
            "title": self.title,
            "body": self.body,
        }

    @classmethod
    def from_item(cls, item: dict) -> "Post":
        # DynamoDB hands numbers back as Decimal
        return cls(
            id=item["id"],
            created_at=item.get("createdAt", ""),
            user_id=int(item.get("userId", 0)),
            title=item.get("title", ""),
            body=item.get("body", ""),
        )


def utc_timestamp() -> str:
    """Current time as an ISO-8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
