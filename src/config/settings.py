"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Post store
    post_store_backend: str = "dynamodb"  # "dynamodb" | "memory"
    posts_table: str = "posts"
    aws_region: str = "us-east-1"
    dynamodb_endpoint_url: str = ""  # Empty = AWS default endpoint

    # Placeholder identity until an auth layer sits in front of the API
    default_user_id: int = 1

    # False = callers get {"error", "code"} instead of the raw store error
    expose_store_errors: bool = True

    # Logging
    log_level: str = "INFO"
    audit_log_file: str = ""  # Empty = stdout only

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
