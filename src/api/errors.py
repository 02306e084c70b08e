"""Error taxonomy for the posts handlers."""


class ApiError(Exception):
    """Caller-facing error rendered as {"error": message}."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ApiError):
    status_code = 400


class NotFoundError(ApiError):
    status_code = 404


class StoreError(Exception):
    """Failure reported by the record store, carrying the store's own status."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        request_id: str = "",
        retryable: bool = False,
    ):
        super().__init__(f"{code}: {message}")
        self.status_code = status_code
        self.code = code
        self.message = message
        self.request_id = request_id
        self.retryable = retryable

    @property
    def payload(self) -> dict:
        return {
            "message": self.message,
            "code": self.code,
            "statusCode": self.status_code,
            "requestId": self.request_id,
            "retryable": self.retryable,
        }


def condition_failed(request_id: str = "") -> StoreError:
    """The error a conditional write raises when its precondition is false."""
    return StoreError(
        status_code=400,
        code="ConditionalCheckFailedException",
        message="The conditional request failed",
        request_id=request_id,
    )
