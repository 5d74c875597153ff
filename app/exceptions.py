from typing import Any, Mapping, Optional


class MealServiceError(Exception):
    """Base class for failures of the recipe fetch-and-decode service.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (url, meal id, field errors)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Recipe service error"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class NetworkError(MealServiceError):
    """Raised when the recipe API cannot be reached or answers with a non-2xx status.

    http_status is 502.
    """

    http_status = 502
    default_message = "Recipe API unreachable"


class DecodeError(MealServiceError):
    """Raised when a response body is malformed or a field has the wrong type.

    The whole record is rejected; there is no partial recovery. http_status is 502.
    """

    http_status = 502
    default_message = "Malformed recipe data"


class NotFoundError(MealServiceError):
    """Raised when a lookup returns an absent or empty ``meals`` array.

    http_status is 404.
    """

    http_status = 404
    default_message = "Not found"
