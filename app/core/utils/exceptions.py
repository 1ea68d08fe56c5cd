# app/core/utils/exceptions.py

from fastapi import HTTPException, status


class CustomException:
    @staticmethod
    def e400_bad_request(detail: str = "Bad Request."):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )
    @staticmethod
    def e401_unauthorized(detail: str = "Request Unauthorized."):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail
        )
    @staticmethod
    def e403_forbidden(detail: str = "Request Forbidden."):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )
    @staticmethod
    def e404_not_found(detail: str = "Resource Not Found."):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail
        )
    @staticmethod
    def e409_conflict(detail: str = "Conflict with Request."):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail
        )
    @staticmethod
    def e429_too_many_requests(detail: str = "Too Many Requests."):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=detail
        )


class PersistenceFailure(Exception):
    """
    Storage error raised while applying a moderation or session change.

    The wrapped error is for logs only; callers treat the operation as
    not applied and may retry it.
    """

    def __init__(self, operation: str, original: Exception | None = None):
        self.operation = operation
        self.original = original
        super().__init__(f"Persistence failure during {operation}")
