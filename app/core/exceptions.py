# app/core/exceptions.py

import logging
from fastapi import Request, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)


class MovieReviewException(Exception):
    """애플리케이션 기본 예외"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal Server Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundException(MovieReviewException):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"


class DuplicateReviewException(MovieReviewException):
    status_code = status.HTTP_409_CONFLICT
    error = "Duplicate Review"

    def __init__(self, message: str = "이미 리뷰를 작성한 영화입니다"):
        super().__init__(message)


class DuplicateWatchlistItemException(MovieReviewException):
    status_code = status.HTTP_409_CONFLICT
    error = "Duplicate Watchlist Item"

    def __init__(self, message: str = "이미 왓치리스트에 있는 영화입니다"):
        super().__init__(message)


class DuplicateUserException(MovieReviewException):
    status_code = status.HTTP_409_CONFLICT
    error = "Duplicate User"


class NotAuthorizedException(MovieReviewException):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Not Authorized"


class SelfReactionException(MovieReviewException):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Self Reaction"

    def __init__(self, message: str = "본인의 리뷰에는 반응할 수 없습니다"):
        super().__init__(message)


class ValidationFailedException(MovieReviewException):
    status_code = 422
    error = "Validation Error"


class UnauthenticatedException(MovieReviewException):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthenticated"


class StorageFailureException(MovieReviewException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "Storage Failure"


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


async def movie_review_exception_handler(request: Request, exc: MovieReviewException):
    """
    도메인 예외를 HTTP 응답으로 변환
    """
    request_id = _request_id(request)

    if exc.status_code >= 500:
        logger.error(
            f"{exc.error}: {exc.message}",
            extra={"request_id": request_id, "path": request.url.path},
            exc_info=exc.__cause__,
        )
    else:
        logger.info(
            f"{exc.error}: {exc.message}",
            extra={"request_id": request_id, "path": request.url.path},
        )

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedException) else None

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "message": exc.message, "request_id": request_id},
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """
    FastAPI HTTPException 처리
    """
    request_id = _request_id(request)

    # 5xx는 error, 4xx는 info
    if exc.status_code >= 500:
        logger.error(f"HTTP {exc.status_code} error", extra={"request_id": request_id})
    else:
        logger.info(f"HTTP {exc.status_code} error", extra={"request_id": request_id})

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "message": exc.detail, "request_id": request_id},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Pydantic 검증 오류 처리
    """
    request_id = _request_id(request)
    logger.info("Validation error", extra={"request_id": request_id, "path": request.url.path})

    return JSONResponse(
        status_code=422,
        content={
            "error": "Validation Error",
            "message": "요청 값이 올바르지 않습니다",
            "details": jsonable_encoder(exc.errors()),
            "request_id": request_id,
        },
    )


async def global_exception_handler(request: Request, exc: Exception):
    """
    처리되지 않은 예외는 500으로 응답하고 내부 정보는 숨긴다
    """
    request_id = _request_id(request)

    logger.error(
        "Unhandled exception occurred",
        extra={"request_id": request_id, "path": request.url.path},
        exc_info=exc,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "message": "예상치 못한 오류가 발생했습니다",
            "request_id": request_id,
        },
    )
