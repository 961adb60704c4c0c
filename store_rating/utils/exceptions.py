"""커스텀 HTTP 예외 클래스 및 전역 예외 핸들러 모듈.

Custom HTTP exception classes and global exception handlers.
Services raise these instead of building HTTPException at each call site.
Every error body has the shape {"detail": "<message>"}.

Usage:
    from store_rating.utils.exceptions import NotFoundError, DuplicateError
    raise NotFoundError("User not found")
    raise DuplicateError("User with this email already exists")
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Raised when a requested user, store or rating does not exist.
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """중복 리소스 생성 시도 시 사용하는 400 예외.

    Raised when a create or update would violate a uniqueness constraint
    (duplicate user email, duplicate store email). Reported as 400 to
    match the rest of the input-validation failures.
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    Raised when the caller is authenticated but lacks the role or
    ownership the operation requires.
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    Raised for a missing, invalid or expired token and for bad credentials.
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    Raised for business-rule validation failures beyond what pydantic
    catches (rating out of range, nothing to update, invalid owner).
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _first_validation_message(exc: RequestValidationError) -> str:
    """pydantic 검증 오류에서 첫 메시지를 추출합니다."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    message: str = str(error.get("msg", "Invalid request"))
    # field_validator에서 발생한 ValueError는 "Value error, " 접두사가 붙음
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 검증 실패를 400으로 변환합니다.

    Map pydantic request validation failures to 400 with a readable message.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": _first_validation_message(exc)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """예상치 못한 예외를 500으로 변환합니다. 내부 오류 내용은 노출하지 않음.

    Log the unexpected exception with its traceback and answer with a
    generic 500 message.
    """
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """애플리케이션에 전역 예외 핸들러를 등록합니다."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
