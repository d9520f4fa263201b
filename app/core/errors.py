"""HTTP errors that carry a machine-readable error code.

Usage:
    from app.core.errors import raise_with_code, STUDENT_NOT_FOUND

    raise_with_code(404, "Student not found", STUDENT_NOT_FOUND)

The response body will be:
    {"detail": "Student not found", "code": "STUDENT_NOT_FOUND"}
"""

import logging

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


STUDENT_NOT_FOUND = "STUDENT_NOT_FOUND"
STUDENT_EXISTS = "STUDENT_EXISTS"
GRADE_NOT_FOUND = "GRADE_NOT_FOUND"
ATTENDANCE_NOT_FOUND = "ATTENDANCE_NOT_FOUND"
DUPLICATE_ATTENDANCE = "DUPLICATE_ATTENDANCE"
ATTENDANCE_CONFIG_NOT_FOUND = "ATTENDANCE_CONFIG_NOT_FOUND"
DUPLICATE_ATTENDANCE_CONFIG = "DUPLICATE_ATTENDANCE_CONFIG"
INVALID_FILTER = "INVALID_FILTER"
INVALID_GRADE = "INVALID_GRADE"
FEE_NOT_FOUND = "FEE_NOT_FOUND"
QUIZ_CODE_REQUIRED = "QUIZ_CODE_REQUIRED"
QUIZ_NOT_FOUND = "QUIZ_NOT_FOUND"


class CodedHTTPException(HTTPException):
    """HTTPException that includes an error code in the JSON response."""

    def __init__(self, status_code: int, detail: str, code: str):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code


def raise_with_code(status_code: int, detail: str, code: str) -> None:
    raise CodedHTTPException(status_code=status_code, detail=detail, code=code)


def coded_exception_handler(_request: Request, exc: CodedHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )


def unhandled_exception_handler(request: Request, exc: Exception):
    """Last-resort handler: log the traceback, hide internals from the client."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
