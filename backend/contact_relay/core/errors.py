# contact_relay/core/errors.py
from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    success: bool = False
    message: str


class SubmissionError(Exception):
    """Client-side problem with a submission; reported as a 400."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PayloadTooLarge(SubmissionError):
    status_code = 413

    def __init__(self, message: str = "Request body too large."):
        super().__init__(message)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


async def submission_error_handler(request: Request, exc: SubmissionError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)
