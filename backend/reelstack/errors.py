"""Protocol error codes and exceptions."""
from enum import Enum

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from reelstack.config import settings


class ErrorCode(str, Enum):
    """Error codes returned in the protocol error envelope."""

    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_BET = "INVALID_BET"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    ROUND_IN_PROGRESS = "ROUND_IN_PROGRESS"
    IDEMPOTENCY_CONFLICT = "IDEMPOTENCY_CONFLICT"
    SPIN_FAILED = "SPIN_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.INVALID_BET: 400,
    ErrorCode.INSUFFICIENT_FUNDS: 402,
    ErrorCode.ROUND_IN_PROGRESS: 409,
    ErrorCode.IDEMPOTENCY_CONFLICT: 409,
    ErrorCode.SPIN_FAILED: 500,
    ErrorCode.INTERNAL_ERROR: 500,
}

ERROR_RECOVERABLE: dict[ErrorCode, bool] = {
    ErrorCode.INVALID_REQUEST: False,
    ErrorCode.INVALID_BET: False,
    ErrorCode.INSUFFICIENT_FUNDS: True,
    ErrorCode.ROUND_IN_PROGRESS: True,
    ErrorCode.IDEMPOTENCY_CONFLICT: False,
    ErrorCode.SPIN_FAILED: True,
    ErrorCode.INTERNAL_ERROR: True,
}


class ErrorBody(BaseModel):
    code: str
    message: str
    recoverable: bool


class ErrorResponse(BaseModel):
    protocolVersion: str = settings.protocol_version
    error: ErrorBody


class GameError(Exception):
    """Base game error that maps to protocol error response."""

    def __init__(self, code: ErrorCode, message: str | None = None):
        self.code = code
        self.message = message or f"Error: {code.value}"
        self.status_code = ERROR_HTTP_STATUS[code]
        self.recoverable = ERROR_RECOVERABLE[code]
        super().__init__(self.message)

    def to_response(self) -> JSONResponse:
        """Convert to JSONResponse with the protocol error envelope."""
        return JSONResponse(
            status_code=self.status_code,
            content=ErrorResponse(
                error=ErrorBody(
                    code=self.code.value,
                    message=self.message,
                    recoverable=self.recoverable,
                )
            ).model_dump(),
        )
