"""Middleware for request validation and error handling."""
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from reelstack.errors import ErrorCode, GameError


logger = logging.getLogger(__name__)


class PlayerIdMiddleware(BaseHTTPMiddleware):
    """Require the X-Player-Id header on player endpoints."""

    PROTECTED_PATHS = {"/init", "/spin"}

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.PROTECTED_PATHS:
            player_id = request.headers.get("X-Player-Id")
            if not player_id:
                error = GameError(
                    ErrorCode.INVALID_REQUEST,
                    "Missing required header: X-Player-Id",
                )
                return error.to_response()
            request.state.player_id = player_id

        return await call_next(request)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Convert exceptions to protocol-compliant responses."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except GameError as e:
            return e.to_response()
        except Exception:
            logger.exception("Unhandled error on %s", request.url.path)
            # Engine internals are not exposed to the client
            code = ErrorCode.SPIN_FAILED if request.url.path == "/spin" else ErrorCode.INTERNAL_ERROR
            error = GameError(code, "Spin failed." if code == ErrorCode.SPIN_FAILED else None)
            return error.to_response()
