from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from map_proxy.logging_config import log_structured


class TokenServiceError(Exception):
    """The token service answered with something other than HTTP 200."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Error getting a new token: {status_code}")


class SecurityError(Exception):
    """The caller token could not be validated."""


def setup_exception_handlers(app: FastAPI):
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        log_structured(
            "Unhandled exception",
            level="error",
            error=str(exc),
            error_type=exc.__class__.__name__,
            path=request.url.path
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
