import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

from guideflow.exceptions import AppError

logger = structlog.get_logger()


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, error=exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "message": exc.message},
    )


def register_exception_handlers(app):
    # Subclasses resolve through the MRO to this handler.
    app.add_exception_handler(AppError, app_error_handler)
