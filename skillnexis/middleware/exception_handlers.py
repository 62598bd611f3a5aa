# middleware/exception_handlers.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from skillnexis.repos.admin_data import DuplicateSlugError
from skillnexis.services.auth_service import InvalidCredentialsError, ValidationError
from skillnexis.services.progress_service import NotFoundError, ProgressLockedError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI):
    """
    Map domain exceptions to HTTP responses. Anything not listed here falls
    through to ErrorHandlerMiddleware.
    """

    @app.exception_handler(ProgressLockedError)
    async def progress_locked_handler(request: Request, exc: ProgressLockedError):
        logger.info(f"Locked step requested on {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"detail": exc.message, "redirect_to": exc.redirect_to},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(DuplicateSlugError)
    async def duplicate_slug_handler(request: Request, exc: DuplicateSlugError):
        logger.warning(f"Duplicate slug rejected: {str(exc)}")
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        # user input problems, not system failures: no warning-level log
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    @app.exception_handler(InvalidCredentialsError)
    async def invalid_credentials_handler(request: Request, exc: InvalidCredentialsError):
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": str(exc)})
