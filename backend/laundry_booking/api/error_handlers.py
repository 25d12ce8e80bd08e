"""Global exception handlers for reservation rejections."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from laundry_booking.core.errors import ReservationError, StoreError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register reservation error handlers on the FastAPI app."""

    @app.exception_handler(ReservationError)
    async def reservation_error_handler(request: Request, exc: ReservationError):
        if isinstance(exc, StoreError):
            logger.error(
                "Store failure on %s: %s",
                request.url.path,
                exc.message,
                exc_info=exc.__cause__ or exc,
            )
        else:
            logger.info(
                "Rejected %s %s: %s", request.method, request.url.path, exc.code
            )
        headers = None
        if exc.http_status == 401:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.http_status,
            content={"detail": exc.message, "code": exc.code},
            headers=headers,
        )
