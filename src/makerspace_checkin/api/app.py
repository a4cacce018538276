"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from makerspace_checkin.api.ledger import router as ledger_router
from makerspace_checkin.api.schemas import (
    CheckInAllowOut,
    CheckInDisallowOut,
    check_in_response,
)
from makerspace_checkin.app_logging import configure_logging
from makerspace_checkin.containers import AppContainer
from makerspace_checkin.errors import (
    AlreadyTaken,
    ExtractionFailed,
    LedgerError,
    NotFound,
)

_LEDGER_ERROR_STATUS: dict[type[LedgerError], int] = {
    NotFound: status.HTTP_404_NOT_FOUND,
    AlreadyTaken: status.HTTP_409_CONFLICT,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.session_manager.start()
        except Exception:
            logger.exception("Failed to log in to Atrium at startup")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(ledger_router)

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(_request: Request, exc: LedgerError) -> JSONResponse:
        status_code = _LEDGER_ERROR_STATUS.get(
            type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Attendance storage error: %s", exc)
        return JSONResponse(status_code=status_code, content={"error": exc.code})

    @app.exception_handler(ExtractionFailed)
    async def extraction_error_handler(
        _request: Request, exc: ExtractionFailed
    ) -> JSONResponse:
        logger.error("Check-in aborted, unreadable Atrium HTML: %s", exc.reason)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": "ExtractionFailed", "detail": exc.reason},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/check_in/{lookup_key}")
    async def check_in(
        lookup_key: str, request: Request
    ) -> CheckInAllowOut | CheckInDisallowOut:
        """Check a visitor in by card or ID number."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.check_in_service.check_in(lookup_key)
        return check_in_response(result)

    return app
