"""
Application entry point.
Run with:  uvicorn toystock.main:app --reload

Stock list sessions are held in process memory, so run a single worker.
Set SEED_DEMO_DATA=true to insert a few demo toys on startup (development only).
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from toystock.core.logging_config import configure_logging
from toystock.core.config import settings
from toystock.core.exceptions import StockTrackerError
from toystock.api.v1.router import api_router
from toystock.db.database import init_db
from toystock.db.mock_seeder import seed_demo_stocks

configure_logging()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    logger = logging.getLogger(__name__)
    logger.info("Starting FastAPI application setup")
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=(
            "Backend API for a toy shop stock list: record items, search them, "
            "import from spreadsheets and export to PDF or spreadsheet."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # ── Middleware ──────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Errors ──────────────────────────────────────────────────────────────
    @app.exception_handler(StockTrackerError)
    async def stock_tracker_error_handler(
        request: Request, exc: StockTrackerError
    ) -> JSONResponse:
        """Turn a domain failure into a single user-facing message."""
        logger.warning(
            "%s on %s %s: %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    # ── Routers ─────────────────────────────────────────────────────────────
    app.include_router(api_router)

    @app.get("/health", tags=["Health"])
    def health() -> dict:
        return {"status": "ok"}

    # ── Startup / shutdown events ───────────────────────────────────────────
    @app.on_event("startup")
    def on_startup() -> None:
        """Initialize the database and optional demo data."""
        logger.info("Initializing database")
        init_db()
        if settings.SEED_DEMO_DATA:
            seed_demo_stocks()

    return app


app = create_app()
