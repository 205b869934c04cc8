"""Main entry point for FitSmart."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fitsmart.api.routes import analyze_router, get_store, router as api_router
from fitsmart.config import get_settings
from fitsmart.services.scheduler import ReminderScheduler
from fitsmart.services.vision import MealAnalysisError, UpstreamError


logger = logging.getLogger(__name__)

MANUAL_ENTRY_HINT = "Could not analyze the image automatically. Please enter the meal data manually."


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    scheduler = None
    if settings.enable_water_reminders:
        scheduler = ReminderScheduler(get_store(), settings)
        scheduler.start()
    try:
        yield
    finally:
        if scheduler:
            scheduler.stop()


async def meal_analysis_error_handler(request: Request, exc: MealAnalysisError) -> JSONResponse:
    """Report any photo analysis failure as a single manual-entry fallback message."""
    if isinstance(exc, UpstreamError):
        logger.error("Meal analysis failed upstream (status=%s): %s", exc.status_code, exc)
    else:
        logger.error("Meal analysis failed: %s", exc)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Could not analyze image",
            "message": str(exc),
            "details": MANUAL_ENTRY_HINT,
        },
    )


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title="FitSmart API",
        description="Workout routines, meal logging with photo calorie estimation, and hydration tracking",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.include_router(analyze_router)
    app.include_router(api_router)
    app.add_exception_handler(MealAnalysisError, meal_analysis_error_handler)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


api_app = create_app()


def run():
    """Entry point for running the API server."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print(f"FitSmart API running at http://localhost:{settings.api_port}")
    print(f"API docs at http://localhost:{settings.api_port}/docs")
    uvicorn.run(api_app, host=settings.api_host, port=settings.api_port, log_level="warning")


if __name__ == "__main__":
    run()
