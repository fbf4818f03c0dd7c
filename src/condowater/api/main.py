"""FastAPI entry point for the condo water billing service."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from tortoise import Tortoise

from condowater.api.routers import readings, rooms
from condowater.config import settings
from condowater.core.db import TORTOISE_ORM
from condowater.core.errors import WaterBillingError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Opens database connections on startup and closes them on shutdown."""
    logger.info("Initializing database...")
    await Tortoise.init(config=TORTOISE_ORM)
    logger.info("Database initialized.")
    yield
    logger.info("Closing connections...")
    await Tortoise.close_connections()
    logger.info("Connections closed.")


def create_app(init_db: bool = True) -> FastAPI:
    """
    Builds the application.

    Args:
        init_db: Whether the app manages Tortoise connections itself. Tests
            pass False and initialize an in-memory database on their own.
    """
    app = FastAPI(
        title="Condo Water Billing API",
        lifespan=lifespan if init_db else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(WaterBillingError)
    async def billing_error_handler(request: Request, exc: WaterBillingError):
        if exc.status_code >= 500:
            logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc}")
        else:
            logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            f"Invalid request on {request.method} {request.url.path}: {exc.errors()}"
        )
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request parameters",
                "code": "VALIDATION_ERROR",
                "details": jsonable_errors(exc),
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"error": f"Internal server error: {exc}", "code": "INTERNAL_ERROR"},
        )

    app.include_router(rooms.router)
    app.include_router(readings.router)

    @app.get("/health", tags=["health"])
    async def health_check() -> dict:
        return {"status": "ok"}

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Keeps only the JSON-safe parts of pydantic error entries."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


app = create_app()


def main() -> None:
    """Runs the API with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    logger.info("Starting condo water billing API...")
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
