# barberbook/main.py

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from barberbook.config import get_settings
from barberbook.db import create_db_and_tables
from barberbook.errors import BookingError
from barberbook.logging_setup import setup_logging
from barberbook.routers import (
    auth_routes,
    barbers_routes,
    bookings_routes,
    favorites_routes,
    notifications_routes,
    schedule_routes,
    users_routes,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    create_db_and_tables()
    logger.info("Barberbook API started")
    yield
    logger.info("Barberbook API shutting down")


def create_app(init_db: bool = True) -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan if init_db else None)

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(auth_routes.router)
    app.include_router(users_routes.router)
    app.include_router(barbers_routes.router)
    app.include_router(schedule_routes.router)
    app.include_router(bookings_routes.router)
    app.include_router(notifications_routes.router)
    app.include_router(favorites_routes.router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "barberbook.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().DEBUG,
        log_level="info",
    )
