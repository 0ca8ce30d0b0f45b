# barbershop/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import LOG_LEVEL
from .db import init_db
from .errors import AppError, app_error_handler
from .routers import auth_routes, barbers_routes, bookings_routes, services_routes, users_routes

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    init_db()
    yield
    logger.info("Application shutting down...")


def create_app(lifespan=lifespan) -> FastAPI:
    app = FastAPI(title="Barbershop Booking API", version="0.1.0", lifespan=lifespan)
    app.add_exception_handler(AppError, app_error_handler)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(auth_routes.router)
    app.include_router(users_routes.router)
    app.include_router(barbers_routes.router)
    app.include_router(services_routes.router)
    app.include_router(bookings_routes.router)
    return app


app = create_app()
