# app/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.routers import carts, customers, health, newsletter, orders, products, reviews, stats
from app.domain.errors import InternalFault, ValidationError, field_errors
from app.utils.logging import get_logger

logger = get_logger(__name__)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    # bledy walidacji wejscia -> 400 z lista pol
    error = ValidationError("Invalid request data", fields=field_errors(exc.errors()))
    return JSONResponse(status_code=error.status_code, content={"detail": error.to_detail()})


async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Storage fault on {request.method} {request.url.path}")
    fault = InternalFault()
    return JSONResponse(status_code=fault.status_code, content={"detail": fault.to_detail()})


def create_app(lifespan=None) -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(products.categories_router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(customers.router)
    app.include_router(reviews.router)
    app.include_router(stats.router)
    app.include_router(newsletter.router)

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)

    return app
