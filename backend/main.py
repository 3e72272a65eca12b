import asyncio
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import (
    analytics_router,
    cashier_router,
    orders_router,
    payments_router,
    products_router,
    stores_router,
)
from config import Settings, settings
from dependencies import ServiceContainer, build_container
from errors import CatalogLoadError, ScanGoError
from schemas import HealthResponse

logger = logging.getLogger("scan-and-go")

VERSION = "1.0.0"


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location:
        return f"Invalid request: {location} {first.get('msg', '')}".strip()
    return f"Invalid request: {first.get('msg', '')}".strip()


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ScanGoError)
    async def scan_go_error_handler(request: Request, exc: ScanGoError) -> JSONResponse:
        return _failure(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _failure(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


def create_app(
    app_settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    app_settings = app_settings or settings
    container = container or build_container(app_settings)

    app = FastAPI(title="Scan & Go API", version=VERSION)
    app.state.container = container

    allow_origins = app_settings.allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if allow_origins == ["*"]:
        logger.warning(
            "CORS is set to allow all origins with credentials; set ALLOWED_ORIGINS to explicit values outside local dev."
        )

    _register_exception_handlers(app)

    app.include_router(stores_router)
    app.include_router(products_router)
    app.include_router(orders_router)
    app.include_router(cashier_router)
    app.include_router(analytics_router)
    app.include_router(payments_router)

    @app.get("/", response_model=HealthResponse)
    async def health() -> HealthResponse:
        order_count = await asyncio.to_thread(container.repository.count)
        return HealthResponse(
            message="Scan & Go SaaS Backend Running",
            version=VERSION,
            endpoints={
                "stores": "/api/stores",
                "products": "/api/products",
                "orders": "/api/orders/create",
                "cashier": "/api/cashier/pending-orders",
                "analytics": "/api/analytics/dashboard",
            },
            stats={
                "stores": container.catalog.store_count,
                "products": container.catalog.product_count,
                "orders": order_count,
            },
        )

    return app


def load_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the app or stop the process when the catalog cannot be loaded."""
    try:
        return create_app(app_settings)
    except CatalogLoadError as exc:
        logger.critical("Cannot start without catalog data: %s", exc)
        raise SystemExit(1) from exc


logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = load_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
