import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from catalog.api.router import api_router
from catalog.config import Settings, get_settings
from catalog.database.mongo import connect
from catalog.exceptions import CatalogError
from catalog.models import format_errors
from catalog.services.product_service import ProductStore

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = None
    if getattr(app.state, "product_store", None) is None:
        client, collection = connect(app.state.settings)
        app.state.product_store = ProductStore(collection)
    yield
    if client is not None:
        await client.close()
        logger.info("MongoDB client closed")


def create_app(settings: Settings | None = None, collection=None) -> FastAPI:
    """
    Build the API. Pass `collection` to run against an already opened (or
    in-memory) collection instead of connecting to MONGO_URI at startup.
    """
    settings = settings or get_settings()

    app = FastAPI(title="Product Catalog API", lifespan=lifespan)
    app.state.settings = settings
    app.state.product_store = ProductStore(collection) if collection is not None else None
    app.dependency_overrides[get_settings] = lambda: settings

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root():
        return {"status": "running", "message": "Product Catalog API"}

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request", "errors": format_errors(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"message": "Internal Server Error"})

    return app


def run():
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
