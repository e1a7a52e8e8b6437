import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.core.config import settings

# --- Logging Configuration ---
logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)
logger.info(f"Logging configured with level: {settings.LOG_LEVEL.upper()}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    from storefront.db import Base
    from storefront.db.connection import get_engine, get_session
    from storefront.services.auth import ensure_default_admin

    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=get_engine())
        logger.info("Database tables ensured.")
    db = get_session()
    try:
        ensure_default_admin(db)
    finally:
        db.close()
    yield


# Initialize FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Storefront catalog, messages, site settings and admin API, including spreadsheet product import.",
    version="1.0.0",
    lifespan=lifespan,
)

logger.info(f"FastAPI application startup... Environment: {settings.ENVIRONMENT}")


# --- Error rendering: every error body is {"error": <message>} ---
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    logger.info(f"Request validation failed on {request.url.path}: {errors}")
    return JSONResponse(
        status_code=400,
        content={"error": f"{location}: {message}" if location else message},
    )


# --- Include REST API routers ---
from storefront.routes.auth import router as auth_router
from storefront.routes.brands import router as brands_router
from storefront.routes.categories import router as categories_router
from storefront.routes.messages import router as messages_router
from storefront.routes.products import router as products_router
from storefront.routes.site import router as site_router
from storefront.routes.upload import router as upload_router

app.include_router(auth_router, prefix="/api")
app.include_router(categories_router, prefix="/api")
app.include_router(brands_router, prefix="/api")
app.include_router(products_router, prefix="/api")
app.include_router(messages_router, prefix="/api")
app.include_router(upload_router, prefix="/api")
app.include_router(site_router, prefix="/api")


@app.get("/", tags=["Root"])
async def read_root():
    return {"message": f"Welcome to the {settings.PROJECT_NAME} API."}

logger.info("Application setup complete. REST API is active.")
