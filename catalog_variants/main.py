from fastapi import FastAPI
import logging

from catalog_variants.core.config import settings

# --- Logging Configuration ---
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")

# Initialize FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Generates product variants from attribute definitions, binds images to them and resolves shopper selections.",
    version="1.0.0",
    license_info={"name": "MIT"},
)

logger.info(f"FastAPI application startup... Environment: {settings.ENVIRONMENT}")

# --- Include REST API routers ---
from catalog_variants.routes.products_api import router as products_api_router
from catalog_variants.routes.storefront_api import router as storefront_api_router

# Router paths are relative; every endpoint lives under API_PREFIX (default /api/v1).
app.include_router(products_api_router, prefix=settings.API_PREFIX)
app.include_router(storefront_api_router, prefix=settings.API_PREFIX)


@app.get("/", tags=["Root"])
async def read_root():
    logger.info("Root path '/' accessed.")
    return {"message": "Welcome to the Catalog Variant Service REST API."}

logger.info("Application setup complete. REST API is active.")
