"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from catalog_display.api.catalog_router import router as catalog_router
from catalog_display.api.dependencies import CatalogServices, build_services
from catalog_display.utils.config_loader import AppConfig, load_app_config

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# ============================================================================
# STARTUP/SHUTDOWN
# ============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    services: CatalogServices = app.state.services
    config = services.config
    logger.info("Starting Catalog Display API...")
    logger.info(
        "Product source=%s range=%s ttl_ms=%s",
        type(services.source).__name__,
        config.sheets.sheet_range,
        config.cache.products_ttl_ms,
    )
    if not config.sheets.sheet_id and not config.sheets.local_sheet_path:
        logger.warning("SHEET_ID not set; /products will serve an empty list")

    if services.watcher is not None:
        services.watcher.start()
    try:
        yield
    finally:
        if services.watcher is not None:
            services.watcher.stop()
        logger.info("Shutting down Catalog Display API...")


def create_app(config: Optional[AppConfig] = None, services: Optional[CatalogServices] = None) -> FastAPI:
    if services is None:
        services = build_services(config or load_app_config())

    app = FastAPI(
        title="Catalog Display API",
        description="Product catalog, image listing and live image-folder updates",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.services = services

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(catalog_router)

    # Static assets last so the routes above win; "/" is served by the router.
    public_path = services.config.public_path
    if public_path.is_dir():
        app.mount("/", StaticFiles(directory=str(public_path)), name="static")
    else:
        logger.warning("Public folder %s does not exist; static files disabled", public_path)
    return app


app = create_app()
