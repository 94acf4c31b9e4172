import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from catalog_display.integrations.clients.mocks.local_sheet import LocalSheetClient
from catalog_display.integrations.clients.real_http.google_sheets import GoogleSheetsClient
from catalog_display.integrations.clients.real_http.image_proxy import ImageProxyClient
from catalog_display.integrations.contracts.products import ProductSource
from catalog_display.services.broadcast import BroadcastChannel
from catalog_display.services.product_cache import ProductCache
from catalog_display.services.watcher import ImageFolderWatcher
from catalog_display.utils.config_loader import AppConfig, resolve_path

logger = logging.getLogger(__name__)


@dataclass
class CatalogServices:
    """Everything the handlers share. Created once per app, torn down with it."""

    config: AppConfig
    source: ProductSource
    product_cache: ProductCache
    broadcaster: BroadcastChannel
    image_proxy: ImageProxyClient
    watcher: Optional[ImageFolderWatcher] = None


def build_product_source(config: AppConfig) -> ProductSource:
    sheets = config.sheets
    if sheets.local_sheet_path:
        logger.info("Using local product sheet %s", sheets.local_sheet_path)
        return LocalSheetClient(resolve_path(sheets.local_sheet_path))
    return GoogleSheetsClient(
        sheet_id=sheets.sheet_id,
        sheet_range=sheets.sheet_range,
        service_account_b64=sheets.service_account_b64,
        timeout_seconds=sheets.timeout_seconds,
    )


def build_services(config: AppConfig) -> CatalogServices:
    source = build_product_source(config)
    broadcaster = BroadcastChannel()
    watcher = None
    if config.watch.enabled:
        watcher = ImageFolderWatcher(
            config.images_path,
            on_change=broadcaster.broadcast_changed,
            debounce_ms=config.watch.debounce_ms,
        )
    return CatalogServices(
        config=config,
        source=source,
        product_cache=ProductCache(source, ttl_ms=config.cache.products_ttl_ms),
        broadcaster=broadcaster,
        image_proxy=ImageProxyClient(
            url_template=config.image_proxy.url_template,
            timeout_seconds=config.image_proxy.timeout_seconds,
        ),
        watcher=watcher,
    )


def get_services(request: Request) -> CatalogServices:
    """Dependency for the shared service container"""
    return request.app.state.services
