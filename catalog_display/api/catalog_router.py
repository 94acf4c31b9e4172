import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, WebSocket
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response

from catalog_display.api.dependencies import CatalogServices, get_services
from catalog_display.error_handler import BadRequestError, ErrorHandler, UpstreamError
from catalog_display.services.image_listing import list_images

logger = logging.getLogger(__name__)

router = APIRouter()
error_handler = ErrorHandler()

NO_STORE = {"Cache-Control": "no-store"}


@router.get("/", include_in_schema=False)
async def index(services: CatalogServices = Depends(get_services)):
    """Entry page, never cached so a redeploy shows up immediately."""
    index_path = services.config.public_path / "index.html"
    if not index_path.is_file():
        raise HTTPException(status_code=404, detail="index.html not found")
    return FileResponse(index_path, headers=NO_STORE)


@router.get("/health", tags=["Health"])
async def health_check(services: CatalogServices = Depends(get_services)):
    cache = services.product_cache
    return {
        "status": "healthy",
        "clients": services.broadcaster.client_count,
        "products_cached": cache.entry.data is not None,
        "cache_age_ms": cache.age_ms(),
        "watching": bool(services.watcher and services.watcher.running),
        "timestamp": datetime.now().isoformat(),
    }


@router.get("/images", tags=["Images"])
def get_images(services: CatalogServices = Depends(get_services)):
    """List image filenames in public/images (no caching, always JSON)."""
    folder = services.config.images_path
    logger.info("[/images] reading folder: %s", folder)
    return JSONResponse(list_images(folder), headers=NO_STORE)


@router.get("/products", tags=["Products"])
async def get_products(services: CatalogServices = Depends(get_services)):
    """Products from the spreadsheet, served through the TTL cache."""
    try:
        products = await services.product_cache.get_products()
    except Exception as e:
        logger.error("[/products] unexpected error: %s", e, exc_info=True)
        products = []
    logger.info("[/products] returned %d items", len(products))
    return JSONResponse([p.to_dict() for p in products], headers=NO_STORE)


@router.get("/products/debug", tags=["Products"])
async def debug_products(services: CatalogServices = Depends(get_services)):
    """Inspect the source: tab names, row count and a sample of raw rows."""
    try:
        diagnostics = await services.source.inspect()
    except Exception as e:
        payload = error_handler.to_payload(e, {"operation": "products.debug"})
        return JSONResponse(payload, status_code=500, headers=NO_STORE)
    return JSONResponse(diagnostics.to_dict(), headers=NO_STORE)


@router.get("/img/{image_id}", tags=["Images"])
async def proxy_image(image_id: str, services: CatalogServices = Depends(get_services)):
    """
    Proxy a remote (Google Drive) image.

    - 400 when the id is malformed, without contacting the upstream
    - 502 when the upstream answers with an error
    """
    try:
        image = await services.image_proxy.fetch_remote_image(image_id)
    except BadRequestError:
        return PlainTextResponse("bad id", status_code=400)
    except UpstreamError:
        return PlainTextResponse("upstream error", status_code=502)
    except Exception as e:
        logger.error("[img] error: %s", e, exc_info=True)
        return PlainTextResponse("proxy error", status_code=500)

    max_age = services.config.image_proxy.max_age_seconds
    return Response(
        content=image.content,
        media_type=image.content_type,
        headers={"Cache-Control": f"public, max-age={max_age}"},
    )


@router.websocket("/ws")
async def updates_socket(websocket: WebSocket):
    """
    Live update channel.

    - Server to client only: {"event": "update"} whenever the image folder changes
    - Anything the client sends is ignored
    """
    broadcaster = websocket.app.state.services.broadcaster
    await websocket.accept()
    broadcaster.connect(websocket)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        broadcaster.disconnect(websocket)
