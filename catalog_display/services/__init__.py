"""
Catalog services: product cache, image listing, change broadcasting.
"""

from .broadcast import UPDATE_MESSAGE, BroadcastChannel
from .image_listing import IMAGE_EXTENSIONS, list_images
from .product_cache import CacheEntry, ProductCache
from .watcher import ImageFolderWatcher

__all__ = [
    "UPDATE_MESSAGE",
    "BroadcastChannel",
    "IMAGE_EXTENSIONS",
    "list_images",
    "CacheEntry",
    "ProductCache",
    "ImageFolderWatcher",
]
