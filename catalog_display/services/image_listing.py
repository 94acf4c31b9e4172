import logging
import os
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp", ".avif"})


def is_image_name(name: str) -> bool:
    return os.path.splitext(name)[1].lower() in IMAGE_EXTENSIONS


def list_images(directory: Union[str, Path]) -> List[str]:
    """Image filenames in `directory`, in the order the filesystem returns them.

    A missing or unreadable directory yields an empty list.
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("[/images] folder does NOT exist: %s", directory)
        return []

    try:
        with os.scandir(directory) as entries:
            return [e.name for e in entries if e.is_file() and is_image_name(e.name)]
    except OSError as e:
        logger.error("[/images] error reading %s: %s", directory, e)
        return []
