"""Cat image downloading and validation utilities."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import requests
from filetype import guess
from PIL import Image, UnidentifiedImageError

from .config import DEFAULT_TIMEOUT
from .models import CatItem, ImageAsset
from .utils import slugify

logger = logging.getLogger("cat_gallery.images")

MIN_IMAGE_BYTES = 512
MAX_IMAGE_BYTES = 10 * 1024 * 1024
IMAGE_EXTENSIONS = frozenset({"png", "jpg", "gif", "webp", "bmp", "tiff"})


def _image_subtype(mime: Optional[str]) -> Optional[str]:
    """Map an ``image/*`` MIME type onto a file extension; ``jpeg`` becomes ``jpg``."""
    if not mime:
        return None
    major, _, subtype = mime.split(";", 1)[0].strip().lower().partition("/")
    if major != "image" or not subtype:
        return None
    return "jpg" if subtype in ("jpeg", "pjpeg") else subtype


def infer_image_extension(content_type: Optional[str], data: bytes) -> Optional[str]:
    """Guess an extension from the file signature, then from ``Content-Type``."""
    kind = guess(data)
    return _image_subtype(kind.mime if kind else None) or _image_subtype(content_type)


def measure_image(data: bytes) -> Optional[Tuple[int, int]]:
    """Return the pixel size of an encoded image, or None if Pillow can't read it."""
    try:
        with Image.open(io.BytesIO(data)) as image:
            return image.size
    except (UnidentifiedImageError, OSError) as exc:
        logger.debug("Could not read image dimensions: %s", exc)
        return None


def _fetch_image(
    session: requests.Session, item: CatItem, timeout: float
) -> Optional[Tuple[bytes, str]]:
    """Download one cat and return its bytes and extension if it is usable."""
    try:
        resp = session.get(item.url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Failed to fetch cat %s: %s", item.id, exc)
        return None

    data = resp.content
    if not MIN_IMAGE_BYTES <= len(data) <= MAX_IMAGE_BYTES:
        logger.warning(
            "Skipping cat %s: %d bytes is outside [%d, %d]",
            item.id,
            len(data),
            MIN_IMAGE_BYTES,
            MAX_IMAGE_BYTES,
        )
        return None

    content_type = resp.headers.get("Content-Type", "")
    extension = infer_image_extension(content_type, data)
    if extension not in IMAGE_EXTENSIONS:
        logger.warning(
            "Skipping cat %s: not a supported image (Content-Type=%s)",
            item.id,
            content_type,
        )
        return None
    return data, extension


def download_images(
    items: Sequence[CatItem],
    output_dir: Path,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> List[ImageAsset]:
    """Download the image of every item into ``output_dir/images``.

    Cats that fail to download or are not usable images are logged and
    skipped. Repeated URLs are fetched once.
    """
    if not items:
        return []
    image_dir = output_dir / "images"
    image_dir.mkdir(parents=True, exist_ok=True)

    owns_session = session is None
    session = session or requests.Session()
    by_url: Dict[str, ImageAsset] = {}
    assets: List[ImageAsset] = []
    try:
        for position, item in enumerate(items, start=1):
            asset = by_url.get(item.url)
            if asset is None:
                fetched = _fetch_image(session, item, timeout)
                if fetched is None:
                    continue
                asset = _store_image(image_dir, position, item, *fetched)
                if asset is None:
                    continue
                by_url[item.url] = asset
            assets.append(asset)
    finally:
        if owns_session:
            session.close()
    return assets


def _store_image(
    image_dir: Path, position: int, item: CatItem, data: bytes, extension: str
) -> Optional[ImageAsset]:
    filename = f"cat-{position:03d}-{slugify(item.id)}"[:80] + f".{extension}"
    try:
        (image_dir / filename).write_bytes(data)
    except OSError as exc:
        logger.warning("Failed to write %s: %s", filename, exc)
        return None

    size = measure_image(data)
    return ImageAsset(
        cat_id=item.id,
        url=item.url,
        filename=filename,
        relative_path=str(Path("images") / filename),
        width=size[0] if size else None,
        height=size[1] if size else None,
    )
