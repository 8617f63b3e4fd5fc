"""High-level orchestration for paging through cats and writing a gallery."""

from __future__ import annotations

import functools
import logging
import random
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .api import CatApiClient
from .config import GalleryConfig
from .images import download_images
from .items import to_item
from .markdown import compose_gallery_markdown
from .models import CatItem, ImageAsset, PageResult
from .pager import Pager
from .utils import join_url

logger = logging.getLogger("cat_gallery")


@dataclass
class GalleryResult:
    """Outcome of a gallery run."""

    items: List[CatItem] = field(default_factory=list)
    assets: List[ImageAsset] = field(default_factory=list)
    pages: List[PageResult[CatItem]] = field(default_factory=list)
    output_path: Optional[Path] = None
    total_seconds: float = 0.0

    @property
    def page_count(self) -> int:
        return len(self.pages)


def build_pager(config: GalleryConfig, client: CatApiClient) -> Pager[CatItem]:
    """Create a pager whose items carry image URLs under ``config.base_url``."""
    rng = random.Random(config.seed)
    transform = functools.partial(to_item, base_url=config.base_url, rng=rng)
    return Pager(
        client.fetch_page,
        page_size=config.page_size,
        transform=transform,
        initial_key=config.start_page,
    )


def load_pages(config: GalleryConfig, client: CatApiClient) -> List[PageResult[CatItem]]:
    """Load up to ``config.max_pages`` pages, stopping at the first empty one."""
    pager = build_pager(config, client)
    pages = list(pager.iter_pages(max_pages=config.max_pages))
    logger.info(
        "Loaded %d page(s) with %d cat(s)",
        len(pages),
        sum(len(page) for page in pages),
    )
    return pages


def run_gallery(
    config: GalleryConfig,
    client: Optional[CatApiClient] = None,
) -> GalleryResult:
    """Page through the API, optionally download images and write ``index.md``.

    Fetch errors propagate as :class:`~cat_gallery.errors.GalleryError`.
    """
    overall_start = time.perf_counter()
    owns_client = client is None
    client = client or CatApiClient(config.base_url, timeout=config.timeout)
    try:
        pages = load_pages(config, client)
    finally:
        if owns_client:
            client.close()

    items = [item for page in pages for item in page.items]
    result = GalleryResult(items=items, pages=pages)

    if config.download:
        output_dir = config.output_root
        output_dir.mkdir(parents=True, exist_ok=True)
        result.assets = download_images(items, output_dir, timeout=config.timeout)
        logger.info("Downloaded %d/%d image(s)", len(result.assets), len(items))

        markdown = compose_gallery_markdown(
            items,
            result.assets,
            source_url=join_url(config.base_url, "api/cats"),
            title=config.title,
        )
        output_path = output_dir / "index.md"
        output_path.write_text(markdown, encoding="utf-8")
        logger.info("Saved gallery to %s", output_path)
        result.output_path = output_path

    result.total_seconds = time.perf_counter() - overall_start
    return result
