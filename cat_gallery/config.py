"""Configuration objects and constants for the gallery."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_BASE_URL = "https://cataas.com/"
DEFAULT_PAGE_SIZE = 20
DEFAULT_TIMEOUT = 15.0
DEFAULT_TITLE = "Cat Gallery"


@dataclass
class GalleryConfig:
    """Top-level settings that control paging, downloading and rendering."""

    output_root: Path
    base_url: str = DEFAULT_BASE_URL
    page_size: int = DEFAULT_PAGE_SIZE
    max_pages: int = 3
    start_page: Optional[int] = None
    timeout: float = DEFAULT_TIMEOUT
    download: bool = False
    seed: Optional[int] = None
    title: str = DEFAULT_TITLE
