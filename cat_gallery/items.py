"""Transform raw API records into displayable gallery items."""

from __future__ import annotations

import random
from typing import Iterable, List, Optional, Tuple

from .config import DEFAULT_BASE_URL
from .models import CatItem, CatRecord
from .utils import join_url

# The API does not report image sizes, so cards get a random size in these
# half-open ranges to produce a staggered layout.
WIDTH_RANGE = (300, 500)
HEIGHT_RANGE = (300, 600)


def to_item(
    record: CatRecord,
    base_url: str = DEFAULT_BASE_URL,
    rng: Optional[random.Random] = None,
    width_range: Tuple[int, int] = WIDTH_RANGE,
    height_range: Tuple[int, int] = HEIGHT_RANGE,
) -> CatItem:
    """Build a :class:`CatItem` for ``record`` with card dimensions from ``rng``."""
    rng = rng or random.Random()
    return CatItem(
        id=record.id,
        url=join_url(base_url, f"cat/{record.id}"),
        tags=tuple(record.tags),
        width=rng.randrange(*width_range),
        height=rng.randrange(*height_range),
    )


def to_items(
    records: Iterable[CatRecord],
    base_url: str = DEFAULT_BASE_URL,
    rng: Optional[random.Random] = None,
) -> List[CatItem]:
    rng = rng or random.Random()
    return [to_item(record, base_url, rng) for record in records]
