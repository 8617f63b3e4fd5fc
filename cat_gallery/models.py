"""Data models shared by the API client, the pager and the renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CatRecord:
    """Raw record as returned by the ``/api/cats`` endpoint."""

    id: str
    tags: Tuple[str, ...] = ()
    created_at: Optional[str] = None
    mimetype: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return bool(self.id)


@dataclass(frozen=True)
class CatItem:
    """A displayable cat: image URL plus the dimensions of its card."""

    id: str
    url: str
    tags: Tuple[str, ...]
    width: int
    height: int

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("CatItem.id must be non-empty")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"CatItem dimensions must be positive, got {self.width}x{self.height}"
            )

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class PageRequest:
    """Flat offset/limit window sent to the API for one page."""

    skip: int
    limit: int


@dataclass(frozen=True)
class PageResult(Generic[T]):
    """Items of one loaded page together with its navigation keys."""

    key: int
    items: Tuple[T, ...] = ()
    prev_key: Optional[int] = None
    next_key: Optional[int] = None

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class FetchedPage:
    """Decoded API response: valid records plus the raw record count."""

    records: List[CatRecord] = field(default_factory=list)
    raw_count: int = 0


@dataclass
class ImageAsset:
    """Downloaded and validated cat image stored on disk."""

    cat_id: str
    url: str
    filename: str
    relative_path: str
    width: Optional[int] = None
    height: Optional[int] = None
