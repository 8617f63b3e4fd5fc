"""Page key arithmetic: request windows, navigation keys and refresh anchors.

Pages are addressed by an integer key starting at 0. A key maps onto the flat
``skip``/``limit`` model of the cat API, and every fetched page yields the keys
of its neighbours. The end of the data set is only detected when a page comes
back empty; the API is never asked for a total count.
"""

from __future__ import annotations

from typing import Iterable, Optional, TypeVar

from .models import PageRequest, PageResult

T = TypeVar("T")


def _check_key(key: int) -> None:
    if key < 0:
        raise ValueError(f"page key must be >= 0, got {key}")


def build_request(key: Optional[int], page_size: int) -> PageRequest:
    """Return the skip/limit window for ``key`` (``None`` means the first page)."""
    if page_size <= 0:
        raise ValueError(f"page_size must be > 0, got {page_size}")
    page = 0 if key is None else key
    _check_key(page)
    return PageRequest(skip=page * page_size, limit=page_size)


def build_result(
    key: int,
    fetched_count: int,
    items: Iterable[T] = (),
) -> PageResult[T]:
    """Derive the neighbouring keys of a fetched page.

    ``fetched_count`` is the number of records the API returned, which may be
    larger than ``len(items)`` when invalid records were discarded.
    """
    _check_key(key)
    if fetched_count < 0:
        raise ValueError(f"fetched_count must be >= 0, got {fetched_count}")
    return PageResult(
        key=key,
        items=tuple(items),
        prev_key=None if key == 0 else key - 1,
        next_key=None if fetched_count == 0 else key + 1,
    )


def resolve_refresh_key(
    anchor_prev_key: Optional[int],
    anchor_next_key: Optional[int],
) -> Optional[int]:
    """Pick the key to reload after the window was invalidated.

    Uses the keys of the page closest to the last viewed position. ``None``
    restarts from the first page.
    """
    if anchor_prev_key is not None:
        return anchor_prev_key + 1
    if anchor_next_key is not None:
        return anchor_next_key - 1
    return None


class PageWindowResolver:
    """The functions above bound to a fixed page size."""

    def __init__(self, page_size: int) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size must be > 0, got {page_size}")
        self.page_size = page_size

    def request_for(self, key: Optional[int]) -> PageRequest:
        return build_request(key, self.page_size)

    def result_for(
        self,
        key: int,
        fetched_count: int,
        items: Iterable[T] = (),
    ) -> PageResult[T]:
        return build_result(key, fetched_count, items)

    @staticmethod
    def refresh_key(
        anchor_prev_key: Optional[int],
        anchor_next_key: Optional[int],
    ) -> Optional[int]:
        return resolve_refresh_key(anchor_prev_key, anchor_next_key)

    def __repr__(self) -> str:
        return f"PageWindowResolver(page_size={self.page_size})"
