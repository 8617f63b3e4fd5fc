"""Paging consumer that owns the window of loaded pages."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Iterator, List, Optional, Set, Tuple, TypeVar

from .config import DEFAULT_PAGE_SIZE
from .errors import GalleryError
from .items import to_item
from .models import CatRecord, FetchedPage, PageResult
from .paging import PageWindowResolver

logger = logging.getLogger("cat_gallery.pager")

T = TypeVar("T")

FetchFn = Callable[[int, int], FetchedPage]


class LoadState(Enum):
    NOT_LOADING = "not_loading"
    LOADING = "loading"
    ERROR = "error"


class LoadDirection(Enum):
    REFRESH = "refresh"
    APPEND = "append"
    PREPEND = "prepend"


@dataclass
class LoadStates:
    """Load state per direction plus the error of the last failed load."""

    refresh: LoadState = LoadState.NOT_LOADING
    append: LoadState = LoadState.NOT_LOADING
    prepend: LoadState = LoadState.NOT_LOADING
    error: Optional[Exception] = None

    def get(self, direction: LoadDirection) -> LoadState:
        return getattr(self, direction.value)

    def set(self, direction: LoadDirection, state: LoadState) -> None:
        setattr(self, direction.value, state)


class Pager(Generic[T]):
    """Loads pages through ``fetch`` and keeps them in an ordered window.

    The window is a list of :class:`PageResult` objects ordered by key. Loads
    are serialized: a second load of a key that is still in flight raises
    ``RuntimeError``. A failed fetch or transform never touches the window; the
    exception is kept as is on :attr:`load_states` and :meth:`retry` re-issues
    the same request.
    """

    def __init__(
        self,
        fetch: FetchFn,
        page_size: int = DEFAULT_PAGE_SIZE,
        transform: Callable[[CatRecord], T] = to_item,  # type: ignore[assignment]
        max_pages: Optional[int] = None,
        initial_key: Optional[int] = None,
    ) -> None:
        if max_pages is not None and max_pages <= 0:
            raise ValueError(f"max_pages must be > 0, got {max_pages}")
        self._fetch = fetch
        self._transform = transform
        self.resolver = PageWindowResolver(page_size)
        self.max_pages = max_pages
        self.initial_key = initial_key
        self.load_states = LoadStates()
        self._pages: List[PageResult[T]] = []
        self._anchor: Optional[int] = None
        self._failed: Optional[Tuple[LoadDirection, Optional[int]]] = None
        self._in_flight: Set[int] = set()
        self._lock = threading.Lock()

    @property
    def page_size(self) -> int:
        return self.resolver.page_size

    @property
    def pages(self) -> List[PageResult[T]]:
        return list(self._pages)

    @property
    def items(self) -> List[T]:
        return [item for page in self._pages for item in page.items]

    def item_snapshot(self) -> Tuple[T, ...]:
        return tuple(self.items)

    @property
    def anchor_position(self) -> Optional[int]:
        return self._anchor

    def set_anchor(self, position: Optional[int]) -> None:
        """Record the last viewed item position within the window."""
        if position is not None and position < 0:
            raise ValueError(f"anchor position must be >= 0, got {position}")
        self._anchor = position

    def closest_page_to_position(self, position: int) -> Optional[PageResult[T]]:
        """Return the loaded page holding ``position``, or the nearest edge page."""
        if not self._pages:
            return None
        offset = 0
        for page in self._pages:
            offset += len(page)
            if position < offset:
                return page
        return self._pages[-1]

    def refresh_key(self) -> Optional[int]:
        """Key to reload so that the window resumes near the anchor."""
        if self._anchor is None or not self._pages:
            return self.initial_key
        page = self.closest_page_to_position(self._anchor)
        if page is None:
            return self.initial_key
        return self.resolver.refresh_key(page.prev_key, page.next_key)

    def refresh(self) -> Optional[PageResult[T]]:
        """Replace the window with the page at :meth:`refresh_key`."""
        return self._load(LoadDirection.REFRESH, self.refresh_key())

    def load_next(self) -> Optional[PageResult[T]]:
        """Append the page after the window; refreshes an empty window."""
        if not self._pages:
            return self.refresh()
        key = self._pages[-1].next_key
        if key is None:
            logger.debug("End of data reached after page %d", self._pages[-1].key)
            return None
        return self._load(LoadDirection.APPEND, key)

    def load_previous(self) -> Optional[PageResult[T]]:
        """Prepend the page before the window, if there is one."""
        if not self._pages:
            return None
        key = self._pages[0].prev_key
        if key is None:
            return None
        return self._load(LoadDirection.PREPEND, key)

    def retry(self) -> Optional[PageResult[T]]:
        """Re-issue the last failed load."""
        if self._failed is None:
            return None
        direction, key = self._failed
        logger.info("Retrying %s load of page %s", direction.value, key)
        return self._load(direction, key)

    def iter_pages(self, max_pages: Optional[int] = None) -> Iterator[PageResult[T]]:
        """Refresh, then append pages until the data or ``max_pages`` runs out.

        Fetch errors are raised instead of being recorded only.
        """
        result = self._load_or_raise(self.refresh)
        count = 0
        while result is not None:
            yield result
            count += 1
            if max_pages is not None and count >= max_pages:
                return
            if result.next_key is None:
                return
            result = self._load_or_raise(self.load_next)

    def _load_or_raise(
        self, loader: Callable[[], Optional[PageResult[T]]]
    ) -> Optional[PageResult[T]]:
        result = loader()
        if result is None and self._failed is not None and self.load_states.error:
            raise self.load_states.error
        return result

    def _load(
        self, direction: LoadDirection, key: Optional[int]
    ) -> Optional[PageResult[T]]:
        request = self.resolver.request_for(key)
        page_key = 0 if key is None else key
        with self._lock:
            if page_key in self._in_flight:
                raise RuntimeError(f"Page {page_key} is already being loaded")
            self._in_flight.add(page_key)
        self.load_states.set(direction, LoadState.LOADING)
        try:
            fetched = self._fetch(request.skip, request.limit)
            items = [self._transform(record) for record in fetched.records]
            result = self.resolver.result_for(page_key, fetched.raw_count, items)
        except Exception as exc:  # pylint: disable=broad-except
            if isinstance(exc, GalleryError):
                logger.warning(
                    "Failed to load page %d (%s): %s", page_key, direction.value, exc
                )
            else:
                logger.exception(
                    "Unexpected error loading page %d (%s)", page_key, direction.value
                )
            self.load_states.set(direction, LoadState.ERROR)
            self.load_states.error = exc
            self._failed = (direction, key)
            return None
        finally:
            with self._lock:
                self._in_flight.discard(page_key)

        self._insert(direction, result)

        self.load_states.set(direction, LoadState.NOT_LOADING)
        self.load_states.error = None
        self._failed = None
        logger.debug(
            "Loaded page %d with %d item(s) (prev=%s, next=%s)",
            result.key,
            len(result),
            result.prev_key,
            result.next_key,
        )
        return result

    def _insert(self, direction: LoadDirection, result: PageResult[T]) -> None:
        if direction is LoadDirection.REFRESH:
            self._pages = [result]
            self._anchor = None
            self.load_states = LoadStates()
            return
        if direction is LoadDirection.APPEND:
            self._pages.append(result)
            while self.max_pages is not None and len(self._pages) > self.max_pages:
                dropped = self._pages.pop(0)
                logger.debug("Evicted page %d from the front", dropped.key)
                if self._anchor is not None:
                    self._anchor = max(0, self._anchor - len(dropped))
            return
        self._pages.insert(0, result)
        if self._anchor is not None:
            self._anchor += len(result)
        while self.max_pages is not None and len(self._pages) > self.max_pages:
            dropped = self._pages.pop()
            logger.debug("Evicted page %d from the back", dropped.key)
