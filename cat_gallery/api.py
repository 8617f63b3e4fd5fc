"""HTTP client for the cataas.com cat listing endpoint."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import requests

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from .errors import DecodeError, TransportError
from .models import CatRecord, FetchedPage
from .utils import join_url

logger = logging.getLogger("cat_gallery.api")

CATS_ENDPOINT = "api/cats"


def parse_record(data: Any) -> CatRecord:
    """Decode one JSON object into a :class:`CatRecord`."""
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")

    cat_id = data.get("id", data.get("_id"))
    if not isinstance(cat_id, str) or not cat_id:
        raise DecodeError(f"Record is missing a non-empty 'id': {data!r}")

    tags = data.get("tags") or []
    if not isinstance(tags, list):
        raise DecodeError(f"Record {cat_id} has non-list tags: {tags!r}")

    return CatRecord(
        id=cat_id,
        tags=tuple(str(tag) for tag in tags),
        created_at=data.get("createdAt"),
        mimetype=data.get("mimetype"),
    )


def parse_records(payload: Any) -> FetchedPage:
    """Decode a listing payload, discarding records that fail to decode."""
    if not isinstance(payload, list):
        raise DecodeError(
            f"Expected a JSON array of cats, got {type(payload).__name__}"
        )

    records: List[CatRecord] = []
    for index, raw in enumerate(payload):
        try:
            records.append(parse_record(raw))
        except DecodeError as exc:
            logger.warning("Discarding record %d: %s", index, exc)
    return FetchedPage(records=records, raw_count=len(payload))


class CatApiClient:
    """Thin wrapper around a ``requests`` session for the cat API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._session = session or requests.Session()
        self._owns_session = session is None

    def image_url(self, cat_id: str) -> str:
        return join_url(self.base_url, f"cat/{cat_id}")

    def fetch_page(self, skip: int, limit: int) -> FetchedPage:
        """Fetch ``limit`` cats starting at offset ``skip``.

        Raises:
            TransportError: the request failed or returned an error status.
            DecodeError: the body is not a JSON array.
        """
        url = join_url(self.base_url, CATS_ENDPOINT)
        logger.debug("GET %s skip=%d limit=%d", url, skip, limit)
        try:
            resp = self._session.get(
                url,
                params={"skip": skip, "limit": limit},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(f"Failed to fetch cats from {url}: {exc}") from exc

        try:
            payload = resp.json()
        except ValueError as exc:
            raise DecodeError(f"Response from {url} is not valid JSON") from exc

        page = parse_records(payload)
        logger.info(
            "Fetched %d cat(s) (skip=%d, limit=%d, discarded=%d)",
            len(page.records),
            skip,
            limit,
            page.raw_count - len(page.records),
        )
        return page

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "CatApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
