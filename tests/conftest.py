from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
import requests

from cat_gallery.errors import TransportError
from cat_gallery.models import CatRecord, FetchedPage


class FakeResponse:
    def __init__(
        self,
        payload: Any = None,
        status_code: int = 200,
        content: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
        json_error: bool = False,
    ) -> None:
        self._payload = payload
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}
        self._json_error = json_error

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self) -> Any:
        if self._json_error:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """Returns queued responses (or raises queued exceptions) per GET."""

    def __init__(self, responses: Optional[List[Any]] = None) -> None:
        self.responses = list(responses or [])
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


class FakeFetch:
    """Stand-in for CatApiClient.fetch_page serving a fixed number of cats."""

    def __init__(self, total: int, failures: Optional[Dict[int, int]] = None) -> None:
        self.total = total
        self.failures = dict(failures or {})
        self.calls: List[tuple] = []

    def __call__(self, skip: int, limit: int) -> FetchedPage:
        self.calls.append((skip, limit))
        if self.failures.get(skip, 0) > 0:
            self.failures[skip] -= 1
            raise TransportError(f"connection reset at skip={skip}")
        end = min(self.total, skip + limit)
        records = [CatRecord(id=f"cat{i}", tags=("cute",)) for i in range(skip, end)]
        return FetchedPage(records=records, raw_count=len(records))


@pytest.fixture
def fake_session():
    return FakeSession()


def cat_json(cat_id: str, tags=None) -> Dict[str, Any]:
    return {
        "id": cat_id,
        "tags": tags if tags is not None else ["orange"],
        "createdAt": "2022-10-11T07:52:32.000Z",
        "mimetype": "image/jpeg",
    }
