import pytest
import requests

from cat_gallery.api import CatApiClient, parse_record, parse_records
from cat_gallery.errors import DecodeError, TransportError

from conftest import FakeResponse, FakeSession, cat_json


def test_parse_record_maps_fields():
    record = parse_record(cat_json("abc", ["orange", "sleepy"]))
    assert record.id == "abc"
    assert record.tags == ("orange", "sleepy")
    assert record.created_at == "2022-10-11T07:52:32.000Z"
    assert record.mimetype == "image/jpeg"
    assert record.is_valid


def test_parse_record_accepts_legacy_id_key():
    assert parse_record({"_id": "xyz"}).id == "xyz"


def test_parse_record_defaults_optional_fields():
    record = parse_record({"id": "abc"})
    assert record.tags == ()
    assert record.created_at is None
    assert record.mimetype is None


@pytest.mark.parametrize("data", [{}, {"id": ""}, {"id": None}, {"id": 3}, "abc"])
def test_parse_record_rejects_missing_id(data):
    with pytest.raises(DecodeError):
        parse_record(data)


def test_parse_record_rejects_non_list_tags():
    with pytest.raises(DecodeError):
        parse_record({"id": "abc", "tags": "orange"})


def test_parse_records_discards_invalid_records():
    page = parse_records([cat_json("a"), {"tags": []}, cat_json("b")])
    assert [record.id for record in page.records] == ["a", "b"]
    assert page.raw_count == 3


def test_parse_records_requires_array():
    with pytest.raises(DecodeError):
        parse_records({"cats": []})


def test_fetch_page_sends_window_parameters():
    session = FakeSession([FakeResponse([cat_json("a"), cat_json("b")])])
    client = CatApiClient("https://cataas.com/", timeout=5.0, session=session)

    page = client.fetch_page(skip=40, limit=20)

    assert [record.id for record in page.records] == ["a", "b"]
    call = session.calls[0]
    assert call["url"] == "https://cataas.com/api/cats"
    assert call["params"] == {"skip": 40, "limit": 20}
    assert call["timeout"] == 5.0


def test_fetch_page_wraps_connection_errors():
    session = FakeSession([requests.ConnectionError("refused")])
    client = CatApiClient(session=session)

    with pytest.raises(TransportError) as excinfo:
        client.fetch_page(0, 20)
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_fetch_page_wraps_error_status():
    session = FakeSession([FakeResponse(status_code=503)])
    client = CatApiClient(session=session)

    with pytest.raises(TransportError):
        client.fetch_page(0, 20)


def test_fetch_page_rejects_invalid_json():
    session = FakeSession([FakeResponse(json_error=True)])
    client = CatApiClient(session=session)

    with pytest.raises(DecodeError):
        client.fetch_page(0, 20)


def test_image_url_has_no_extension():
    client = CatApiClient("https://cataas.com", session=FakeSession())
    assert client.image_url("abc") == "https://cataas.com/cat/abc"


def test_context_manager_closes_own_session_only():
    session = FakeSession()
    with CatApiClient(session=session):
        pass
    assert not session.closed
