"""
Unit tests for the Flask calendar app.
"""
from unittest.mock import MagicMock

import pytest
from icalendar import Calendar

from affaldsplan.exceptions import (
    MalformedDateError,
    UpstreamCommunicationError,
    UpstreamProtocolError,
)
from affaldsplan.facade import CalendarPipeline
from affaldsplan.models import Material
from affaldsplan.services.artifact_cache import ArtifactCache
from affaldsplan.services.calendar_service import CalendarService
from renoweb_ics.app_factory import create_app

UPSTREAM_DATES = {
    1: ["Lørdag 01-02-2025", "Lørdag 15-02-2025"],
    2: ["Ingen planlagte tømninger"],
}


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.get_material_list.return_value = [Material(1, "Restaffald"), Material(2, "Glas")]
    client.get_calendar_dates.side_effect = lambda material_id: UPSTREAM_DATES[material_id]
    return client


@pytest.fixture
def client(mock_client, tmp_path):
    pipeline = CalendarPipeline(
        client=mock_client,
        cache=ArtifactCache(str(tmp_path / "cache")),
        calendar_service=CalendarService(),
    )
    app = create_app(pipeline)
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def test_index_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert b"Affaldsplan" in response.data
    assert response.headers["Cache-Control"] == "public"


def test_unknown_path_is_404(client):
    response = client.get("/nope")
    assert response.status_code == 404
    assert response.headers["Cache-Control"] == "public"


def test_ics_download(client):
    response = client.get("/ics?addressId=123")

    assert response.status_code == 200
    assert response.mimetype == "text/calendar"
    assert response.headers["Content-Disposition"] == 'attachment; filename="affaldsafhentning.ics"'
    assert response.headers["Cache-Control"] == "public"
    assert "Last-Modified" in response.headers
    events = Calendar.from_ical(response.data).walk("VEVENT")
    assert len(events) == 2


def test_text_format(client):
    response = client.get("/ics?addressId=123&format=text")

    assert response.status_code == 200
    assert response.mimetype == "text/plain"
    assert "Content-Disposition" not in response.headers
    assert response.data.startswith(b"BEGIN:VCALENDAR")


def test_second_request_is_served_from_cache(client, mock_client):
    first = client.get("/ics?addressId=123")
    second = client.get("/ics?format=text&addressId=123")

    assert mock_client.get_material_list.call_count == 1
    assert first.headers["Last-Modified"] == second.headers["Last-Modified"]
    assert first.data == second.data


def test_if_modified_since_returns_304(client):
    first = client.get("/ics?addressId=123")
    response = client.get(
        "/ics?addressId=123", headers={"If-Modified-Since": first.headers["Last-Modified"]}
    )
    assert response.status_code == 304


def test_missing_address_id(client, mock_client):
    response = client.get("/ics")
    assert response.status_code == 400
    assert response.data == b"Missing addressId"
    mock_client.get_material_list.assert_not_called()


def test_invalid_format(client):
    response = client.get("/ics?addressId=123&format=pdf")
    assert response.status_code == 400
    assert response.data == b"Invalid format"


def test_upstream_protocol_error(client, mock_client):
    mock_client.get_material_list.side_effect = UpstreamProtocolError("bad shape")
    response = client.get("/ics?addressId=123")
    assert response.status_code == 500
    assert response.get_data(as_text=True) == (
        "Noget af det modtagne data fra Renoweb blev ikke parset korrekt. Fejlen var: bad shape"
    )


def test_malformed_date_is_reported_as_parse_error(client, mock_client):
    mock_client.get_calendar_dates.side_effect = MalformedDateError("No date")
    response = client.get("/ics?addressId=123")
    assert response.status_code == 500
    assert "ikke parset korrekt" in response.get_data(as_text=True)


def test_upstream_communication_error(client, mock_client):
    mock_client.get_material_list.side_effect = UpstreamCommunicationError("timed out")
    response = client.get("/ics?addressId=123")
    assert response.status_code == 500
    assert response.get_data(as_text=True) == (
        "Der skete en fejl under kommunikationen med Renoweb: timed out"
    )


def test_unknown_error(client, mock_client):
    mock_client.get_material_list.side_effect = RuntimeError("boom")
    response = client.get("/ics?addressId=123")
    assert response.status_code == 500
    assert response.get_data(as_text=True) == "Der skete en ukendt fejl: boom"


def test_address_search(client, mock_client):
    mock_client.search_addresses.return_value = [{"value": "123", "label": "Torvet 1"}]
    response = client.get("/addressId?address=Torvet")
    assert response.status_code == 200
    assert response.get_json() == [{"value": "123", "label": "Torvet 1"}]
    mock_client.search_addresses.assert_called_once_with("Torvet")


def test_address_search_requires_address(client):
    response = client.get("/addressId")
    assert response.status_code == 400
    assert response.data == b"Missing address search text"


def test_materials(client, mock_client):
    mock_client.get_materials.return_value = [{"id": 1, "materielnavn": "Restaffald"}]
    response = client.get("/materials?addressId=123")
    assert response.status_code == 200
    assert response.get_json() == [{"id": 1, "materielnavn": "Restaffald"}]
    mock_client.get_materials.assert_called_once_with(123)


def test_materials_requires_address_id(client):
    response = client.get("/materials")
    assert response.status_code == 400
    assert response.data == b"Missing addressId"


def test_empty_format_is_rejected(client, mock_client):
    response = client.get("/ics?addressId=123&format=")
    assert response.status_code == 400
    assert response.data == b"Invalid format"
    mock_client.get_material_list.assert_not_called()
