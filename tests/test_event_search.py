"""
Unit tests for the Ticketmaster event search client.
"""
from datetime import date, datetime, timezone

import httpx
import pytest

from helpers import response_json
from showgo_service.errors import UpstreamUnavailable
from showgo_service.providers.ticketmaster import TicketmasterEventSearchClient
from showgo_service.query import build_search_query

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def _client(handler) -> TicketmasterEventSearchClient:
  return TicketmasterEventSearchClient("tm-key", transport=httpx.MockTransport(handler))


class TestTicketmasterEventSearchClient:
  """Test cases for TicketmasterEventSearchClient.search."""

  @pytest.mark.asyncio
  async def test_search_returns_page(self, ticketmaster_payload):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
      seen["params"] = dict(request.url.params)
      return response_json(ticketmaster_payload)

    page = await _client(handler).search(build_search_query(city="Philadelphia", page=0, now=NOW))

    assert seen["params"]["city"] == "Philadelphia"
    assert seen["params"]["apikey"] == "tm-key"
    assert seen["params"]["startDateTime"] == "2026-10-19T12:00:00Z"
    assert seen["params"]["size"] == "20"
    assert seen["params"]["sort"] == "date,asc"
    assert [event.id for event in page.events] == ["G5vYZ9", "Z7r9k"]
    assert page.pageInfo.totalPages == 3
    assert page.pageInfo.number == 0

  @pytest.mark.asyncio
  async def test_event_fields_are_normalized(self, ticketmaster_payload):
    page = await _client(lambda request: response_json(ticketmaster_payload)).search(
      build_search_query(city="Philadelphia", now=NOW)
    )
    first, second = page.events

    assert first.venueName == "Citizens Bank Park"
    assert first.venueLocation.latitude == pytest.approx(39.9061)
    assert first.startDate == date(2026, 10, 21)
    assert first.info == "Gates open at 5pm."
    assert first.primary_image_url() == "https://img.example/16_9.jpg"
    assert second.venueName == "Venue TBD"
    assert second.venueLocation is None
    assert second.pleaseNote == "No re-entry."

  @pytest.mark.asyncio
  async def test_unparsable_venue_location_is_dropped(self, ticketmaster_payload):
    venue = ticketmaster_payload["_embedded"]["events"][0]["_embedded"]["venues"][0]
    venue["location"] = {"latitude": "n/a", "longitude": "-75.1"}

    page = await _client(lambda request: response_json(ticketmaster_payload)).search(
      build_search_query(city="Philadelphia", now=NOW)
    )

    assert page.events[0].venueLocation is None

  @pytest.mark.asyncio
  async def test_zero_results_is_empty_page(self):
    payload = {"page": {"size": 20, "totalElements": 0, "totalPages": 0, "number": 0}}

    page = await _client(lambda request: response_json(payload)).search(build_search_query(city="Nowhere", now=NOW))

    assert page.events == []
    assert page.pageInfo.totalPages == 0
    assert page.pageInfo.number == 0

  @pytest.mark.asyncio
  async def test_non_success_raises_upstream_unavailable(self, caplog):
    handler = lambda request: httpx.Response(401, text='{"fault": "Invalid ApiKey secret-detail"}')

    with pytest.raises(UpstreamUnavailable) as exc_info:
      await _client(handler).search(build_search_query(city="Philadelphia", now=NOW))

    assert "secret-detail" not in exc_info.value.message
    assert "secret-detail" in caplog.text

  @pytest.mark.asyncio
  async def test_transport_failure_raises_upstream_unavailable(self):
    def handler(request: httpx.Request) -> httpx.Response:
      raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamUnavailable):
      await _client(handler).search(build_search_query(city="Philadelphia", now=NOW))

  @pytest.mark.asyncio
  async def test_malformed_event_raises_upstream_unavailable(self):
    payload = {"_embedded": {"events": [{"name": "No id here"}]}, "page": {"totalPages": 1, "number": 0}}

    with pytest.raises(UpstreamUnavailable):
      await _client(lambda request: response_json(payload)).search(build_search_query(city="Philadelphia", now=NOW))
