"""
Integration tests for the HTTP surface.
"""
import httpx
import pytest
from fastapi.testclient import TestClient

from helpers import response_json
from showgo_service.errors import PersistenceFailure
from showgo_service.main import (
  app,
  get_event_search_client,
  get_geoapify_client,
  get_shortlist_repository,
  get_vibe_classifier,
)
from showgo_service.providers import GeoapifyClient, TicketmasterEventSearchClient
from showgo_service.shortlist import InMemoryShortlistRepository
from showgo_service.vibes import VibeClassifier

OWNER = {"X-User-Id": "user-1"}


class FailingRepository(InMemoryShortlistRepository):
  async def create(self, owner_id, event):
    raise PersistenceFailure("disk full")


@pytest.fixture
def repository():
  return InMemoryShortlistRepository()


@pytest.fixture
def client(repository, ticketmaster_payload):
  def geoapify_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/places"):
      return response_json({
        "features": [{"properties": {"name": f"Place {idx}", "address_line2": "Philadelphia"}} for idx in range(5)]
      })
    return response_json({"results": [{"city": "Philadelphia", "state": "PA"}, {"city": "Philadelphia", "state": "PA"}]})

  app.dependency_overrides[get_event_search_client] = lambda: TicketmasterEventSearchClient(
    "tm-key", transport=httpx.MockTransport(lambda request: response_json(ticketmaster_payload))
  )
  app.dependency_overrides[get_vibe_classifier] = lambda: VibeClassifier(None)
  app.dependency_overrides[get_geoapify_client] = lambda: GeoapifyClient(
    "geo-key", transport=httpx.MockTransport(geoapify_handler)
  )
  app.dependency_overrides[get_shortlist_repository] = lambda: repository
  yield TestClient(app)
  app.dependency_overrides.clear()


class TestSearchEndpoint:
  """Test cases for GET /search."""

  def test_search_by_city(self, client):
    resp = client.get("/search", params={"city": "Philadelphia"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["pageInfo"] == {"totalPages": 3, "number": 0}
    assert [event["vibe"] for event in body["events"]] == ["General", "Family-Friendly"]
    assert body["events"][0]["venueLocation"] == {"latitude": 39.9061, "longitude": -75.1665}

  def test_search_by_coordinates(self, client):
    resp = client.get("/search", params={"lat": 39.95, "lon": -75.16, "page": 1})

    assert resp.status_code == 200

  def test_missing_city_is_400(self, client):
    resp = client.get("/search")

    assert resp.status_code == 400
    assert "required" in resp.json()["message"]

  def test_non_numeric_page_is_400(self, client):
    resp = client.get("/search", params={"city": "Philadelphia", "page": "two"})

    assert resp.status_code == 400
    assert "page" in resp.json()["message"]

  def test_upstream_failure_is_generic_502(self, client):
    app.dependency_overrides[get_event_search_client] = lambda: TicketmasterEventSearchClient(
      "tm-key", transport=httpx.MockTransport(lambda request: httpx.Response(500, text="stack trace here"))
    )

    resp = client.get("/search", params={"city": "Philadelphia"})

    assert resp.status_code == 502
    assert "stack trace" not in resp.text

  def test_unconfigured_provider_is_502(self, client):
    app.dependency_overrides[get_event_search_client] = lambda: None

    resp = client.get("/search", params={"city": "Philadelphia"})

    assert resp.status_code == 502


class TestAutocompleteEndpoint:
  """Test cases for GET /autocomplete."""

  def test_returns_deduplicated_suggestions(self, client):
    resp = client.get("/autocomplete", params={"text": "Phil"})

    assert resp.status_code == 200
    assert resp.json() == ["Philadelphia, PA"]

  def test_missing_text_is_400(self, client):
    resp = client.get("/autocomplete")

    assert resp.status_code == 400
    assert resp.json()["message"] == "Text parameter is required."

  def test_short_text_is_400(self, client):
    assert client.get("/autocomplete", params={"text": "Ph"}).status_code == 400


class TestPlanEndpoint:
  """Test cases for GET /plan."""

  def test_plan_caps_each_category(self, client):
    resp = client.get("/plan", params={"lat": 39.95, "lon": -75.16})

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["restaurants"]) == 3
    assert len(body["bars"]) == 3

  def test_missing_coordinates_is_400(self, client):
    resp = client.get("/plan", params={"lat": 39.95})

    assert resp.status_code == 400
    assert resp.json()["message"] == "Latitude and longitude are required."

  def test_unconfigured_places_returns_empty_lists(self, client):
    app.dependency_overrides[get_geoapify_client] = lambda: None

    resp = client.get("/plan", params={"lat": 39.95, "lon": -75.16})

    assert resp.json() == {"restaurants": [], "bars": []}


class TestSavedEndpoints:
  """Test cases for the /saved shortlist endpoints."""

  def test_requires_identity(self, client):
    resp = client.get("/saved")

    assert resp.status_code == 401
    assert resp.json() == {"message": "Not authenticated"}

  def test_save_list_and_delete(self, client, sample_event):
    event_json = sample_event.model_dump(mode="json")

    assert client.get("/saved", headers=OWNER).json() == []

    created = client.post("/saved", headers=OWNER, json={"eventData": event_json})
    assert created.status_code == 201
    assert created.json()["eventId"] == sample_event.id
    assert created.json()["userId"] == "user-1"

    listed = client.get("/saved", headers=OWNER).json()
    assert [item["id"] for item in listed] == [sample_event.id]
    assert client.get("/saved", headers={"X-User-Id": "user-2"}).json() == []

    deleted = client.request("DELETE", "/saved", headers=OWNER, json={"eventId": sample_event.id})
    assert deleted.status_code == 204
    assert client.get("/saved", headers=OWNER).json() == []

  def test_duplicate_save_keeps_single_record(self, client, sample_event):
    event_json = sample_event.model_dump(mode="json")

    client.post("/saved", headers=OWNER, json={"eventData": event_json})
    client.post("/saved", headers=OWNER, json={"eventData": event_json})

    assert len(client.get("/saved", headers=OWNER).json()) == 1

  def test_missing_event_data_is_400(self, client):
    resp = client.post("/saved", headers=OWNER, json={})

    assert resp.status_code == 400

  def test_storage_failure_is_500(self, client, sample_event):
    app.dependency_overrides[get_shortlist_repository] = lambda: FailingRepository()

    resp = client.post("/saved", headers=OWNER, json={"eventData": sample_event.model_dump(mode="json")})

    assert resp.status_code == 500
    assert resp.json()["message"] == "Could not update saved events."


def test_health(client):
  assert client.get("/health").json() == {"ok": True}
