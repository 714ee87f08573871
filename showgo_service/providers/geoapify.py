import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, ValidationError as SchemaError

from showgo_service.errors import PartialEnrichmentFailure, UpstreamUnavailable
from showgo_service.models import Place

logger = logging.getLogger("showgo_service")

PLACE_RADIUS_METERS = 2000
PLACE_LIMIT = 3


class GeoapifyPlaceProperties(BaseModel):
  name: Optional[str] = None
  address_line2: Optional[str] = None
  formatted: Optional[str] = None


class GeoapifyPlaceFeature(BaseModel):
  properties: GeoapifyPlaceProperties


class GeoapifyPlacesResponse(BaseModel):
  features: List[GeoapifyPlaceFeature] = []


class GeoapifyCityResult(BaseModel):
  city: Optional[str] = None
  state: Optional[str] = None


class GeoapifyAutocompleteResponse(BaseModel):
  results: List[GeoapifyCityResult] = []


def dedupe(items: List[str]) -> List[str]:
  """Drop repeated entries while keeping the first occurrence order."""
  seen = set()
  out: List[str] = []
  for item in items:
    if item and item not in seen:
      seen.add(item)
      out.append(item)
  return out


def _to_place(feature: GeoapifyPlaceFeature) -> Optional[Place]:
  props = feature.properties
  if not props.name:
    return None
  return Place(name=props.name, address=props.address_line2 or props.formatted or "")


class GeoapifyClient:
  """Places and city autocomplete lookups against the Geoapify APIs."""

  places_url = "https://api.geoapify.com/v2/places"
  autocomplete_url = "https://api.geoapify.com/v1/geocode/autocomplete"

  def __init__(
    self,
    api_key: str,
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
  ) -> None:
    self.api_key = api_key
    self.timeout = timeout
    self.transport = transport

  async def places(self, categories: str, lat: float, lon: float) -> List[Place]:
    params = {
      "categories": categories,
      "filter": f"circle:{lon},{lat},{PLACE_RADIUS_METERS}",
      "bias": f"proximity:{lon},{lat}",
      "limit": PLACE_LIMIT,
      "apiKey": self.api_key,
    }
    try:
      async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
        resp = await client.get(self.places_url, params=params)
    except httpx.RequestError as exc:
      raise PartialEnrichmentFailure(f"Geoapify places request failed for {categories}: {exc}") from exc
    if resp.status_code != 200:
      raise PartialEnrichmentFailure(
        f"Geoapify places failed for {categories} (status={resp.status_code}, body={resp.text[:200]})"
      )
    try:
      payload = GeoapifyPlacesResponse.model_validate(resp.json())
    except (ValueError, SchemaError) as exc:
      raise PartialEnrichmentFailure(f"Geoapify places payload malformed for {categories}") from exc

    places = [place for place in (_to_place(feature) for feature in payload.features) if place]
    return places[:PLACE_LIMIT]

  async def autocomplete(self, text: str) -> List[str]:
    params = {"text": text, "type": "city", "format": "json", "apiKey": self.api_key}
    try:
      async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
        resp = await client.get(self.autocomplete_url, params=params)
    except httpx.RequestError as exc:
      logger.error("Geoapify autocomplete request failed (text=%s): %s", text, exc)
      raise UpstreamUnavailable("Location suggestions are unavailable right now.") from exc
    if resp.status_code != 200:
      logger.error(
        "Geoapify autocomplete failed (status=%s, text=%s, body=%s)",
        resp.status_code,
        text,
        resp.text[:200],
      )
      raise UpstreamUnavailable("Location suggestions are unavailable right now.")
    try:
      payload = GeoapifyAutocompleteResponse.model_validate(resp.json())
    except (ValueError, SchemaError) as exc:
      logger.error("Geoapify autocomplete payload malformed: %s", exc)
      raise UpstreamUnavailable("Location suggestions are unavailable right now.") from exc

    labels = [
      ", ".join(part for part in (item.city, item.state) if part)
      for item in payload.results
      if item.city
    ]
    return dedupe(labels)
