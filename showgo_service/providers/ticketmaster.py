import logging
from datetime import date
from typing import List, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError as SchemaError

from showgo_service.errors import UpstreamUnavailable
from showgo_service.models import (
  Coordinate,
  Event,
  EventImage,
  PageInfo,
  SearchPage,
  SearchQuery,
)

logger = logging.getLogger("showgo_service")


class TicketmasterVenueLocation(BaseModel):
  latitude: Optional[str] = None
  longitude: Optional[str] = None


class TicketmasterVenue(BaseModel):
  name: Optional[str] = None
  location: Optional[TicketmasterVenueLocation] = None


class TicketmasterEventEmbedded(BaseModel):
  venues: List[TicketmasterVenue] = []


class TicketmasterStart(BaseModel):
  localDate: Optional[date] = None


class TicketmasterDates(BaseModel):
  start: TicketmasterStart = TicketmasterStart()


class TicketmasterEvent(BaseModel):
  id: str = Field(..., min_length=1)
  name: str
  url: Optional[str] = None
  images: List[EventImage] = []
  dates: TicketmasterDates = TicketmasterDates()
  info: Optional[str] = None
  pleaseNote: Optional[str] = None
  embedded: Optional[TicketmasterEventEmbedded] = Field(None, alias="_embedded")


class TicketmasterEmbedded(BaseModel):
  events: List[TicketmasterEvent] = []


class TicketmasterPage(BaseModel):
  totalPages: int = Field(0, ge=0)
  number: int = Field(0, ge=0)


class TicketmasterResponse(BaseModel):
  embedded: Optional[TicketmasterEmbedded] = Field(None, alias="_embedded")
  page: Optional[TicketmasterPage] = None


def _parse_coordinate(location: Optional[TicketmasterVenueLocation]) -> Optional[Coordinate]:
  if not location or not location.latitude or not location.longitude:
    return None
  try:
    return Coordinate(latitude=float(location.latitude), longitude=float(location.longitude))
  except (ValueError, SchemaError):
    return None


def to_event(raw: TicketmasterEvent) -> Event:
  venues = raw.embedded.venues if raw.embedded else []
  venue = venues[0] if venues else None
  return Event(
    id=raw.id,
    name=raw.name,
    url=raw.url,
    images=raw.images,
    startDate=raw.dates.start.localDate,
    venueName=(venue.name if venue and venue.name else "Venue TBD"),
    venueLocation=_parse_coordinate(venue.location) if venue else None,
    info=raw.info,
    pleaseNote=raw.pleaseNote,
  )


class TicketmasterEventSearchClient:
  """Runs a normalized query against the Ticketmaster Discovery API."""

  base_url = "https://app.ticketmaster.com/discovery/v2/events.json"

  def __init__(
    self,
    api_key: str,
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
  ) -> None:
    self.api_key = api_key
    self.timeout = timeout
    self.transport = transport

  async def search(self, query: SearchQuery) -> SearchPage:
    params = {**query.to_params(), "apikey": self.api_key}
    try:
      async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
        resp = await client.get(self.base_url, params=params)
    except httpx.RequestError as exc:
      logger.error("Ticketmaster request failed (city=%s, page=%s): %s", query.city, query.page, exc)
      raise UpstreamUnavailable("Event search is unavailable right now.") from exc

    if resp.status_code != 200:
      logger.error(
        "Ticketmaster search failed (status=%s, city=%s, page=%s, body=%s)",
        resp.status_code,
        query.city,
        query.page,
        resp.text[:200],
      )
      raise UpstreamUnavailable("Event search is unavailable right now.")

    try:
      payload = TicketmasterResponse.model_validate(resp.json())
    except (ValueError, SchemaError) as exc:
      logger.error("Ticketmaster returned a malformed payload: %s", exc)
      raise UpstreamUnavailable("Event search is unavailable right now.") from exc

    raw_events = payload.embedded.events if payload.embedded else []
    logger.info("Ticketmaster returned %s events for city=%s page=%s", len(raw_events), query.city, query.page)
    if not raw_events:
      return SearchPage(events=[], pageInfo=PageInfo(totalPages=0, number=0))

    page = payload.page or TicketmasterPage(totalPages=1, number=query.page)
    total_pages = max(page.totalPages, page.number + 1)
    return SearchPage(
      events=[to_event(item) for item in raw_events],
      pageInfo=PageInfo(totalPages=total_pages, number=page.number),
    )
