from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

PLACEHOLDER_IMAGE_URL = "https://placehold.co/600x400/e2e8f0/4a5568?text=No+Image"


class Vibe(str, Enum):
  """Mood label derived for every enriched event."""

  FAMILY_FRIENDLY = "Family-Friendly"
  ENERGETIC = "Energetic"
  UPBEAT = "Upbeat"
  NICHE = "Niche"
  GENERAL = "General"

  @property
  def display_label(self) -> str:
    return f"{_VIBE_EMOJI[self]} {self.value}"


_VIBE_EMOJI = {
  Vibe.FAMILY_FRIENDLY: "\U0001F468\u200d\U0001F469\u200d\U0001F467",
  Vibe.ENERGETIC: "\u26a1",
  Vibe.UPBEAT: "\U0001F604",
  Vibe.NICHE: "\U0001F9D0",
  Vibe.GENERAL: "\U0001F389",
}


class Coordinate(BaseModel):
  latitude: float = Field(..., ge=-90, le=90)
  longitude: float = Field(..., ge=-180, le=180)


class EventImage(BaseModel):
  ratio: Optional[str] = None
  url: str


class Event(BaseModel):
  """Normalized event as returned by the search provider."""

  model_config = {"frozen": True}

  id: str = Field(..., min_length=1)
  name: str
  url: Optional[str] = None
  images: List[EventImage] = []
  startDate: Optional[date] = None
  venueName: str = "Venue TBD"
  venueLocation: Optional[Coordinate] = None
  info: Optional[str] = None
  pleaseNote: Optional[str] = None

  def primary_image_url(self) -> str:
    for image in self.images:
      if image.ratio == "16_9":
        return image.url
    if self.images:
      return self.images[0].url
    return PLACEHOLDER_IMAGE_URL


class EnrichedEvent(Event):
  vibe: Vibe = Vibe.GENERAL


class PageInfo(BaseModel):
  totalPages: int = Field(0, ge=0)
  number: int = Field(0, ge=0)

  @property
  def has_next(self) -> bool:
    return self.number + 1 < self.totalPages

  @property
  def has_previous(self) -> bool:
    return self.number > 0


class SearchPage(BaseModel):
  events: List[Event] = []
  pageInfo: PageInfo = PageInfo()


class EnrichedSearchPage(BaseModel):
  events: List[EnrichedEvent] = []
  pageInfo: PageInfo = PageInfo()


class SearchQuery(BaseModel):
  """Provider-ready search parameters produced by the query normalizer."""

  city: Optional[str] = None
  location: Optional[Coordinate] = None
  page: int = Field(0, ge=0)
  startDateTime: str
  sort: str = "date,asc"
  size: int = 20

  def to_params(self) -> dict:
    params = {
      "sort": self.sort,
      "startDateTime": self.startDateTime,
      "size": self.size,
      "page": self.page,
    }
    if self.city:
      params["city"] = self.city
    if self.location:
      params["latlong"] = f"{self.location.latitude},{self.location.longitude}"
    return params


class Place(BaseModel):
  name: str
  address: str = ""


class PlanResponse(BaseModel):
  restaurants: List[Place] = []
  bars: List[Place] = []


class SentimentCandidate(BaseModel):
  label: str
  score: float


class SavedEvent(BaseModel):
  """Shortlist record pairing an owner with an event snapshot."""

  userId: str
  eventId: str
  eventData: Event


class SaveEventRequest(BaseModel):
  eventData: Event


class UnsaveEventRequest(BaseModel):
  eventId: str = Field(..., min_length=1)
