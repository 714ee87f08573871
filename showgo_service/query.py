from datetime import datetime, timezone
from typing import Optional

from showgo_service.errors import ValidationError
from showgo_service.models import Coordinate, SearchQuery

PAGE_SIZE = 20


def _format_start(now: datetime) -> str:
  return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def build_search_query(
  city: Optional[str] = None,
  lat: Optional[float] = None,
  lon: Optional[float] = None,
  page: int = 0,
  now: Optional[datetime] = None,
) -> SearchQuery:
  """Validate a city or coordinate search and bound it to start at the current instant.

  The lower bound is the current UTC instant rather than midnight so that
  same-day events are not hidden by time zone skew between client and server.
  """
  city = (city or "").strip() or None
  has_lat = lat is not None
  has_lon = lon is not None

  if has_lat != has_lon:
    raise ValidationError("Latitude and longitude must be supplied together.")
  if city and has_lat:
    raise ValidationError("Provide either a city or a coordinate pair, not both.")
  if not city and not has_lat:
    raise ValidationError("City parameter or latitude and longitude are required.")
  if page is None or page < 0:
    raise ValidationError("Page must be a non-negative integer.")

  location = None
  if has_lat:
    if not -90 <= lat <= 90:
      raise ValidationError("Latitude must be between -90 and 90.")
    if not -180 <= lon <= 180:
      raise ValidationError("Longitude must be between -180 and 180.")
    location = Coordinate(latitude=lat, longitude=lon)

  moment = now or datetime.now(timezone.utc)
  return SearchQuery(
    city=city,
    location=location,
    page=page,
    startDateTime=_format_start(moment),
    size=PAGE_SIZE,
  )
