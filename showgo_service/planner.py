import logging
from typing import Optional

from showgo_service.concurrency import settle_all
from showgo_service.models import PlanResponse
from showgo_service.providers.geoapify import GeoapifyClient

logger = logging.getLogger("showgo_service")

DINING_CATEGORIES = "catering.restaurant"
NIGHTLIFE_CATEGORIES = "entertainment.bar,entertainment.pub"


class PlaceRecommender:
  """Dinner-before and drinks-after suggestions around an event venue."""

  def __init__(self, places_client: Optional[GeoapifyClient]) -> None:
    self.places_client = places_client

  async def recommend(self, lat: float, lon: float) -> PlanResponse:
    if self.places_client is None:
      logger.warning("No places provider configured; returning an empty plan.")
      return PlanResponse()

    restaurants, bars = await settle_all(
      [
        self.places_client.places(DINING_CATEGORIES, lat, lon),
        self.places_client.places(NIGHTLIFE_CATEGORIES, lat, lon),
      ],
      [],
      label="places",
    )
    logger.info("Plan near %s,%s: %s restaurants, %s bars", lat, lon, len(restaurants), len(bars))
    return PlanResponse(restaurants=restaurants[:3], bars=bars[:3])
