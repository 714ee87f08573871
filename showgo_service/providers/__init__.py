import logging
from typing import Optional

from showgo_service.config import Settings
from showgo_service.providers.geoapify import GeoapifyClient, dedupe
from showgo_service.providers.ticketmaster import TicketmasterEventSearchClient

logger = logging.getLogger("showgo_service")


def build_event_search_client(settings: Settings) -> Optional[TicketmasterEventSearchClient]:
  if not settings.ticketmaster_api_key:
    logger.info("TICKETMASTER_API_KEY not set; event search disabled.")
    return None
  return TicketmasterEventSearchClient(settings.ticketmaster_api_key, timeout=settings.provider_timeout)


def build_geoapify_client(settings: Settings) -> Optional[GeoapifyClient]:
  if not settings.geoapify_api_key:
    logger.info("GEOAPIFY_API_KEY not set; places and autocomplete disabled.")
    return None
  return GeoapifyClient(settings.geoapify_api_key, timeout=settings.provider_timeout)


__all__ = [
  "GeoapifyClient",
  "TicketmasterEventSearchClient",
  "build_event_search_client",
  "build_geoapify_client",
  "dedupe",
]
