import logging
from typing import List, Optional, Sequence

from showgo_service.concurrency import settle_all
from showgo_service.errors import PartialEnrichmentFailure
from showgo_service.models import (
  EnrichedEvent,
  EnrichedSearchPage,
  Event,
  SearchPage,
  SentimentCandidate,
  Vibe,
)
from showgo_service.sentiment import SentimentClient

logger = logging.getLogger("showgo_service")

FAMILY_TERMS = ("family", "all ages")
ENERGETIC_TERMS = ("concert", "festival", "party")

_SENTIMENT_VIBES = {
  "POSITIVE": Vibe.UPBEAT,
  # Negative sentiment on event copy reads as formal or niche, not bad.
  "NEGATIVE": Vibe.NICHE,
}


def event_description(event: Event) -> str:
  for text in (event.info, event.pleaseNote, event.name):
    if text and text.strip():
      return text
  return ""


def keyword_vibe(description: str) -> Optional[Vibe]:
  """Keyword rules that always win over sentiment classification."""
  text = (description or "").lower()
  if any(term in text for term in FAMILY_TERMS):
    return Vibe.FAMILY_FRIENDLY
  if any(term in text for term in ENERGETIC_TERMS):
    return Vibe.ENERGETIC
  return None


def vibe_from_candidates(candidates: Sequence[SentimentCandidate]) -> Vibe:
  top: Optional[SentimentCandidate] = None
  for candidate in candidates:
    if top is None or candidate.score > top.score:
      top = candidate
  if top is None:
    return Vibe.GENERAL
  return _SENTIMENT_VIBES.get(top.label.upper(), Vibe.GENERAL)


def _enrich(event: Event, vibe: Vibe) -> EnrichedEvent:
  return EnrichedEvent(**{**event.model_dump(), "vibe": vibe})


class VibeClassifier:
  """Attaches a vibe to every event on a search page."""

  def __init__(self, sentiment_client: Optional[SentimentClient] = None) -> None:
    self.sentiment_client = sentiment_client

  async def _classify(self, description: str) -> Vibe:
    candidates = await self.sentiment_client.classify(description)
    if not candidates:
      raise PartialEnrichmentFailure("Sentiment provider returned no candidates")
    return vibe_from_candidates(candidates)

  async def classify_events(self, events: Sequence[Event]) -> List[Vibe]:
    vibes: List[Optional[Vibe]] = []
    pending: List[int] = []
    for idx, event in enumerate(events):
      vibe = keyword_vibe(event_description(event))
      vibes.append(vibe)
      if vibe is None:
        pending.append(idx)

    logger.info("Vibes: %s of %s events matched keyword rules", len(events) - len(pending), len(events))
    if pending and self.sentiment_client is not None:
      results = await settle_all(
        (self._classify(event_description(events[idx])) for idx in pending),
        Vibe.GENERAL,
        label="sentiment",
      )
      for idx, vibe in zip(pending, results):
        vibes[idx] = vibe

    return [vibe or Vibe.GENERAL for vibe in vibes]

  async def enrich(self, page: SearchPage) -> EnrichedSearchPage:
    vibes = await self.classify_events(page.events)
    return EnrichedSearchPage(
      events=[_enrich(event, vibe) for event, vibe in zip(page.events, vibes)],
      pageInfo=page.pageInfo,
    )
