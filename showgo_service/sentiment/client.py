from abc import ABC, abstractmethod
from typing import List, Optional, Union

import httpx
from pydantic import TypeAdapter, ValidationError as SchemaError

from showgo_service.config import Settings
from showgo_service.errors import PartialEnrichmentFailure
from showgo_service.models import SentimentCandidate

# The inference API wraps candidates in an outer list per input; older
# deployments return the flat list.
_RESPONSE_ADAPTER = TypeAdapter(Union[List[List[SentimentCandidate]], List[SentimentCandidate]])


def _candidates_from_payload(data) -> List[SentimentCandidate]:
  try:
    parsed = _RESPONSE_ADAPTER.validate_python(data)
  except SchemaError as exc:
    raise PartialEnrichmentFailure("Sentiment payload malformed") from exc
  if not parsed:
    return []
  first = parsed[0]
  if isinstance(first, list):
    return first
  return parsed  # type: ignore[return-value]


class SentimentClient(ABC):
  @abstractmethod
  async def classify(self, text: str) -> List[SentimentCandidate]:
    raise NotImplementedError


class HuggingFaceSentimentClient(SentimentClient):
  def __init__(
    self,
    api_token: str,
    model: str,
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
  ) -> None:
    self.api_token = api_token
    self.model = model
    self.timeout = timeout
    self.transport = transport
    self.api_url = f"https://api-inference.huggingface.co/models/{model}"

  async def classify(self, text: str) -> List[SentimentCandidate]:
    headers = {"Authorization": f"Bearer {self.api_token}"}
    try:
      async with httpx.AsyncClient(timeout=self.timeout, headers=headers, transport=self.transport) as client:
        resp = await client.post(self.api_url, json={"inputs": text})
    except httpx.RequestError as exc:
      raise PartialEnrichmentFailure(f"Sentiment request failed: {exc}") from exc
    if resp.status_code != 200:
      raise PartialEnrichmentFailure(f"Sentiment request failed (status={resp.status_code}, body={resp.text[:200]})")
    try:
      data = resp.json()
    except ValueError as exc:
      raise PartialEnrichmentFailure("Sentiment response was not JSON") from exc
    return _candidates_from_payload(data)


def get_sentiment_client(settings: Settings) -> Optional[SentimentClient]:
  if not settings.hugging_face_api_key:
    return None
  return HuggingFaceSentimentClient(
    api_token=settings.hugging_face_api_key,
    model=settings.hugging_face_model,
    timeout=settings.provider_timeout,
  )
