import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError as SchemaError

from showgo_service.errors import PersistenceFailure
from showgo_service.models import Event, SavedEvent

logger = logging.getLogger("showgo_service")

SAVE_ERROR = "Error: Could not save event."
UNSAVE_ERROR = "Error: Could not unsave event."
LOAD_ERROR = "Error: Could not load saved events."

_EVENT_LIST = TypeAdapter(List[Event])


class ShortlistRepository(ABC):
  """Get/put/delete contract of the shortlist storage collaborator."""

  @abstractmethod
  async def list_events(self, owner_id: str) -> List[Event]:
    raise NotImplementedError

  @abstractmethod
  async def create(self, owner_id: str, event: Event) -> SavedEvent:
    raise NotImplementedError

  @abstractmethod
  async def delete(self, owner_id: str, event_id: str) -> None:
    raise NotImplementedError


class InMemoryShortlistRepository(ShortlistRepository):
  """Process-local storage keyed by (owner, event id)."""

  def __init__(self) -> None:
    self._records: Dict[str, Dict[str, SavedEvent]] = {}

  async def list_events(self, owner_id: str) -> List[Event]:
    return [record.eventData for record in self._records.get(owner_id, {}).values()]

  async def create(self, owner_id: str, event: Event) -> SavedEvent:
    owned = self._records.setdefault(owner_id, {})
    existing = owned.get(event.id)
    if existing is not None:
      return existing
    record = SavedEvent(userId=owner_id, eventId=event.id, eventData=event)
    owned[event.id] = record
    return record

  async def delete(self, owner_id: str, event_id: str) -> None:
    self._records.get(owner_id, {}).pop(event_id, None)


class HttpShortlistClient(ShortlistRepository):
  """Client-side repository that talks to the service's /saved endpoints."""

  def __init__(
    self,
    base_url: str,
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
  ) -> None:
    self.base_url = base_url.rstrip("/")
    self.timeout = timeout
    self.transport = transport

  def _client(self, owner_id: str) -> httpx.AsyncClient:
    return httpx.AsyncClient(
      base_url=self.base_url,
      headers={"X-User-Id": owner_id},
      timeout=self.timeout,
      transport=self.transport,
    )

  async def _send(self, owner_id: str, method: str, json: Optional[dict] = None) -> httpx.Response:
    try:
      async with self._client(owner_id) as client:
        resp = await client.request(method, "/saved", json=json)
    except httpx.RequestError as exc:
      raise PersistenceFailure(f"Shortlist {method} failed: {exc}") from exc
    if not resp.is_success:
      raise PersistenceFailure(f"Shortlist {method} failed (status={resp.status_code})")
    return resp

  async def list_events(self, owner_id: str) -> List[Event]:
    resp = await self._send(owner_id, "GET")
    try:
      return _EVENT_LIST.validate_python(resp.json())
    except (ValueError, SchemaError) as exc:
      raise PersistenceFailure("Shortlist payload malformed") from exc

  async def create(self, owner_id: str, event: Event) -> SavedEvent:
    resp = await self._send(owner_id, "POST", json={"eventData": event.model_dump(mode="json")})
    try:
      return SavedEvent.model_validate(resp.json())
    except (ValueError, SchemaError) as exc:
      raise PersistenceFailure("Shortlist create response malformed") from exc

  async def delete(self, owner_id: str, event_id: str) -> None:
    await self._send(owner_id, "DELETE", json={"eventId": event_id})


@dataclass(eq=False)
class _Entry:
  """One optimistic insertion, compared by identity."""

  event: Event


class OptimisticSaveStore:
  """Shortlist state that changes immediately and reconciles with storage afterwards.

  A failed save or unsave reverses only its own mutation, so a rollback never
  discards another operation applied while the failing request was in flight.
  """

  def __init__(self, repository: ShortlistRepository, owner_id: str) -> None:
    self.repository = repository
    self.owner_id = owner_id
    self._entries: List[_Entry] = []
    self.message: Optional[str] = None

  @property
  def events(self) -> List[Event]:
    return [entry.event for entry in self._entries]

  def is_saved(self, event_id: str) -> bool:
    return any(entry.event.id == event_id for entry in self._entries)

  def clear_message(self) -> None:
    self.message = None

  async def load(self) -> List[Event]:
    try:
      self._entries = [_Entry(event) for event in await self.repository.list_events(self.owner_id)]
    except PersistenceFailure as exc:
      logger.warning("Failed to load shortlist for %s: %s", self.owner_id, exc)
      self.message = LOAD_ERROR
    return self.events

  async def save(self, event: Event) -> bool:
    if self.is_saved(event.id):
      return True
    entry = _Entry(event)
    self._entries.append(entry)
    try:
      await self.repository.create(self.owner_id, event)
    except PersistenceFailure as exc:
      logger.warning("Failed to save event %s: %s", event.id, exc)
      self._entries = [item for item in self._entries if item is not entry]
      self.message = SAVE_ERROR
      return False
    return True

  async def unsave(self, event_id: str) -> bool:
    index = next((idx for idx, item in enumerate(self._entries) if item.event.id == event_id), None)
    if index is None:
      return True
    removed = self._entries.pop(index)
    try:
      await self.repository.delete(self.owner_id, event_id)
    except PersistenceFailure as exc:
      logger.warning("Failed to unsave event %s: %s", event_id, exc)
      if not self.is_saved(event_id):
        self._entries.insert(min(index, len(self._entries)), removed)
      self.message = UNSAVE_ERROR
      return False
    return True
