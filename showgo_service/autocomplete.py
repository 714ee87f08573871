import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Set

from showgo_service.providers.geoapify import dedupe

logger = logging.getLogger("showgo_service")

SuggestionFetcher = Callable[[str], Awaitable[List[str]]]


@dataclass(frozen=True)
class Region:
  """Bounding box of the search input and its suggestion list."""

  left: float
  top: float
  right: float
  bottom: float

  def contains(self, x: float, y: float) -> bool:
    return self.left <= x <= self.right and self.top <= y <= self.bottom


class AutocompleteDebouncer:
  """Turns search box keystrokes into debounced, deduplicated suggestion fetches.

  Must be driven from inside a running event loop. Every fetch is tagged with
  a sequence number; a response is applied only if no newer fetch was issued
  and the input was not cleared while it was in flight.
  """

  def __init__(
    self,
    fetch: SuggestionFetcher,
    delay: float = 0.3,
    min_length: int = 3,
    region: Optional[Region] = None,
    on_change: Optional[Callable[[List[str]], None]] = None,
  ) -> None:
    self.fetch = fetch
    self.delay = delay
    self.min_length = min_length
    self.region = region
    self.on_change = on_change
    self.text = ""
    self.focused = False
    self._suggestions: List[str] = []
    self._timer: Optional[asyncio.TimerHandle] = None
    self._inflight: Optional[asyncio.Task] = None
    self._tasks: Set[asyncio.Task] = set()
    self._seq = 0

  @property
  def suggestions(self) -> List[str]:
    return list(self._suggestions)

  @property
  def pending(self) -> bool:
    return self._timer is not None

  def focus(self) -> None:
    self.focused = True
    self._refresh()

  def blur(self) -> None:
    self.focused = False
    self._refresh()

  def set_text(self, text: str) -> None:
    self.text = text or ""
    self._refresh()

  def pointer_down(self, x: float, y: float) -> None:
    if self.region is not None and not self.region.contains(x, y):
      self.blur()

  def close(self) -> None:
    """Leave the search view: drop the pending timer and ignore in-flight results."""
    self._cancel_timer()
    self._seq += 1

  def _refresh(self) -> None:
    self._cancel_timer()
    if not self.focused or len(self.text) < self.min_length:
      # Invalidate anything still in flight so it cannot repopulate the list.
      self._seq += 1
      self._set_suggestions([])
      return
    loop = asyncio.get_running_loop()
    self._timer = loop.call_later(self.delay, self._fire, self.text)

  def _cancel_timer(self) -> None:
    if self._timer is not None:
      self._timer.cancel()
      self._timer = None

  def _fire(self, text: str) -> None:
    self._timer = None
    self._seq += 1
    task = asyncio.ensure_future(self._run_fetch(text, self._seq))
    # Superseded fetches keep running until they finish; hold them until then.
    self._tasks.add(task)
    task.add_done_callback(self._tasks.discard)
    self._inflight = task

  async def _run_fetch(self, text: str, seq: int) -> None:
    try:
      results = await self.fetch(text)
    except Exception as exc:
      logger.warning("Suggestion fetch for %r failed: %s", text, exc)
      return
    if seq != self._seq:
      logger.debug("Dropping stale suggestions for %r (seq=%s, latest=%s)", text, seq, self._seq)
      return
    self._set_suggestions(dedupe(list(results)))

  async def wait_idle(self) -> None:
    """Wait for the most recently issued fetch to finish."""
    if self._inflight is not None:
      await asyncio.gather(self._inflight, return_exceptions=True)

  def _set_suggestions(self, suggestions: List[str]) -> None:
    if suggestions == self._suggestions:
      return
    self._suggestions = suggestions
    if self.on_change is not None:
      self.on_change(list(suggestions))
