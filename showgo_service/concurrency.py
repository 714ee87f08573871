import asyncio
import logging
from typing import Awaitable, Iterable, List, TypeVar

logger = logging.getLogger("showgo_service")

T = TypeVar("T")


async def _settle(awaitable: Awaitable[T], fallback: T, label: str, index: int) -> T:
  try:
    return await awaitable
  except Exception as exc:
    logger.warning("%s task %s failed, using fallback: %s", label, index, exc)
    return fallback


async def settle_all(awaitables: Iterable[Awaitable[T]], fallback: T, label: str = "enrichment") -> List[T]:
  """Run every awaitable concurrently and wait for all of them to settle.

  A task that raises is replaced by ``fallback``, so the join itself never
  fails. Results line up positionally with the inputs regardless of the
  order in which the tasks completed.
  """
  wrapped = [_settle(item, fallback, label, idx) for idx, item in enumerate(awaitables)]
  if not wrapped:
    return []
  return list(await asyncio.gather(*wrapped))
