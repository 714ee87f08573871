"""
Shared builders for test data and stubbed provider responses.
"""
import json
from typing import List

import httpx

from showgo_service.models import Event


def make_event(event_id: str = "ev-1", name: str = "Jazz Night", **fields) -> Event:
  return Event(id=event_id, name=name, **fields)


def candidates(*pairs) -> List[List[dict]]:
  return [[{"label": label, "score": score} for label, score in pairs]]


def response_json(payload, status_code: int = 200) -> httpx.Response:
  return httpx.Response(status_code, content=json.dumps(payload), headers={"Content-Type": "application/json"})
