"""
Pytest configuration and fixtures.
"""
import pytest

from showgo_service.models import Coordinate, Event, EventImage


@pytest.fixture
def sample_event() -> Event:
  return Event(
    id="G5vYZ9",
    name="Phillies vs. Mets",
    url="https://www.ticketmaster.com/event/G5vYZ9",
    images=[
      EventImage(ratio="4_3", url="https://img.example/4_3.jpg"),
      EventImage(ratio="16_9", url="https://img.example/16_9.jpg"),
    ],
    venueName="Citizens Bank Park",
    venueLocation=Coordinate(latitude=39.9061, longitude=-75.1665),
  )


@pytest.fixture
def ticketmaster_payload() -> dict:
  """Sample Discovery API response with two events."""
  return {
    "_embedded": {
      "events": [
        {
          "id": "G5vYZ9",
          "name": "Phillies vs. Mets",
          "url": "https://www.ticketmaster.com/event/G5vYZ9",
          "images": [
            {"ratio": "16_9", "url": "https://img.example/16_9.jpg", "width": 640},
            {"ratio": "3_2", "url": "https://img.example/3_2.jpg", "width": 640},
          ],
          "dates": {"start": {"localDate": "2026-10-21", "localTime": "19:05:00"}},
          "info": "Gates open at 5pm.",
          "_embedded": {
            "venues": [
              {
                "name": "Citizens Bank Park",
                "location": {"latitude": "39.9061", "longitude": "-75.1665"},
              }
            ]
          },
        },
        {
          "id": "Z7r9k",
          "name": "Family Fun Festival",
          "url": "https://www.ticketmaster.com/event/Z7r9k",
          "images": [],
          "dates": {"start": {"localDate": "2026-10-22"}},
          "info": "Fun for all ages",
          "pleaseNote": "No re-entry.",
        },
      ]
    },
    "page": {"size": 20, "totalElements": 45, "totalPages": 3, "number": 0},
  }
