import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from showgo_service.config import Settings, get_settings
from showgo_service.errors import (
  NotAuthenticated,
  PersistenceFailure,
  UpstreamUnavailable,
  ValidationError,
)
from showgo_service.identity import get_owner_id
from showgo_service.models import (
  EnrichedSearchPage,
  Event,
  PlanResponse,
  SaveEventRequest,
  SavedEvent,
  UnsaveEventRequest,
)
from showgo_service.planner import PlaceRecommender
from showgo_service.providers import (
  GeoapifyClient,
  TicketmasterEventSearchClient,
  build_event_search_client,
  build_geoapify_client,
)
from showgo_service.query import build_search_query
from showgo_service.sentiment import get_sentiment_client
from showgo_service.shortlist import InMemoryShortlistRepository, ShortlistRepository
from showgo_service.vibes import VibeClassifier

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("showgo_service")

app = FastAPI(
  title="ShowGo Event Service",
  version="0.1.0",
  description="Searches live events, tags each with a vibe and plans nearby food and drinks.",
)

app.add_middleware(
  CORSMiddleware,
  allow_origins=["*"],
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)

_shortlist_repository = InMemoryShortlistRepository()


@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
  return JSONResponse(status_code=400, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
  first = (exc.errors() or [{}])[0]
  field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("query", "body"))
  message = f"Invalid {field}: {first.get('msg')}" if field else "Invalid request."
  return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(UpstreamUnavailable)
async def _upstream_unavailable(request: Request, exc: UpstreamUnavailable) -> JSONResponse:
  return JSONResponse(status_code=502, content={"message": exc.message})


@app.exception_handler(PersistenceFailure)
async def _persistence_failure(request: Request, exc: PersistenceFailure) -> JSONResponse:
  logger.error("Shortlist storage failed: %s", exc)
  return JSONResponse(status_code=500, content={"message": "Could not update saved events."})


@app.exception_handler(NotAuthenticated)
async def _not_authenticated(request: Request, exc: NotAuthenticated) -> JSONResponse:
  return JSONResponse(status_code=401, content={"message": exc.message})


def get_event_search_client(settings: Settings = Depends(get_settings)) -> Optional[TicketmasterEventSearchClient]:
  return build_event_search_client(settings)


def get_vibe_classifier(settings: Settings = Depends(get_settings)) -> VibeClassifier:
  return VibeClassifier(get_sentiment_client(settings))


def get_geoapify_client(settings: Settings = Depends(get_settings)) -> Optional[GeoapifyClient]:
  return build_geoapify_client(settings)


def get_shortlist_repository() -> ShortlistRepository:
  return _shortlist_repository


@app.get("/health")
async def health() -> dict:
  return {"ok": True}


@app.get("/search", response_model=EnrichedSearchPage)
async def search(
  city: Optional[str] = None,
  lat: Optional[float] = None,
  lon: Optional[float] = None,
  page: int = 0,
  search_client: Optional[TicketmasterEventSearchClient] = Depends(get_event_search_client),
  classifier: VibeClassifier = Depends(get_vibe_classifier),
) -> EnrichedSearchPage:
  query = build_search_query(city=city, lat=lat, lon=lon, page=page)
  if search_client is None:
    logger.error("Search requested but no event provider is configured.")
    raise UpstreamUnavailable("Event search is unavailable right now.")
  results = await search_client.search(query)
  return await classifier.enrich(results)


@app.get("/autocomplete", response_model=List[str])
async def autocomplete(
  text: Optional[str] = None,
  geoapify: Optional[GeoapifyClient] = Depends(get_geoapify_client),
) -> List[str]:
  text = (text or "").strip()
  if not text:
    raise ValidationError("Text parameter is required.")
  if len(text) < 3:
    raise ValidationError("Text parameter must be at least 3 characters.")
  if geoapify is None:
    logger.error("Autocomplete requested but GEOAPIFY_API_KEY is not configured.")
    raise UpstreamUnavailable("Location suggestions are unavailable right now.")
  return await geoapify.autocomplete(text)


@app.get("/plan", response_model=PlanResponse)
async def plan(
  lat: Optional[float] = None,
  lon: Optional[float] = None,
  geoapify: Optional[GeoapifyClient] = Depends(get_geoapify_client),
) -> PlanResponse:
  if lat is None or lon is None:
    raise ValidationError("Latitude and longitude are required.")
  if not -90 <= lat <= 90 or not -180 <= lon <= 180:
    raise ValidationError("Latitude and longitude are out of range.")
  return await PlaceRecommender(geoapify).recommend(lat, lon)


@app.get("/saved", response_model=List[Event])
async def list_saved(
  owner_id: str = Depends(get_owner_id),
  repository: ShortlistRepository = Depends(get_shortlist_repository),
) -> List[Event]:
  return await repository.list_events(owner_id)


@app.post("/saved", response_model=SavedEvent, status_code=201)
async def create_saved(
  payload: SaveEventRequest,
  owner_id: str = Depends(get_owner_id),
  repository: ShortlistRepository = Depends(get_shortlist_repository),
) -> SavedEvent:
  record = await repository.create(owner_id, payload.eventData)
  logger.info("Saved event %s for %s", record.eventId, owner_id)
  return record


@app.delete("/saved", status_code=204)
async def delete_saved(
  payload: UnsaveEventRequest,
  owner_id: str = Depends(get_owner_id),
  repository: ShortlistRepository = Depends(get_shortlist_repository),
) -> Response:
  await repository.delete(owner_id, payload.eventId)
  logger.info("Removed event %s for %s", payload.eventId, owner_id)
  return Response(status_code=204)


if __name__ == "__main__":
  import uvicorn

  settings = get_settings()
  uvicorn.run("showgo_service.main:app", host=settings.host, port=settings.port, reload=True)
