import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

# Load .env file when running locally so provider keys are picked up.
load_dotenv()

DEFAULT_SENTIMENT_MODEL = "distilbert-base-uncased-finetuned-sst-2-english"


class Settings:
  """Provider credentials and tuning read once from the environment."""

  def __init__(self) -> None:
    self.ticketmaster_api_key: Optional[str] = os.getenv("TICKETMASTER_API_KEY") or None
    self.hugging_face_api_key: Optional[str] = os.getenv("HUGGING_FACE_API_KEY") or None
    self.hugging_face_model: str = os.getenv("HUGGING_FACE_MODEL", DEFAULT_SENTIMENT_MODEL)
    self.geoapify_api_key: Optional[str] = os.getenv("GEOAPIFY_API_KEY") or None
    self.provider_timeout: float = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "10"))
    self.host: str = os.getenv("HOST", "0.0.0.0")
    self.port: int = int(os.getenv("PORT", "8000"))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  return Settings()
