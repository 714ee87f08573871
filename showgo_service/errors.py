class ShowGoError(Exception):
  """Base class for errors raised by the ShowGo service."""

  def __init__(self, message: str) -> None:
    super().__init__(message)
    self.message = message


class ValidationError(ShowGoError):
  """Required input was missing or malformed."""


class UpstreamUnavailable(ShowGoError):
  """A search, places or autocomplete provider failed or could not be reached."""


class PartialEnrichmentFailure(ShowGoError):
  """A single enrichment call failed; always replaced by a fallback value."""


class PersistenceFailure(ShowGoError):
  """The shortlist storage collaborator rejected or failed a request."""


class NotAuthenticated(ShowGoError):
  """No caller identity was forwarded with a shortlist request."""
