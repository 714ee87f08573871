from showgo_service.sentiment.client import (
  SentimentClient,
  HuggingFaceSentimentClient,
  get_sentiment_client,
)

__all__ = ["SentimentClient", "HuggingFaceSentimentClient", "get_sentiment_client"]
