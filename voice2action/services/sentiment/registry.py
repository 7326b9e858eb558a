"""
Urgency scorer registry.

Selects the scorer named by SENTIMENT_PROVIDER and falls back to the mock
scorer if the lexicon cannot be loaded.
"""

from typing import Optional
import logging

from voice2action.core.settings import settings
from voice2action.services.sentiment.base import UrgencyScorer
from voice2action.services.sentiment.afinn_provider import AfinnUrgencyScorer
from voice2action.services.sentiment.mock_provider import MockUrgencyScorer

logger = logging.getLogger(__name__)


def build_urgency_scorer(provider: str, language: str = "en") -> UrgencyScorer:
    """Construct the scorer for ``provider`` ("afinn" or "mock")."""
    provider = (provider or "").strip().lower()
    if provider == "mock":
        logger.info("Using mock urgency scorer (SENTIMENT_PROVIDER=mock)")
        return MockUrgencyScorer()
    if provider != "afinn":
        logger.warning(f"Unknown SENTIMENT_PROVIDER '{provider}', using afinn")
    try:
        return AfinnUrgencyScorer(language=language)
    except OSError as e:
        logger.error(f"⚠️ AFINN lexicon unavailable ({e}), falling back to mock scorer")
        return MockUrgencyScorer()


# Global scorer instance (singleton)
_scorer: Optional[UrgencyScorer] = None


def get_urgency_scorer() -> UrgencyScorer:
    """Get or create the configured UrgencyScorer singleton."""
    global _scorer
    if _scorer is None:
        _scorer = build_urgency_scorer(settings.SENTIMENT_PROVIDER, settings.SENTIMENT_LANGUAGE)
    return _scorer
