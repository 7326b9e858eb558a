"""
Mock urgency scorer - deterministic fallback with a tiny fixed word list.

Used when SENTIMENT_PROVIDER=mock and whenever the AFINN scorer cannot be
constructed. Always available and never fails.
"""

import re
from typing import Dict, Optional
import logging

from voice2action.services.sentiment.base import UrgencyScorer

logger = logging.getLogger(__name__)


class MockUrgencyScorer(UrgencyScorer):
    """Sums fixed word weights; unknown words score 0."""

    MODEL_NAME = "mock-lexicon-v1"
    MODEL_VERSION = "1.0.0"

    DEFAULT_WEIGHTS: Dict[str, int] = {
        "danger": -3,
        "dangerous": -3,
        "urgent": -2,
        "broken": -2,
        "terrible": -3,
        "bad": -3,
        "dirty": -2,
        "sick": -2,
        "flooded": -2,
        "accident": -2,
        "good": 3,
        "thanks": 2,
        "thank": 2,
        "fixed": 2,
        "clean": 2,
    }

    WORD_PATTERN = re.compile(r"[a-z']+")

    def __init__(self, weights: Optional[Dict[str, int]] = None):
        self.weights = dict(weights) if weights is not None else dict(self.DEFAULT_WEIGHTS)

    def score(self, text: str) -> int:
        words = self.WORD_PATTERN.findall((text or "").lower())
        return sum(self.weights.get(word, 0) for word in words)

    def get_model_info(self) -> Dict[str, str]:
        return {"name": self.MODEL_NAME, "version": self.MODEL_VERSION}
