"""
AFINN urgency scorer - lexicon-based valence sum.

Each known word carries a valence between -5 and +5; the score of a text is
the sum over its words. "Pothole is dangerous, terrible smell" sums to a
clearly negative number and sorts ahead of neutral reports in urgent order.
"""

from afinn import Afinn
from typing import Dict
import logging

from voice2action.services.sentiment.base import UrgencyScorer
from voice2action.utils.timestamps import round_half_up

logger = logging.getLogger(__name__)


class AfinnUrgencyScorer(UrgencyScorer):
    """Urgency scorer backed by the ``afinn`` word list."""

    MODEL_NAME = "afinn"
    MODEL_VERSION = "165"

    def __init__(self, language: str = "en"):
        self.language = language
        self._afinn = Afinn(language=language, emoticons=False)
        logger.info(f"✅ AFINN urgency scorer initialized (language={language})")

    def score(self, text: str) -> int:
        if not text or not text.strip():
            return 0
        return round_half_up(self._afinn.score(text))

    def get_model_info(self) -> Dict[str, str]:
        return {"name": self.MODEL_NAME, "version": self.MODEL_VERSION, "language": self.language}
