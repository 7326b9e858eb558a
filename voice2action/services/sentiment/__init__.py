"""
Urgency scoring plug-ins.

The score is a signed integer; "urgent first" ordering sorts it ascending.
"""

from voice2action.services.sentiment.base import UrgencyScorer
from voice2action.services.sentiment.afinn_provider import AfinnUrgencyScorer
from voice2action.services.sentiment.mock_provider import MockUrgencyScorer
from voice2action.services.sentiment.registry import get_urgency_scorer, build_urgency_scorer

__all__ = [
    "UrgencyScorer",
    "AfinnUrgencyScorer",
    "MockUrgencyScorer",
    "get_urgency_scorer",
    "build_urgency_scorer",
]
