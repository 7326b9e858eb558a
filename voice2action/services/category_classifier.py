"""
Category classifier - fixed keyword rules, no ML.

Rules are tested in order and the first rule with any keyword hit wins, so a
report mentioning both a road and garbage is filed under Roads. Keywords
include Bangla terms used by citizens in the original deployment.
"""

from typing import List, Optional, Tuple
import logging

from voice2action.models.issue import Category

logger = logging.getLogger(__name__)


CATEGORY_RULES: List[Tuple[Category, Tuple[str, ...]]] = [
    (Category.ROADS, ("road", "গর্ত", "রাস্তা", "pothole", "bridge")),
    (Category.WASTE, ("garbage", "waste", "ময়লা", "dustbin", "collection")),
    (Category.FLOODING, ("waterlogging", "flood", "জলাবদ্ধতা", "drain")),
    (Category.HEALTH, ("clinic", "hospital", "doctor", "health", "ভ্যাকসিন")),
    (Category.EDUCATION, ("school", "college", "education", "বিদ্যালয়")),
]


def classify(text: Optional[str]) -> Category:
    """Map free text to a Category by substring match; General if nothing matches."""
    lowered = (text or "").lower()
    for category, keywords in CATEGORY_RULES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return Category.GENERAL


def resolve_category(explicit: Optional[str], title: str, description: str) -> str:
    """
    Use the citizen's category when they gave a non-empty one, else classify.

    An explicit category is kept verbatim (stripped) even if it is not one
    of the Category values.
    """
    if explicit and explicit.strip():
        return explicit.strip()
    category = classify(f"{title} {description}")
    logger.debug(f"Auto-classified report as {category.value}")
    return category.value
