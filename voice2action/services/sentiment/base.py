"""
Urgency scorer interface.

Scorers are stateless collaborators injected into IssueService so the
lexicon analyzer can be swapped for a deterministic fake in tests.
"""

from abc import ABC, abstractmethod
from typing import Dict
import logging

logger = logging.getLogger(__name__)


class UrgencyScorer(ABC):
    """
    Abstract base class for urgency (sentiment) scorers.

    Contract:
    - Input: the concatenation of title and description
    - Output: one signed integer; lower (more negative) = more negative tone
    - The score is computed once at creation and stored immutably
    """

    @abstractmethod
    def score(self, text: str) -> int:
        raise NotImplementedError

    @abstractmethod
    def get_model_info(self) -> Dict[str, str]:
        """
        Get model information (name, version).

        Returns:
            Dict with 'name' and 'version' keys
        """
        raise NotImplementedError
