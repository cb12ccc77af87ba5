"""
Base classes for Ingestion
"""
from abc import ABC, abstractmethod
from typing import List

from core.entities import CanonicalItem


class SourceAdapter(ABC):
    """
    Base interface for feed sources.
    """

    name: str = "source"

    @abstractmethod
    async def fetch_items(self, limit: int) -> List[CanonicalItem]:
        """
        Fetch at most `limit` recent items, normalized and classified.
        Must NEVER raise uncaught exceptions; a failed poll returns [].
        """
        raise NotImplementedError
