"""
Module to contain base class for CMS publishing targets
"""
from abc import ABC, abstractmethod
from typing import Optional

from core.entities import PublishedPost, StagedRecord


class CmsClient(ABC):
    """
    Base interface for the CMS that staged records are published to.
    """

    name: str

    @abstractmethod
    async def create_post(self, record: StagedRecord) -> Optional[PublishedPost]:
        """
        Create a post for the record.
        Returns None on failure; the record then stays staged.
        """
        raise NotImplementedError
