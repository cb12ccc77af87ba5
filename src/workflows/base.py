"""
Contains base class for pipelines
"""
from abc import ABC, abstractmethod

from core.entities import RunSummary


class IngestionPipeline(ABC):
    """
    Orchestrates fetch → dedup → enrichment → staging for one feed.
    Callers must not run two `run_once` calls concurrently.
    """

    name: str

    @abstractmethod
    async def run_once(self) -> RunSummary:
        """
        Execute one batch run and report its counts.
        Must never raise uncaught exceptions.
        """
        raise NotImplementedError
