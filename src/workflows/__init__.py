"""
Workflows module - Pipeline orchestration for staging and publishing.
"""
from workflows.base import IngestionPipeline
from workflows.pipeline import StagingPipeline
from workflows.pipeline_factory import create_pipeline_from_config

__all__ = [
    "IngestionPipeline",
    "StagingPipeline",
    "create_pipeline_from_config",
]
