"""
Pipeline configuration loading.
"""

from .pipeline_config import (
    PipelineConfig,
    PipelineConfigLoader,
    ProviderSettings,
    RenderSettings,
    SourceLayout,
)

__all__ = [
    "PipelineConfig",
    "PipelineConfigLoader",
    "ProviderSettings",
    "RenderSettings",
    "SourceLayout",
]
