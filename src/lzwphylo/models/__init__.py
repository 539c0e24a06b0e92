"""
Pydantic models for lzwphylo configuration.
"""

from lzwphylo.models.config import KernelConfig, PipelineConfig, TreeConfig

__all__ = [
    "KernelConfig",
    "PipelineConfig",
    "TreeConfig",
]
