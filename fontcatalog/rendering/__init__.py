"""
Font sample rendering.
"""

from .sample_renderer import SampleRenderer

__all__ = ["SampleRenderer"]
