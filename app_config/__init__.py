"""
Configuration package for ClearView AI.
Centralizes all tunable parameters, constants and runtime settings.
"""

from .constants import (
    UploadConfig,
    CanvasConfig,
    GeminiConfig,
    UIConfig,
    PerformanceConfig
)

__all__ = [
    'UploadConfig',
    'CanvasConfig',
    'GeminiConfig',
    'UIConfig',
    'PerformanceConfig'
]
