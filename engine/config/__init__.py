"""
Config Module

YAML editor configuration loading and validation.
"""

from .loader import ConfigLoader, EditorConfig, CanvasConfig

__all__ = [
    "ConfigLoader",
    "EditorConfig",
    "CanvasConfig",
]
