"""
Runtime Module

Gesture sequencing for the canvas editor.
"""

from .controller import InteractionController

__all__ = [
    "InteractionController",
]
