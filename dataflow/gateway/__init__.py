"""
Gateway Module

HTTP entry point translating view-layer gestures into editor calls.
"""
