"""
Dataflow Layer

Event I/O layer for the canvas editor. Contains:
- gateway: HTTP gesture gateway used by the view layer
"""
