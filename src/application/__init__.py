"""Application Layer.

Orchestrates domain operations for an interactive planning session:
mode handling, selection, rendering instructions and operator notices.
"""
