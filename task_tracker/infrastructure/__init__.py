"""Infrastructure layer for Task Tracker.

Adapters for persistence and cross-cutting observability concerns.
"""
