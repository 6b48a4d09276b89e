"""Application layer for Task Tracker.

Use cases and the ports they depend on.
"""
