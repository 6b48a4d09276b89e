"""Domain layer for Task Tracker.

Pure domain types and rules with no infrastructure dependencies.
"""
