"""
Task Tracker - status lifecycle service for tasks.

Tasks move through a strict linear lifecycle:
Pending -> InProgress -> Finished. Finished tasks are immutable.
Every operation returns an Outcome instead of raising for domain
rule violations.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
