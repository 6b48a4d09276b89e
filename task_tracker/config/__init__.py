"""Configuration for Task Tracker."""

from task_tracker.config.task_config import TaskTrackerConfig

__all__ = ["TaskTrackerConfig"]
