"""Models package."""
from .task import Period, TagRef, Task, TaskRecord, parse_timestamp, utcnow

__all__ = ["Period", "TagRef", "Task", "TaskRecord", "parse_timestamp", "utcnow"]
