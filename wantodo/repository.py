"""Persistence boundary for tasks.

Implementations are responsible for the atomicity of a single record's
create, update and delete, and raise ``PersistenceError`` when the
underlying store fails.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from .models import Task


class TaskRepository(ABC):
    """Task repository abstraction for CRUD and window listing."""

    @abstractmethod
    def create(self, task: Task) -> Task:
        """Persist a new task and return the stored entity."""

    @abstractmethod
    def get(self, task_id: str) -> Optional[Task]:
        """Return a task by id (for any owner) or None when missing."""

    @abstractmethod
    def update(self, task: Task) -> Task:
        """Replace the stored task with the same id."""

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        """Delete a task by id. Returns False if it did not exist."""

    @abstractmethod
    def list_by_owner(self, owner_id: str, start: datetime, end: datetime) -> List[Task]:
        """Return the owner's tasks whose period overlaps [start, end).

        Tasks without a period are never returned.
        """
