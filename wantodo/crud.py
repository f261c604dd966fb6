"""Storage layer for persisting tasks to a JSON file."""

import json
import logging
import os
import threading
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .errors import PersistenceError
from .models import Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)


class TaskStorage(TaskRepository):
    """Handles reading and writing tasks to a JSON file.

    The whole file is rewritten on every mutation. Reads and
    read-modify-write cycles hold an instance lock, and writes go through
    a temporary file that replaces the tasks file, so concurrent requests
    in one process never see a partial file. A single process should own
    the file.

    Attributes:
        file_path: Path to the JSON file storing tasks
    """

    def __init__(self, file_path: str = "tasks.json"):
        """Initialize the storage with a file path.

        Args:
            file_path: Path to the JSON file (default: tasks.json)
        """
        self.file_path = Path(file_path)
        self._lock = threading.RLock()
        self._ensure_file_exists()

    def _ensure_file_exists(self) -> None:
        """Create the tasks file if it doesn't exist."""
        if not self.file_path.exists():
            try:
                self.file_path.parent.mkdir(parents=True, exist_ok=True)
                self.file_path.write_text("[]")
            except OSError as e:
                raise PersistenceError("initialize", str(e)) from e

    def load_tasks(self) -> List[Task]:
        """Load all tasks from the JSON file.

        Raises:
            PersistenceError: If the file cannot be read or is corrupted
        """
        with self._lock:
            try:
                data = json.loads(self.file_path.read_text())
                return [Task.model_validate(task_dict) for task_dict in data]
            except OSError as e:
                raise PersistenceError("read", str(e)) from e
            except (json.JSONDecodeError, ValidationError, TypeError) as e:
                raise PersistenceError("read", f"corrupted tasks file: {e}") from e

    def save_tasks(self, tasks: List[Task]) -> None:
        """Save all tasks to the JSON file."""
        data = [task.model_dump(mode="json", by_alias=True) for task in tasks]
        tmp_path = self.file_path.with_name(self.file_path.name + ".tmp")
        with self._lock:
            try:
                tmp_path.write_text(json.dumps(data, indent=2))
                os.replace(tmp_path, self.file_path)
            except OSError as e:
                raise PersistenceError("write", str(e)) from e

    def create(self, task: Task) -> Task:
        with self._lock:
            tasks = self.load_tasks()
            if any(existing.id == task.id for existing in tasks):
                raise PersistenceError("create", f"duplicate task id {task.id}")
            tasks.append(task)
            self.save_tasks(tasks)
        logger.debug(f"Stored task {task.id} in {self.file_path}")
        return task

    def get(self, task_id: str) -> Optional[Task]:
        for task in self.load_tasks():
            if task.id == task_id:
                return task
        return None

    def update(self, task: Task) -> Task:
        with self._lock:
            all_tasks = self.load_tasks()
            for i, existing in enumerate(all_tasks):
                if existing.id == task.id:
                    all_tasks[i] = task
                    self.save_tasks(all_tasks)
                    return task
        raise PersistenceError("update", f"task {task.id} is not stored")

    def delete(self, task_id: str) -> bool:
        with self._lock:
            all_tasks = self.load_tasks()
            remaining = [task for task in all_tasks if task.id != task_id]
            if len(remaining) < len(all_tasks):
                self.save_tasks(remaining)
                return True
        return False

    def list_by_owner(self, owner_id: str, start: datetime, end: datetime) -> List[Task]:
        return [
            task for task in self.load_tasks()
            if task.owner_id == owner_id
            and task.period is not None
            and task.period.start < end
            and task.period.end >= start
        ]
