"""Task use cases: create, list by calendar, update, toggle and delete.

Every operation takes the caller's identity explicitly. Mutations load the
task first and reject callers that do not own it.
"""

import logging
import uuid
from typing import List, Optional

from ..calendar_query import CalendarQueryEngine
from ..errors import Forbidden, NotFound
from ..models import Period, TagRef, Task, utcnow
from ..repository import TaskRepository
from ..schemas.task import TaskDeleted, TaskUpdate
from ..validation import CONTENTS, IMPORTANT, OPTIONAL_CONTENTS, validate

logger = logging.getLogger(__name__)


class TaskService:
    """Owns task invariants and per-owner authorization."""

    def __init__(self, repository: TaskRepository):
        self.repository = repository
        self.calendar = CalendarQueryEngine(repository)

    def create_task(
        self,
        owner: str,
        contents: str,
        tags: Optional[List[TagRef]] = None,
        period: Optional[Period] = None,
        important: Optional[int] = None,
    ) -> Task:
        """Create a task owned by ``owner``.

        The HTTP create request requires a period (``CREATE_TASK_FIELDS``).
        This method accepts ``period=None`` for internal callers; such a
        task never appears in calendar listings and is reachable only
        through ``get_task``.

        Args:
            owner: Authenticated caller, becomes the task owner
            contents: Task text, trimmed to 1-50 characters
            tags: Tag references; None or empty means no tags
            period: Start/end span, or None for an undated task
            important: Priority in [0, 3]

        Returns:
            The stored Task

        Raises:
            ValidationFailed: If contents or important break their rules
            PersistenceError: If the repository write fails
        """
        result = validate((CONTENTS, IMPORTANT), {"contents": contents, "important": important})
        result.raise_if_invalid()

        now = utcnow()
        task = Task(
            id=str(uuid.uuid4()),
            owner_id=owner,
            contents=result.data["contents"],
            importance=result.data.get("important"),
            checked=False,
            period=period,
            tags=list(tags or []),
            created_at=now,
            updated_at=now,
        )
        self.repository.create(task)
        logger.info(f"Created task {task.id} for owner {owner}")
        return task

    def get_tasks(self, owner: str, year: int, month: int, day: Optional[int] = None) -> List[Task]:
        """List the owner's tasks whose period overlaps the selected month or day."""
        tasks = self.calendar.find_tasks(owner, year, month, day)
        logger.debug(f"Found {len(tasks)} tasks for owner {owner} in {year}-{month}-{day}")
        return tasks

    def get_task(self, owner: str, task_id: str) -> Task:
        return self._load_owned(owner, task_id)

    def update_task(self, owner: str, task_id: str, changes: TaskUpdate) -> Task:
        """Apply the fields present in ``changes``; everything else is kept.

        ``tags`` and ``period`` are replaced as a whole.

        Raises:
            NotFound: If no task has this id
            Forbidden: If the task belongs to someone else
        """
        task = self._load_owned(owner, task_id)

        sent = {name: getattr(changes, name) for name in changes.model_fields_set}
        sent = {name: value for name, value in sent.items() if value is not None}
        scalars = {key: sent[key] for key in ("contents", "important") if key in sent}
        result = validate((OPTIONAL_CONTENTS, IMPORTANT), scalars)
        result.raise_if_invalid()

        update = {}
        if "contents" in result.data:
            update["contents"] = result.data["contents"]
        if "important" in result.data:
            update["importance"] = result.data["important"]
        if "tags" in sent:
            update["tags"] = list(sent["tags"])
        if "period" in sent:
            update["period"] = sent["period"]
        if "checked" in sent:
            update["checked"] = sent["checked"]
        update["updated_at"] = utcnow()

        updated = task.model_copy(update=update)
        self.repository.update(updated)
        logger.info(f"Updated task {task_id} fields={sorted(update)}")
        return updated

    def toggle_checked(self, owner: str, task_id: str) -> Task:
        """Flip the task's completion flag."""
        task = self._load_owned(owner, task_id)
        updated = task.model_copy(update={"checked": not task.checked, "updated_at": utcnow()})
        self.repository.update(updated)
        logger.info(f"Task {task_id} checked={updated.checked}")
        return updated

    def delete_task(self, owner: str, task_id: str) -> TaskDeleted:
        self._load_owned(owner, task_id)
        if not self.repository.delete(task_id):
            # Removed by a concurrent request after the ownership check
            raise NotFound(task_id)
        logger.info(f"Deleted task {task_id} for owner {owner}")
        return TaskDeleted(task_id=task_id)

    def _load_owned(self, owner: str, task_id: str) -> Task:
        task = self.repository.get(task_id)
        if task is None:
            raise NotFound(task_id)
        if task.owner_id != owner:
            logger.warning(f"Owner {owner} denied access to task {task_id}")
            raise Forbidden(task_id)
        return task
