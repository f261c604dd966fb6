"""SQL-backed task repository."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..errors import PersistenceError
from ..models import Task, TaskRecord
from ..repository import TaskRepository
from .session import create_db_and_tables

logger = logging.getLogger(__name__)


class SQLTaskRepository(TaskRepository):
    """Stores tasks in the ``tasks`` table. One session per operation."""

    def __init__(self, engine: Engine):
        self.engine = engine
        try:
            create_db_and_tables(engine)
        except SQLAlchemyError as e:
            raise PersistenceError("initialize", str(e)) from e

    def create(self, task: Task) -> Task:
        try:
            with Session(self.engine) as session:
                session.add(TaskRecord.from_task(task))
                session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to create task {task.id}: {e}")
            raise PersistenceError("create", str(e)) from e
        return task

    def get(self, task_id: str) -> Optional[Task]:
        try:
            with Session(self.engine) as session:
                record = session.get(TaskRecord, task_id)
                return record.to_task() if record else None
        except SQLAlchemyError as e:
            raise PersistenceError("read", str(e)) from e

    def update(self, task: Task) -> Task:
        try:
            with Session(self.engine) as session:
                record = session.get(TaskRecord, task.id)
                if record is None:
                    raise PersistenceError("update", f"task {task.id} is not stored")
                record.apply(task)
                session.add(record)
                session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to update task {task.id}: {e}")
            raise PersistenceError("update", str(e)) from e
        return task

    def delete(self, task_id: str) -> bool:
        try:
            with Session(self.engine) as session:
                record = session.get(TaskRecord, task_id)
                if record is None:
                    return False
                session.delete(record)
                session.commit()
                return True
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete task {task_id}: {e}")
            raise PersistenceError("delete", str(e)) from e

    def list_by_owner(self, owner_id: str, start: datetime, end: datetime) -> List[Task]:
        statement = (
            select(TaskRecord)
            .where(TaskRecord.owner_id == owner_id)
            .where(TaskRecord.period_start.is_not(None))
            .where(TaskRecord.period_end.is_not(None))
            .where(TaskRecord.period_start < end)
            .where(TaskRecord.period_end >= start)
            .order_by(TaskRecord.period_start, TaskRecord.created_at)
        )
        try:
            with Session(self.engine) as session:
                return [record.to_task() for record in session.exec(statement).all()]
        except SQLAlchemyError as e:
            raise PersistenceError("list", str(e)) from e
