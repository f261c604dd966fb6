"""Tests for the SQLModel-backed repository."""

from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from wantodo.db.repository import SQLTaskRepository
from wantodo.errors import PersistenceError
from wantodo.models import Period, TagRef, Task

from .conftest import OTHER_OWNER, OWNER, TAG_ID


def make_task(task_id, start=None, end=None, owner=OWNER, **fields):
    period = Period(start=start, end=end or start) if start else None
    return Task(id=task_id, owner_id=owner, contents=f"Task {task_id}", period=period, **fields)


def test_create_and_get(sql_repository):
    task = make_task(
        "t1",
        datetime(2021, 12, 15, 9),
        datetime(2021, 12, 15, 10),
        importance=3,
        tags=[TagRef(tag_id=TAG_ID, is_main_tag=True)],
    )
    sql_repository.create(task)

    assert sql_repository.get("t1") == task
    assert sql_repository.get("missing") is None


def test_create_duplicate_id(sql_repository):
    sql_repository.create(make_task("t1"))
    with pytest.raises(PersistenceError):
        sql_repository.create(make_task("t1"))


def test_update_replaces_fields(sql_repository):
    task = make_task("t1", datetime(2021, 12, 15), tags=[TagRef(tag_id=TAG_ID, is_main_tag=True)])
    sql_repository.create(task)

    changed = task.model_copy(update={"checked": True, "tags": [], "period": None})
    sql_repository.update(changed)

    stored = sql_repository.get("t1")
    assert stored.checked is True
    assert stored.tags == []
    assert stored.period is None


def test_update_missing(sql_repository):
    with pytest.raises(PersistenceError):
        sql_repository.update(make_task("nope"))


def test_delete(sql_repository):
    sql_repository.create(make_task("t1"))
    assert sql_repository.delete("t1") is True
    assert sql_repository.get("t1") is None
    assert sql_repository.delete("t1") is False


def test_list_by_owner_window(sql_repository):
    sql_repository.create(make_task("late", datetime(2021, 12, 20)))
    sql_repository.create(make_task("early", datetime(2021, 12, 2)))
    sql_repository.create(make_task("spanning", datetime(2021, 11, 25), datetime(2021, 12, 1)))
    sql_repository.create(make_task("jan", datetime(2022, 1, 1)))
    sql_repository.create(make_task("undated"))
    sql_repository.create(make_task("other", datetime(2021, 12, 15), owner=OTHER_OWNER))

    tasks = sql_repository.list_by_owner(OWNER, datetime(2021, 12, 1), datetime(2022, 1, 1))
    assert [t.id for t in tasks] == ["spanning", "early", "late"]


def test_storage_failure_is_wrapped(sql_repository):
    """Errors from the database surface as PersistenceError."""
    with sql_repository.engine.begin() as connection:
        connection.exec_driver_sql("DROP TABLE tasks")

    with pytest.raises(PersistenceError) as excinfo:
        sql_repository.get("t1")
    assert isinstance(excinfo.value.__cause__, OperationalError)


def test_tables_created_on_init(sql_repository):
    again = SQLTaskRepository(sql_repository.engine)
    again.create(make_task("t1"))
    assert sql_repository.get("t1") is not None
