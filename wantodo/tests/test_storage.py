"""Unit tests for the JSON-file TaskStorage class."""

import json
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import pytest

from wantodo.crud import TaskStorage
from wantodo.errors import PersistenceError
from wantodo.models import Period, TagRef, Task

from .conftest import OTHER_OWNER, OWNER, TAG_ID


def make_task(task_id, start=None, owner=OWNER, **fields):
    period = Period(start=start, end=start) if start else None
    return Task(id=task_id, owner_id=owner, contents=f"Task {task_id}", period=period, **fields)


def test_storage_initialization(json_storage):
    """Test that storage initializes with empty tasks file."""
    assert json_storage.file_path.exists()
    assert json_storage.load_tasks() == []


def test_create_and_get(json_storage):
    task = make_task("t1", datetime(2021, 12, 15), tags=[TagRef(tag_id=TAG_ID, is_main_tag=True)])
    json_storage.create(task)

    assert json_storage.get("t1") == task
    assert json_storage.get("missing") is None


def test_create_duplicate_id(json_storage):
    json_storage.create(make_task("t1"))
    with pytest.raises(PersistenceError):
        json_storage.create(make_task("t1"))


def test_file_uses_camel_case(json_storage):
    """Tasks are written in their wire format."""
    json_storage.create(make_task("t1", datetime(2021, 12, 15), importance=2))

    data = json.loads(json_storage.file_path.read_text())
    assert data[0]["ownerId"] == OWNER
    assert data[0]["importance"] == 2
    assert data[0]["period"] == {"start": "2021-12-15T00:00:00", "end": "2021-12-15T00:00:00"}


def test_update(json_storage):
    task = make_task("t1")
    json_storage.create(task)

    json_storage.update(task.model_copy(update={"contents": "Updated"}))
    assert json_storage.get("t1").contents == "Updated"


def test_update_missing(json_storage):
    with pytest.raises(PersistenceError):
        json_storage.update(make_task("nope"))


def test_delete(json_storage):
    """Test deleting a task."""
    json_storage.create(make_task("t1"))
    json_storage.create(make_task("t2"))

    assert json_storage.delete("t1") is True
    assert [t.id for t in json_storage.load_tasks()] == ["t2"]
    assert json_storage.delete("t1") is False


def test_list_by_owner(json_storage):
    json_storage.create(make_task("dec", datetime(2021, 12, 15)))
    json_storage.create(make_task("jan", datetime(2022, 1, 2)))
    json_storage.create(make_task("undated"))
    json_storage.create(make_task("other", datetime(2021, 12, 15), owner=OTHER_OWNER))

    tasks = json_storage.list_by_owner(OWNER, datetime(2021, 12, 1), datetime(2022, 1, 1))
    assert [t.id for t in tasks] == ["dec"]


def test_persistence(json_storage):
    """Test that tasks persist across storage instances."""
    json_storage.create(make_task("t1", datetime(2021, 12, 15)))

    new_storage = TaskStorage(str(json_storage.file_path))
    task = new_storage.get("t1")
    assert task.period.start == datetime(2021, 12, 15)
    assert isinstance(task.created_at, datetime)


def test_corrupted_file(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text("{not json")
    storage = TaskStorage(str(path))

    with pytest.raises(PersistenceError):
        storage.load_tasks()


def test_creates_parent_directories(tmp_path):
    storage = TaskStorage(str(tmp_path / "nested" / "tasks.json"))
    assert storage.file_path.exists()


def test_concurrent_creates_keep_every_task(json_storage):
    """Parallel writers and readers never lose a task or read a partial file."""
    def create_and_read(i):
        json_storage.create(make_task(f"t{i}", datetime(2021, 12, 15)))
        return len(json_storage.list_by_owner(OWNER, datetime(2021, 12, 1), datetime(2022, 1, 1)))

    with ThreadPoolExecutor(max_workers=8) as pool:
        counts = list(pool.map(create_and_read, range(40)))

    assert len(json_storage.load_tasks()) == 40
    assert all(count >= 1 for count in counts)
    assert not json_storage.file_path.with_name("tasks.json.tmp").exists()
