"""Unit tests for the Task model and its parts."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from wantodo.models import Period, TagRef, Task, TaskRecord, parse_timestamp

from .conftest import OWNER, TAG_ID


def test_task_creation_minimal():
    """Test creating a task with minimal required fields."""
    task = Task(id="t1", owner_id=OWNER, contents="Test Task")

    assert task.importance is None
    assert task.checked is False
    assert task.period is None
    assert task.tags == []
    assert isinstance(task.created_at, datetime)
    assert isinstance(task.updated_at, datetime)


def test_task_serialization():
    """Tasks serialize to camelCase."""
    task = Task(
        id="t1",
        owner_id=OWNER,
        contents="Test",
        tags=[TagRef(tag_id=TAG_ID, is_main_tag=True)],
    )
    data = task.model_dump(by_alias=True)

    assert data["ownerId"] == OWNER
    assert data["tags"] == [{"tagId": TAG_ID, "isMainTag": True}]
    assert "createdAt" in data
    assert "updatedAt" in data


def test_task_from_wire_format():
    task = Task.model_validate({
        "id": "t1",
        "ownerId": OWNER,
        "contents": "Test",
        "tags": [{"tagId": TAG_ID, "isMainTag": False}],
    })
    assert task.owner_id == OWNER
    assert task.tags[0].tag_id == TAG_ID


def test_period_from_epoch_milliseconds():
    period = Period(start=1639558800000, end=1639562400000)
    assert period.start == datetime(2021, 12, 15, 9, 0)
    assert period.end == datetime(2021, 12, 15, 10, 0)


def test_period_normalizes_to_utc():
    period = Period(start="2021-12-15T18:00:00+09:00", end="2021-12-15T10:00:00Z")
    assert period.start == datetime(2021, 12, 15, 9, 0)
    assert period.end == datetime(2021, 12, 15, 10, 0)
    assert period.start.tzinfo is None


def test_period_rejects_reversed_bounds():
    with pytest.raises(ValidationError):
        Period(start=datetime(2021, 12, 16), end=datetime(2021, 12, 15))


def test_period_rejects_non_timestamps():
    with pytest.raises(ValidationError):
        Period(start="soon", end="later")


@pytest.mark.parametrize("value", [None, True, "tomorrow", "--5", "²", {"year": 2021}, [2021]])
def test_parse_timestamp_invalid(value):
    assert parse_timestamp(value) is None


def test_parse_timestamp_numeric_string():
    assert parse_timestamp("1639558800000") == datetime(2021, 12, 15, 9, 0)


def test_record_round_trip():
    """A task survives conversion to its table row and back."""
    task = Task(
        id="t1",
        owner_id=OWNER,
        contents="Test",
        importance=2,
        period=Period(start=datetime(2021, 12, 15), end=datetime(2021, 12, 16)),
        tags=[TagRef(tag_id=TAG_ID, is_main_tag=True)],
    )
    record = TaskRecord.from_task(task)

    assert record.period_start == datetime(2021, 12, 15)
    assert record.tags == [{"tagId": TAG_ID, "isMainTag": True}]
    assert record.to_task() == task


def test_record_without_period():
    task = Task(id="t1", owner_id=OWNER, contents="Test")
    record = TaskRecord.from_task(task)

    assert record.period_start is None
    assert record.to_task().period is None
