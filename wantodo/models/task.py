import re
from datetime import datetime, timezone
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic import Field as PydanticField
from pydantic.alias_generators import to_camel
from sqlmodel import Field, SQLModel, Column, JSON

# ASCII digits only; str.isdigit() also accepts superscripts like "²".
EPOCH_MS_PATTERN = re.compile(r"-?[0-9]+")


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string or epoch milliseconds into naive UTC.

    Returns None when the value is not a timestamp.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if EPOCH_MS_PATTERN.fullmatch(text):
            return parse_timestamp(int(text))
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class WireModel(BaseModel):
    """Snake-case attributes, camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Period(WireModel):
    """Time span a task is relevant for. Both ends are inclusive bounds."""

    start: datetime
    end: datetime

    @field_validator("start", "end", mode="before")
    @classmethod
    def parse_bound(cls, v):
        parsed = parse_timestamp(v)
        if parsed is None:
            raise ValueError("is not a timestamp")
        return parsed

    @model_validator(mode="after")
    def check_order(self):
        if self.start > self.end:
            raise ValueError("start must not be after end")
        return self


class TagRef(WireModel):
    """Reference to an externally owned tag."""

    tag_id: str
    is_main_tag: bool = False


class Task(WireModel):
    """A user-owned task.

    Attributes:
        id: UUID v4, assigned at creation
        owner_id: Owning user, bound at creation
        contents: Task text, 1-50 characters
        importance: Priority in [0, 3], None when unset
        checked: Completion flag
        period: Optional start/end span used by calendar queries
        tags: Tag references, in the order they were given
        created_at: When the task was created
        updated_at: When the task was last mutated
    """

    id: str
    owner_id: str
    contents: str
    importance: Optional[int] = None
    checked: bool = False
    period: Optional[Period] = None
    tags: List[TagRef] = PydanticField(default_factory=list)
    created_at: datetime = PydanticField(default_factory=utcnow)
    updated_at: datetime = PydanticField(default_factory=utcnow)


class TaskRecord(SQLModel, table=True):
    """Relational row for a Task. The period is split into two columns."""

    __tablename__ = "tasks"

    id: str = Field(primary_key=True, max_length=36)
    owner_id: str = Field(index=True, max_length=255)
    contents: str = Field(max_length=50)
    importance: Optional[int] = Field(default=None)
    checked: bool = Field(default=False)
    period_start: Optional[datetime] = Field(default=None, index=True)
    period_end: Optional[datetime] = Field(default=None)
    tags: List[dict] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def from_task(cls, task: Task) -> "TaskRecord":
        return cls(
            id=task.id,
            owner_id=task.owner_id,
            contents=task.contents,
            importance=task.importance,
            checked=task.checked,
            period_start=task.period.start if task.period else None,
            period_end=task.period.end if task.period else None,
            tags=[tag.model_dump(by_alias=True) for tag in task.tags],
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

    def apply(self, task: Task) -> None:
        """Copy the mutable fields of ``task`` onto this row."""
        self.contents = task.contents
        self.importance = task.importance
        self.checked = task.checked
        self.period_start = task.period.start if task.period else None
        self.period_end = task.period.end if task.period else None
        self.tags = [tag.model_dump(by_alias=True) for tag in task.tags]
        self.updated_at = task.updated_at

    def to_task(self) -> Task:
        period = None
        if self.period_start is not None and self.period_end is not None:
            period = Period(start=self.period_start, end=self.period_end)
        return Task(
            id=self.id,
            owner_id=self.owner_id,
            contents=self.contents,
            importance=self.importance,
            checked=self.checked,
            period=period,
            tags=[TagRef.model_validate(tag) for tag in self.tags or []],
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
