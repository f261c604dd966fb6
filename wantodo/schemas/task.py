from typing import List, Optional
from ..models.task import Period, TagRef, WireModel

# Built from already-validated request data; owner_id is derived from
# auth, not part of the payload.


class TaskCreate(WireModel):
    contents: str
    tags: Optional[List[TagRef]] = None
    period: Period
    important: Optional[int] = None


class TaskUpdate(WireModel):
    """Partial update. Only fields that were sent are applied."""

    contents: Optional[str] = None
    tags: Optional[List[TagRef]] = None
    period: Optional[Period] = None
    important: Optional[int] = None
    checked: Optional[bool] = None


class CalendarQuery(WireModel):
    year: int
    month: int
    day: Optional[int] = None


class TaskDeleted(WireModel):
    task_id: str
    deleted: bool = True
