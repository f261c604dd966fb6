from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Header, Query, status

from ..dependencies.auth import authenticate
from ..dependencies.services import get_task_service
from ..models import Task
from ..schemas.task import CalendarQuery, TaskCreate, TaskDeleted, TaskUpdate
from ..services.task_service import TaskService
from ..validation import (
    CREATE_TASK_FIELDS,
    LIST_TASKS_FIELDS,
    TASK_ID_FIELDS,
    UPDATE_TASK_FIELDS,
    ValidationResult,
    validate,
)

router = APIRouter()

# Handlers are sync; FastAPI runs them in its threadpool.


def _check(fields, payload: Any, **extra) -> ValidationResult:
    data = dict(payload) if isinstance(payload, dict) else {}
    data.update(extra)
    result = validate(fields, data)
    result.raise_if_invalid()
    return result


@router.post("/", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: Any = Body(None),
    authorization: Optional[str] = Header(None),
    service: TaskService = Depends(get_task_service),
):
    result = _check(CREATE_TASK_FIELDS, payload, authorization=authorization)
    owner = authenticate(result.data["authorization"])
    task = TaskCreate.model_validate(result.data)
    return service.create_task(
        owner,
        task.contents,
        tags=task.tags,
        period=task.period,
        important=task.important,
    )


@router.get("/", response_model=List[Task])
def get_tasks(
    year: Optional[str] = Query(None),
    month: Optional[str] = Query(None),
    day: Optional[str] = Query(None),
    authorization: Optional[str] = Header(None),
    service: TaskService = Depends(get_task_service),
):
    result = _check(
        LIST_TASKS_FIELDS, {"year": year, "month": month, "day": day},
        authorization=authorization,
    )
    owner = authenticate(result.data["authorization"])
    query = CalendarQuery.model_validate(result.data)
    return service.get_tasks(owner, query.year, query.month, query.day)


@router.get("/{task_id}", response_model=Task)
def get_task(
    task_id: str,
    authorization: Optional[str] = Header(None),
    service: TaskService = Depends(get_task_service),
):
    result = _check(TASK_ID_FIELDS, {"taskId": task_id}, authorization=authorization)
    owner = authenticate(result.data["authorization"])
    return service.get_task(owner, result.data["taskId"])


@router.put("/{task_id}", response_model=Task)
def update_task(
    task_id: str,
    payload: Any = Body(None),
    authorization: Optional[str] = Header(None),
    service: TaskService = Depends(get_task_service),
):
    result = _check(UPDATE_TASK_FIELDS, payload, authorization=authorization, taskId=task_id)
    owner = authenticate(result.data["authorization"])
    changes = TaskUpdate.model_validate(result.data)
    return service.update_task(owner, result.data["taskId"], changes)


@router.patch("/{task_id}/toggle-checked", response_model=Task)
def toggle_task_checked(
    task_id: str,
    authorization: Optional[str] = Header(None),
    service: TaskService = Depends(get_task_service),
):
    result = _check(TASK_ID_FIELDS, {"taskId": task_id}, authorization=authorization)
    owner = authenticate(result.data["authorization"])
    return service.toggle_checked(owner, result.data["taskId"])


@router.delete("/{task_id}", response_model=TaskDeleted)
def delete_task(
    task_id: str,
    authorization: Optional[str] = Header(None),
    service: TaskService = Depends(get_task_service),
):
    result = _check(TASK_ID_FIELDS, {"taskId": task_id}, authorization=authorization)
    owner = authenticate(result.data["authorization"])
    return service.delete_task(owner, result.data["taskId"])
