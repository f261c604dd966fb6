import logging
from functools import lru_cache

from fastapi import Depends

from .. import config
from ..crud import TaskStorage
from ..db.repository import SQLTaskRepository
from ..db.session import get_engine
from ..repository import TaskRepository
from ..services.task_service import TaskService

logger = logging.getLogger(__name__)


@lru_cache
def get_repository() -> TaskRepository:
    """Build the configured repository once per process."""
    if config.STORAGE_BACKEND == "json":
        logger.info(f"Using JSON task storage at {config.TASKS_FILE}")
        return TaskStorage(config.TASKS_FILE)
    if config.STORAGE_BACKEND != "sql":
        raise ValueError(f"Unknown WANTODO_STORAGE backend: {config.STORAGE_BACKEND}")
    logger.info("Using SQL task storage")
    return SQLTaskRepository(get_engine())


def get_task_service(repository: TaskRepository = Depends(get_repository)) -> TaskService:
    return TaskService(repository)
