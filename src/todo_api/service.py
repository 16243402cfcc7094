"""
Todo business logic.

Runs repository operations and folds each outcome into a Result so the
router can map it to a status code without handling exceptions itself.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import Depends

from .errors import ErrorKind, Result, StorageError
from .models import Clock, IdFactory, TodoEntity, new_id, new_todo
from .repositories import Repository, get_repository

logger = logging.getLogger(__name__)

SAVE_REJECTED_TITLE = "Problem saving todo to database"


def _storage_failure(exc: StorageError) -> Result:
    return Result.failure(
        ErrorKind.STORAGE_FAILURE,
        detail=str(exc),
        error_type=type(exc).__name__,
    )


class TodoService:
    def __init__(self, repository: Repository, clock: Clock = datetime.now, id_factory: IdFactory = new_id) -> None:
        self._repository = repository
        self._clock = clock
        self._id_factory = id_factory

    def list_todos(self) -> Result[List[TodoEntity]]:
        try:
            return Result.success(self._repository.list_all())
        except StorageError as exc:
            logger.exception("todo_list_failed")
            return _storage_failure(exc)

    def get_todo(self, todo_id: str) -> Result[TodoEntity]:
        try:
            todo = self._repository.find_by_id(todo_id)
        except StorageError as exc:
            logger.exception("todo_get_failed id=%s", todo_id)
            return _storage_failure(exc)
        if todo is None:
            return Result.failure(ErrorKind.NOT_FOUND)
        return Result.success(todo)

    def create_todo(self, title: Optional[str]) -> Result[TodoEntity]:
        todo = new_todo(title, clock=self._clock, id_factory=self._id_factory)
        try:
            saved = self._repository.insert(todo)
        except StorageError as exc:
            logger.exception("todo_create_failed id=%s", todo["id"])
            return _storage_failure(exc)
        if not saved:
            return Result.failure(ErrorKind.PERSISTENCE_REJECTED, detail=SAVE_REJECTED_TITLE)
        logger.info("todo_created id=%s", todo["id"])
        return Result.success(todo)

    def delete_todo(self, todo_id: str) -> Result[None]:
        try:
            removed = self._repository.remove(todo_id)
        except StorageError as exc:
            logger.exception("todo_delete_failed id=%s", todo_id)
            return _storage_failure(exc)
        if not removed:
            # Absent, or removed by someone else between lookup and delete
            return Result.failure(ErrorKind.NOT_FOUND)
        logger.info("todo_deleted id=%s", todo_id)
        return Result.success()


def get_clock() -> Clock:
    return datetime.now


def get_id_factory() -> IdFactory:
    return new_id


# PUBLIC_INTERFACE
def get_todo_service(
    repo: Repository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
    id_factory: IdFactory = Depends(get_id_factory),
) -> TodoService:
    """FastAPI dependency building a TodoService from the configured collaborators."""
    return TodoService(repo, clock=clock, id_factory=id_factory)
