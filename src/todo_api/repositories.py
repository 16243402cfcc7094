from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from threading import RLock
from typing import List, Optional

from .models import TodoEntity, new_id
from .settings import get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Repository(ABC):
    """
    Abstract repository contract for todo storage backends.

    Implementations raise StorageError when the storage engine itself fails.
    """

    @abstractmethod
    def list_all(self) -> List[TodoEntity]:
        """Return every stored TodoEntity in storage order."""

    @abstractmethod
    def find_by_id(self, todo_id: str) -> Optional[TodoEntity]:
        """Return a TodoEntity by id, or None if not found."""

    @abstractmethod
    def insert(self, todo: TodoEntity) -> bool:
        """
        Persist a new TodoEntity, assigning an id if it has none.
        Return True if stored, False if the write was rejected.
        """

    @abstractmethod
    def remove(self, todo_id: str) -> Optional[bool]:
        """
        Delete a TodoEntity by id. Return None if not found, otherwise True
        if a row was removed and False if the delete was rejected.
        """


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[str, TodoEntity] = {}

    def list_all(self) -> List[TodoEntity]:
        with self._lock:
            # Return copies to avoid external mutation
            return [t.copy() for t in self._items.values()]

    def find_by_id(self, todo_id: str) -> Optional[TodoEntity]:
        with self._lock:
            item = self._items.get(todo_id)
            return None if item is None else item.copy()

    def insert(self, todo: TodoEntity) -> bool:
        if not todo.get("id"):
            todo["id"] = new_id()
        with self._lock:
            if todo["id"] in self._items:
                logger.warning("duplicate_todo_id id=%s", todo["id"])
                return False
            self._items[todo["id"]] = todo.copy()
            return True

    def remove(self, todo_id: str) -> Optional[bool]:
        with self._lock:
            return None if self._items.pop(todo_id, None) is None else True


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_repository() -> Repository:
    """
    Return the process-wide repository configured by settings.
    - memory: InMemoryRepository
    - sqlite: SQLRepository bound to DATABASE_URL
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLRepository

        return SQLRepository(settings.database_url)
    logger.info("using in-memory repository")
    return InMemoryRepository()
