from __future__ import annotations

import uuid
from datetime import datetime
from typing import Callable, Optional, TypedDict

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    Storage-agnostic representation of a Todo item, shared by every
    repository backend.

    Fields:
    - id: Unique string identifier (UUID4 by default), never reassigned
    - title: Task title; may be empty
    - date_created: Local creation timestamp
    - date_completed: Completion timestamp, unset for new items
    - is_complete: Completion flag, False for new items
    """

    id: str
    title: str
    date_created: datetime
    date_completed: Optional[datetime]
    is_complete: bool


def new_id() -> str:
    return str(uuid.uuid4())


# PUBLIC_INTERFACE
def new_todo(title: Optional[str], clock: Clock = datetime.now, id_factory: IdFactory = new_id) -> TodoEntity:
    """Build a fresh TodoEntity stamped with an id and creation time."""
    return {
        "id": id_factory(),
        "title": title or "",
        "date_created": clock(),
        "date_completed": None,
        "is_complete": False,
    }
