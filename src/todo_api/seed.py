from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from .models import Clock, IdFactory, new_id, new_todo
from .repositories import Repository

logger = logging.getLogger(__name__)

STARTER_TITLES: Sequence[str] = (
    "Learn React",
    "Wash Dishes",
    "Do the washing",
    "Learn Typescript",
    "Go to work",
    "Brush teeth",
)


# PUBLIC_INTERFACE
def seed_todos(
    repo: Repository,
    clock: Clock = datetime.now,
    id_factory: IdFactory = new_id,
    titles: Sequence[str] = STARTER_TITLES,
) -> int:
    """
    Load starter todos into an empty store. A store that already holds
    records is left untouched.

    Returns:
        Number of todos inserted.
    """
    if repo.list_all():
        return 0

    inserted = 0
    for title in titles:
        if repo.insert(new_todo(title, clock=clock, id_factory=id_factory)):
            inserted += 1
    logger.info("seeded starter todos count=%s", inserted)
    return inserted
