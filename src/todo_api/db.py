from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import Boolean, DateTime, String, create_engine, delete, insert, select
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from .errors import StorageError
from .models import TodoEntity, new_id
from .repositories import Repository

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class TodoRecord(Base):
    """ORM mapping of the todos table."""

    __tablename__ = "todos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String, nullable=False, default="")
    date_created: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    date_completed: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    is_complete: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


def _record_to_entity(record: TodoRecord) -> TodoEntity:
    return {
        "id": record.id,
        "title": record.title,
        "date_created": record.date_created,
        "date_completed": record.date_completed,
        "is_complete": bool(record.is_complete),
    }


def _entity_to_row(todo: TodoEntity) -> Dict[str, Any]:
    return {
        "id": todo["id"],
        "title": todo["title"],
        "date_created": todo["date_created"],
        "date_completed": todo["date_completed"],
        "is_complete": todo["is_complete"],
    }


class SQLRepository(Repository):
    """
    Relational repository backed by the SQLAlchemy ORM.

    Each operation runs in its own session; the table is created on startup
    when missing.
    """

    def __init__(self, database_url: str) -> None:
        url = make_url(database_url)
        engine_kwargs: Dict[str, Any] = {}
        if url.get_backend_name() == "sqlite":
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if url.database in (None, "", ":memory:"):
                # A single shared connection keeps the in-memory database alive
                engine_kwargs["poolclass"] = StaticPool
            else:
                os.makedirs(os.path.dirname(url.database) or ".", exist_ok=True)

        self._engine = create_engine(url, **engine_kwargs)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        self._init_db()
        logger.info("sql repository ready url=%s", url.render_as_string(hide_password=True))

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            raise StorageError(str(exc)) from exc
        finally:
            session.close()

    def _init_db(self) -> None:
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    def close(self) -> None:
        self._engine.dispose()

    def list_all(self) -> List[TodoEntity]:
        with self._session() as session:
            records = session.scalars(select(TodoRecord)).all()
            return [_record_to_entity(r) for r in records]

    def find_by_id(self, todo_id: str) -> Optional[TodoEntity]:
        with self._session() as session:
            record = session.get(TodoRecord, todo_id)
            return _record_to_entity(record) if record else None

    def insert(self, todo: TodoEntity) -> bool:
        if not todo.get("id"):
            todo["id"] = new_id()
        try:
            with self._session() as session:
                result = session.execute(insert(TodoRecord.__table__).values(**_entity_to_row(todo)))
                affected = result.rowcount
        except IntegrityError as exc:
            logger.warning("todo_insert_rejected id=%s error=%s", todo["id"], exc.orig)
            return False
        return affected > 0

    def remove(self, todo_id: str) -> Optional[bool]:
        try:
            with self._session() as session:
                if session.get(TodoRecord, todo_id) is None:
                    return None
                result = session.execute(delete(TodoRecord).where(TodoRecord.id == todo_id))
                affected = result.rowcount
        except IntegrityError as exc:
            logger.warning("todo_delete_rejected id=%s error=%s", todo_id, exc.orig)
            return False
        return affected > 0
