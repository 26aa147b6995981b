"""SQL-backed task store."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.orm import Session, sessionmaker

from todo_server.models.todos import Task, TaskCount, ViewState
from todo_server.persistence.db import session_scope
from todo_server.persistence.models import TodoRecord

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _to_task(record: TodoRecord) -> Task:
    return Task(
        id=record.id,
        text=record.task,
        completed=record.completed,
        created_at=_as_utc(record.created_at),
        updated_at=_as_utc(record.updated_at),
    )


class TaskStore:
    """Owns the rows of the ``todos`` table.

    Every operation runs in its own session; conflicting writes are
    serialized by the database. Unknown ids are no-ops for updates and
    deletes.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        """Initialize the store.

        Args:
            session_factory: Factory bound to the application engine
        """
        self._session_factory = session_factory

    def list_tasks(self, view: ViewState = ViewState.ALL) -> list[Task]:
        """Return all tasks, or only incomplete ones for ``ViewState.INCOMPLETE``."""
        stmt = select(TodoRecord).order_by(TodoRecord.created_at, TodoRecord.id)
        if view == ViewState.INCOMPLETE:
            stmt = stmt.where(TodoRecord.completed.is_(False))

        with session_scope(self._session_factory) as session:
            return [_to_task(record) for record in session.scalars(stmt)]

    def get_task(self, task_id: str) -> Task | None:
        with session_scope(self._session_factory) as session:
            record = session.get(TodoRecord, task_id)
            return _to_task(record) if record is not None else None

    def create_task(self, text: str) -> Task:
        """Insert a new, incomplete task and return it."""
        now = _now()
        record = TodoRecord(
            id=str(uuid.uuid4()),
            task=text,
            completed=False,
            created_at=now,
            updated_at=now,
        )
        with session_scope(self._session_factory) as session:
            session.add(record)
            session.flush()
            task = _to_task(record)

        logger.info("Created task %s", task.id)
        return task

    def set_completed(self, task_id: str, completed: bool) -> None:
        stmt = (
            update(TodoRecord)
            .where(TodoRecord.id == task_id)
            .values(completed=completed, updated_at=_now())
        )
        with session_scope(self._session_factory) as session:
            result = session.execute(stmt)

        if result.rowcount:
            logger.info("Updated task %s to completed=%s", task_id, completed)
        else:
            logger.debug("No task %s to update", task_id)

    def delete_task(self, task_id: str) -> None:
        with session_scope(self._session_factory) as session:
            result = session.execute(delete(TodoRecord).where(TodoRecord.id == task_id))

        if result.rowcount:
            logger.info("Deleted task %s", task_id)
        else:
            logger.debug("No task %s to delete", task_id)

    def count(self, view: ViewState = ViewState.ALL) -> int:
        """Count the tasks the given view would list."""
        stmt = select(func.count()).select_from(TodoRecord)
        if view == ViewState.INCOMPLETE:
            stmt = stmt.where(TodoRecord.completed.is_(False))

        with session_scope(self._session_factory) as session:
            return session.scalar(stmt) or 0

    def counts(self) -> TaskCount:
        """Total and incomplete counts, read by a single statement.

        Both numbers come from one snapshot; ``incomplete`` never exceeds
        ``total`` even with concurrent writers.
        """
        stmt = select(
            func.count(),
            func.coalesce(func.sum(case((TodoRecord.completed.is_(False), 1), else_=0)), 0),
        ).select_from(TodoRecord)

        with session_scope(self._session_factory) as session:
            total, incomplete = session.execute(stmt).one()
        return TaskCount(total=total or 0, incomplete=incomplete or 0)

    def ping(self) -> None:
        """Round-trip to the database; raises on connectivity problems."""
        with session_scope(self._session_factory) as session:
            session.execute(select(1))
