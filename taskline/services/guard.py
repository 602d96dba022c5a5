"""Ownership checks shared by every mutating operation.

Missing resources and resources owned by someone else produce the same error,
so a caller cannot tell whether an id exists.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from taskline.errors import NotFoundError, UnauthorizedError
from taskline.models.task import Task, TaskNode


def owns(db: Session, user_id: str, task_id: str, lock: bool = False) -> bool:
    """Return True if ``task_id`` exists and belongs to ``user_id``.

    With ``lock=True`` the task row is locked for the rest of the transaction
    (``SELECT ... FOR UPDATE``; on SQLite the whole database is already
    write-locked when the transaction begins).
    """
    if not user_id or not task_id:
        return False
    stmt = select(Task.id).where(Task.id == task_id, Task.user_id == user_id)
    if lock:
        stmt = stmt.with_for_update()
    return db.execute(stmt).first() is not None


def authorize_task(db: Session, user_id: str, task_id: str, lock: bool = False) -> Task:
    """Return the caller's task or raise UnauthorizedError.

    ``lock=True`` serializes concurrent mutations of the same task's node set.
    """
    if not owns(db, user_id, task_id, lock=lock):
        raise UnauthorizedError()
    return db.get(Task, task_id)


def authorize_node(db: Session, user_id: str, node_id: str) -> TaskNode:
    """Return the caller's node or raise NotFoundError."""
    if not user_id:
        raise UnauthorizedError()
    node = db.get(TaskNode, node_id) if node_id else None
    if node is None or not owns(db, user_id, node.task_id):
        raise NotFoundError("Node not found")
    return node
