"""Task and node operations for an authenticated user.

Every function takes the open session and the acting user's id. Mutations run
in a single unit of work: either all of their row changes land or none do.
"""

from datetime import datetime, UTC
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from taskline import config
from taskline.database import unit_of_work, utcnow
from taskline.errors import ValidationError
from taskline.logging_config import get_logger
from taskline.models.task import Task, TaskNode
from taskline.services import ordering
from taskline.services.guard import authorize_node, authorize_task

logger = get_logger(__name__)

_NODE_FIELDS = {"description", "note", "is_completed", "completed_at"}


def _as_utc_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value


def create_task(db: Session, user_id: str, name: str) -> Task:
    """Create a task with its single default node at order 0."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Task name is required")

    with unit_of_work(db):
        task = Task(name=name, user_id=user_id)
        db.add(task)
        db.flush()
        db.add(
            TaskNode(
                task_id=task.id,
                description=config.DEFAULT_NODE_DESCRIPTION,
                is_completed=False,
                order=ordering.next_order(db, task.id),
            )
        )
    db.refresh(task)
    logger.info(f"Created task {task.id} for user {user_id}")
    return task


def list_tasks(db: Session, user_id: str) -> List[Task]:
    """All of the user's tasks, newest first, nodes in ascending order."""
    return list(
        db.execute(
            select(Task)
            .where(Task.user_id == user_id)
            .options(selectinload(Task.nodes))
            .order_by(Task.created_at.desc(), Task.id)
        ).scalars()
    )


def get_task(db: Session, user_id: str, task_id: str) -> Task:
    return authorize_task(db, user_id, task_id)


def update_node(db: Session, user_id: str, node_id: str, changes: dict) -> TaskNode:
    """Apply a partial update to a node.

    ``changes`` holds only the fields the client sent, out of ``description``,
    ``note``, ``is_completed`` and ``completed_at``. ``completed_at`` is only
    read together with ``is_completed``; completing requires it, un-completing
    clears it.
    """
    unknown = set(changes) - _NODE_FIELDS
    if unknown:
        raise ValidationError(f"Unknown node fields: {', '.join(sorted(unknown))}")

    with unit_of_work(db):
        node = authorize_node(db, user_id, node_id)

        if changes.get("description") is not None:
            node.description = changes["description"]
        if "note" in changes:
            node.note = changes["note"]
        if changes.get("is_completed") is not None:
            if changes["is_completed"]:
                completed_at = changes.get("completed_at")
                if completed_at is None:
                    raise ValidationError("completedAt is required when completing a node")
                node.is_completed = True
                node.completed_at = _as_utc_naive(completed_at)
            else:
                node.is_completed = False
                node.completed_at = None
    logger.debug(f"Updated node {node_id}: {sorted(changes)}")
    return node


def delete_node(db: Session, user_id: str, node_id: str) -> None:
    """Remove a node unless it is the last one of its task. Siblings keep their orders."""
    with unit_of_work(db):
        node = authorize_node(db, user_id, node_id)
        # Lock the task so two deletes cannot both see two nodes and empty it
        authorize_task(db, user_id, node.task_id, lock=True)
        remaining = db.execute(
            select(func.count(TaskNode.id)).where(TaskNode.task_id == node.task_id)
        ).scalar()
        if remaining <= 1:
            raise ValidationError("Task must have at least one node")
        db.delete(node)
    logger.info(f"Deleted node {node_id}")


def insert_node_after(db: Session, user_id: str, task_id: str, after_node_id: str) -> TaskNode:
    with unit_of_work(db):
        authorize_task(db, user_id, task_id, lock=True)
        node = ordering.insert_after(db, task_id, after_node_id)
    logger.info(f"Inserted node {node.id} after {after_node_id} in task {task_id}")
    return node


def complete_task(db: Session, user_id: str, task_id: str, now: Optional[datetime] = None) -> int:
    """Complete every incomplete node of a task with one shared timestamp.

    Nodes that were already complete keep their original ``completed_at``.
    Returns the number of nodes that changed.
    """
    now = _as_utc_naive(now) if now is not None else utcnow()
    with unit_of_work(db):
        authorize_task(db, user_id, task_id, lock=True)
        pending = db.execute(
            select(TaskNode).where(TaskNode.task_id == task_id, TaskNode.is_completed.is_(False))
        ).scalars().all()
        for node in pending:
            node.is_completed = True
            node.completed_at = now
    logger.info(f"Completed task {task_id}: {len(pending)} node(s) marked done")
    return len(pending)
