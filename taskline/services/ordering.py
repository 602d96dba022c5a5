"""Position bookkeeping for the nodes of a task.

Orders are unique within a task. Inserting shifts the tail of the sequence up
by one to open a slot; deleting leaves a gap, which is harmless because nodes
are only ever compared by order, never indexed by it.

None of these functions commit. Callers run them inside a unit of work that
holds the task row lock, so the read-shift-insert sequence is atomic.
"""

from typing import List, Optional

from sqlalchemy import select, update, func
from sqlalchemy.orm import Session

from taskline import config
from taskline.errors import NotFoundError
from taskline.logging_config import get_logger
from taskline.models.task import TaskNode

logger = get_logger(__name__)


def ordered_nodes(db: Session, task_id: str) -> List[TaskNode]:
    return list(
        db.execute(
            select(TaskNode).where(TaskNode.task_id == task_id).order_by(TaskNode.order)
        ).scalars()
    )


def next_order(db: Session, task_id: str) -> int:
    """Order value just past the current last node (0 for an empty task)."""
    current_max = db.execute(
        select(func.max(TaskNode.order)).where(TaskNode.task_id == task_id)
    ).scalar()
    return 0 if current_max is None else current_max + 1


def insert_after(
    db: Session,
    task_id: str,
    after_node_id: str,
    description: Optional[str] = None,
) -> TaskNode:
    """Create a fresh incomplete node immediately after ``after_node_id``.

    Raises:
        NotFoundError: ``after_node_id`` is not a node of ``task_id``.
    """
    after = db.execute(
        select(TaskNode).where(TaskNode.id == after_node_id, TaskNode.task_id == task_id)
    ).scalar_one_or_none()
    if after is None:
        raise NotFoundError("After node not found")

    slot = after.order + 1
    shifted = db.execute(
        update(TaskNode)
        .where(TaskNode.task_id == task_id, TaskNode.order >= slot)
        .values(order=TaskNode.order + 1)
        .execution_options(synchronize_session="fetch")
    ).rowcount

    node = TaskNode(
        task_id=task_id,
        description=description if description is not None else config.DEFAULT_NODE_DESCRIPTION,
        is_completed=False,
        completed_at=None,
        note=None,
        order=slot,
    )
    db.add(node)
    db.flush()
    logger.debug(f"Inserted node {node.id} into task {task_id} at order {slot}, shifted {shifted}")
    return node
