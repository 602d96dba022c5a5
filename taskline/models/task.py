import uuid

from sqlalchemy import Column, String, ForeignKey, Text, Boolean, Integer, DateTime, Index
from sqlalchemy.orm import relationship
from taskline.database import Base, utcnow


def _new_id():
    return str(uuid.uuid4())


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    owner = relationship("User", back_populates="tasks")
    nodes = relationship(
        "TaskNode",
        back_populates="task",
        order_by="TaskNode.order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class TaskNode(Base):
    __tablename__ = "task_nodes"
    __table_args__ = (Index("ix_task_nodes_task_id_order", "task_id", "order"),)

    id = Column(String(36), primary_key=True, default=_new_id)
    task_id = Column(String(36), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    description = Column(Text, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime, nullable=True)  # set iff is_completed
    note = Column(Text, nullable=True)
    # Unique per task; no schema constraint since the insert shift bumps a range in one UPDATE
    order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    task = relationship("Task", back_populates="nodes")
