from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Speaks camelCase on the wire while accepting snake_case input too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class TaskCreate(CamelModel):
    # Blank names are rejected by the service, not here, so they surface as a 400
    name: str


class TaskNodeOut(CamelModel):
    id: str
    description: str
    is_completed: bool
    completed_at: Optional[datetime] = None
    note: Optional[str] = None
    order: int


class TaskOut(CamelModel):
    id: str
    name: str
    created_at: datetime
    nodes: List[TaskNodeOut] = []


class NodeUpdate(CamelModel):
    """Partial node update; only the fields the client sent are applied."""

    node_id: str
    description: Optional[str] = None
    note: Optional[str] = None
    is_completed: Optional[bool] = None
    completed_at: Optional[datetime] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"node_id"})


class NodeInsert(CamelModel):
    task_id: str
    after_node_id: str


class TaskComplete(CamelModel):
    task_id: str


class SuccessOut(BaseModel):
    success: bool = True
