from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from taskline.database import get_db
from taskline.errors import ValidationError
from taskline.schemas.task import NodeInsert, NodeUpdate, TaskNodeOut, SuccessOut
from taskline.services import tasks as task_service
from taskline.utils.auth import Principal, get_current_user

router = APIRouter(prefix="/nodes", tags=["nodes"])


@router.patch("", response_model=SuccessOut)
def update_node(patch: NodeUpdate, db: Session = Depends(get_db), user: Principal = Depends(get_current_user)):
    if not patch.node_id:
        raise ValidationError("Node ID is required")
    task_service.update_node(db, user.user_id, patch.node_id, patch.changes())
    return SuccessOut()


@router.delete("", response_model=SuccessOut)
def delete_node(
    node_id: Optional[str] = Query(None, alias="nodeId"),
    db: Session = Depends(get_db),
    user: Principal = Depends(get_current_user),
):
    if not node_id:
        raise ValidationError("Node ID is required")
    task_service.delete_node(db, user.user_id, node_id)
    return SuccessOut()


@router.post("", response_model=TaskNodeOut)
def insert_node(body: NodeInsert, db: Session = Depends(get_db), user: Principal = Depends(get_current_user)):
    if not body.task_id or not body.after_node_id:
        raise ValidationError("Task ID and After Node ID are required")
    return task_service.insert_node_after(db, user.user_id, body.task_id, body.after_node_id)
