from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskline.database import get_db
from taskline.schemas.task import TaskCreate, TaskOut, TaskComplete, SuccessOut
from taskline.services import tasks as task_service
from taskline.utils.auth import Principal, get_current_user

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskOut])
def list_tasks(db: Session = Depends(get_db), user: Principal = Depends(get_current_user)):
    return task_service.list_tasks(db, user.user_id)


@router.post("", response_model=TaskOut)
def create_task(task: TaskCreate, db: Session = Depends(get_db), user: Principal = Depends(get_current_user)):
    return task_service.create_task(db, user.user_id, task.name)


@router.post("/complete", response_model=SuccessOut)
def complete_task(body: TaskComplete, db: Session = Depends(get_db), user: Principal = Depends(get_current_user)):
    task_service.complete_task(db, user.user_id, body.task_id)
    return SuccessOut()


@router.get("/{task_id}", response_model=TaskOut)
def get_task(task_id: str, db: Session = Depends(get_db), user: Principal = Depends(get_current_user)):
    return task_service.get_task(db, user.user_id, task_id)
