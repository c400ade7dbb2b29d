from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from taskflow import schemas
from taskflow.auth import Identity, get_identity
from taskflow.database import get_db
from taskflow.models import TaskStatus
from taskflow.tasks import DEFAULT_PAGE_SIZE, TaskService

# Every route below sits behind the auth gateway
router = APIRouter(prefix="/api/tasks", tags=["Tasks"], dependencies=[Depends(get_identity)])


def get_task_service(request: Request, db: Session = Depends(get_db)) -> TaskService:
    return TaskService(db, scope_to_owner=request.app.state.settings.tasks_scope_to_owner)


@router.post("", response_model=schemas.TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task: schemas.TaskCreate,
    identity: Identity = Depends(get_identity),
    tasks: TaskService = Depends(get_task_service),
):
    db_task = tasks.create(
        owner_id=identity.user_id,
        title=task.title,
        description=task.description,
        status=task.status,
    )
    return {"message": "Task created successfully", "task": schemas.Task.model_validate(db_task)}


@router.get("", response_model=schemas.TaskPage)
def list_tasks(
    status: Optional[TaskStatus] = None,
    sort: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    identity: Identity = Depends(get_identity),
    tasks: TaskService = Depends(get_task_service),
):
    result = tasks.list(
        status=status,
        sort=sort,
        page=page,
        page_size=limit,
        requester_id=identity.user_id,
    )
    return schemas.TaskPage(
        message="Tasks retrieved successfully",
        total_items=result.total_items,
        total_pages=result.total_pages,
        current_page=result.current_page,
        page_size=result.page_size,
        tasks=[schemas.Task.model_validate(t) for t in result.tasks],
    )


@router.put("/{task_id}", response_model=schemas.TaskUpdateResponse)
def update_task(
    task_id: int,
    patch: schemas.TaskUpdate,
    identity: Identity = Depends(get_identity),
    tasks: TaskService = Depends(get_task_service),
):
    db_task = tasks.update(
        task_id,
        patch.model_dump(exclude_unset=True),
        requester_id=identity.user_id,
    )
    return schemas.TaskUpdateResponse(
        message="Task updated successfully",
        updated_task=schemas.Task.model_validate(db_task),
    )


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_task(
    task_id: int,
    identity: Identity = Depends(get_identity),
    tasks: TaskService = Depends(get_task_service),
):
    tasks.delete(task_id, requester_id=identity.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
