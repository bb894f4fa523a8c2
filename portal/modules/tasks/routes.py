from fastapi import APIRouter, Depends
from portal.database.local_store import LocalStore, get_local_store
from portal.modules.tasks.schemas import TaskCreate, TaskUpdate, TaskStatusUpdate, TaskResponse, TaskStatus
from portal.modules.tasks.service import TaskService
from portal.core.dependencies import get_current_user
from typing import List, Dict, Optional

router = APIRouter(prefix="/tasks", tags=["tasks"])


def get_task_service(store: LocalStore = Depends(get_local_store)) -> TaskService:
    return TaskService(store)


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    status: Optional[TaskStatus] = None,
    user_data: Dict = Depends(get_current_user),
    service: TaskService = Depends(get_task_service)
):
    """List tasks, newest first"""
    return service.list_tasks(status=status)


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    task_data: TaskCreate,
    user_data: Dict = Depends(get_current_user),
    service: TaskService = Depends(get_task_service)
):
    return service.create_task(task_data)


@router.put("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
    task_id: str,
    status_data: TaskStatusUpdate,
    user_data: Dict = Depends(get_current_user),
    service: TaskService = Depends(get_task_service)
):
    return service.update_task_status(task_id, status_data.status)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    task_data: TaskUpdate,
    user_data: Dict = Depends(get_current_user),
    service: TaskService = Depends(get_task_service)
):
    return service.update_task(task_id, task_data)


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    user_data: Dict = Depends(get_current_user),
    service: TaskService = Depends(get_task_service)
):
    service.delete_task(task_id)
    return None
