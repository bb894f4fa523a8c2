"""Task list kept in the local key-value store under a single key, never in Supabase."""
from portal.database.local_store import LocalStore
from portal.modules.tasks.schemas import TaskCreate, TaskUpdate, TaskResponse
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import json
import logging
import time

logger = logging.getLogger(__name__)

TASKS_KEY = "dr-help-tasks"

STATUS_LABELS = {
    "pending": "Pending",
    "in_progress": "In progress",
    "completed": "Completed",
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def sample_tasks() -> List[Dict[str, Any]]:
    now = _now()
    return [
        {
            "id": "1",
            "title": "Improve patient management UI",
            "description": "Make the patient intake form easier to use and responsive.",
            "status": "in_progress",
            "priority": "high",
            "assignee": "Kim Dev",
            "due_date": "2024-07-25",
            "category": "development",
            "created_at": now,
            "updated_at": now,
        },
        {
            "id": "2",
            "title": "Add staff schedule management",
            "description": "Calendar for staff shifts and leave.",
            "status": "pending",
            "priority": "medium",
            "assignee": "Lee Planner",
            "due_date": "2024-08-01",
            "category": "planning",
            "created_at": now,
            "updated_at": now,
        },
        {
            "id": "3",
            "title": "Check database backup system",
            "description": "Confirm scheduled database backups run correctly.",
            "status": "completed",
            "priority": "high",
            "assignee": "Park Sys",
            "due_date": "2024-07-20",
            "category": "maintenance",
            "created_at": now,
            "updated_at": now,
        },
    ]


def serialize_tasks(tasks: List[Dict[str, Any]]) -> str:
    return json.dumps(tasks, ensure_ascii=False)


class TaskService:
    def __init__(self, store: LocalStore):
        self.store = store

    def load_tasks(self) -> List[Dict[str, Any]]:
        """Read the task list; first load seeds and persists the sample tasks"""
        try:
            saved = self.store.get_item(TASKS_KEY)
            if saved is not None:
                return json.loads(saved)
            tasks = sample_tasks()
            self.store.set_item(TASKS_KEY, serialize_tasks(tasks))
            return tasks
        except Exception as e:
            logger.error(f"Error loading tasks: {e}")
            raise HTTPException(status_code=500, detail="Failed to load tasks")

    def _save(self, tasks: List[Dict[str, Any]]) -> None:
        try:
            self.store.set_item(TASKS_KEY, serialize_tasks(tasks))
        except Exception as e:
            logger.error(f"Error saving tasks: {e}")
            raise HTTPException(status_code=500, detail="Failed to save tasks")

    def list_tasks(self, status: Optional[str] = None) -> List[TaskResponse]:
        tasks = self.load_tasks()
        if status:
            tasks = [t for t in tasks if t["status"] == status]
        return [TaskResponse(**t) for t in tasks]

    def _new_id(self, tasks: List[Dict[str, Any]]) -> str:
        # Millisecond timestamp; bumped when two tasks land in the same millisecond
        existing = {t["id"] for t in tasks}
        candidate = int(time.time() * 1000)
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    def create_task(self, task_data: TaskCreate) -> TaskResponse:
        tasks = self.load_tasks()
        now = _now()
        task = {
            "id": self._new_id(tasks),
            "title": task_data.title,
            "description": task_data.description,
            "status": task_data.status,
            "priority": task_data.priority,
            "assignee": task_data.assignee,
            "due_date": task_data.due_date.isoformat() if task_data.due_date else None,
            "category": task_data.category,
            "created_at": now,
            "updated_at": now,
        }
        self._save([task] + tasks)
        logger.info(f"Created task {task['id']}")
        return TaskResponse(**task)

    def _apply(self, task_id: str, updates: Dict[str, Any]) -> TaskResponse:
        tasks = self.load_tasks()
        updated = None
        for task in tasks:
            if task["id"] == task_id:
                task.update(updates)
                task["updated_at"] = _now()
                updated = task
                break
        if updated is None:
            raise HTTPException(status_code=404, detail="Task not found")
        self._save(tasks)
        return TaskResponse(**updated)

    def update_task_status(self, task_id: str, status: str) -> TaskResponse:
        task = self._apply(task_id, {"status": status})
        logger.info(f"Task {task_id} status changed to \"{STATUS_LABELS[status]}\"")
        return task

    def update_task(self, task_id: str, task_data: TaskUpdate) -> TaskResponse:
        updates = task_data.model_dump(exclude_unset=True)
        if "due_date" in updates and updates["due_date"] is not None:
            updates["due_date"] = updates["due_date"].isoformat()
        for required in ("title", "description", "priority", "category", "status"):
            if required in updates and updates[required] is None:
                del updates[required]
        return self._apply(task_id, updates)

    def delete_task(self, task_id: str) -> bool:
        tasks = self.load_tasks()
        remaining = [t for t in tasks if t["id"] != task_id]
        if len(remaining) == len(tasks):
            raise HTTPException(status_code=404, detail="Task not found")
        self._save(remaining)
        return True
