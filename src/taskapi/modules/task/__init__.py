"""Task feature - persistence and one-way completion of task records."""

from .manager import TaskManager
from .models import Task
from .repository import TaskRepository
from .router import TaskRouter
from .schemas import CompleteTaskIn, TaskFilter, TaskIn, TaskOut, TaskResponse

__all__ = [
    "Task",
    "TaskFilter",
    "TaskIn",
    "TaskOut",
    "CompleteTaskIn",
    "TaskResponse",
    "TaskRepository",
    "TaskManager",
    "TaskRouter",
]
