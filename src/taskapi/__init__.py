"""taskapi - task tracking HTTP service on async SQLAlchemy and FastAPI."""

# Core framework
from taskapi.core import (
    Base,
    ConfigError,
    Database,
    InvalidTimestampError,
    NotFoundError,
    OperationTimeoutError,
    Settings,
    StorageError,
    TaskAPIError,
    ValidationError,
    load_settings,
)

# Task feature
from taskapi.modules.task import (
    CompleteTaskIn,
    Task,
    TaskFilter,
    TaskIn,
    TaskManager,
    TaskOut,
    TaskRepository,
    TaskResponse,
)

__version__ = "0.1.0"

__all__ = [
    # Core framework
    "Database",
    "Base",
    "Settings",
    "load_settings",
    # Errors
    "TaskAPIError",
    "ValidationError",
    "NotFoundError",
    "StorageError",
    "InvalidTimestampError",
    "OperationTimeoutError",
    "ConfigError",
    # Task feature
    "Task",
    "TaskFilter",
    "TaskIn",
    "TaskOut",
    "CompleteTaskIn",
    "TaskResponse",
    "TaskRepository",
    "TaskManager",
    # Version
    "__version__",
]
