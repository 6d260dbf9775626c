"""
DAILY TASK CLI - Command Line Task Manager
==========================================

Keep a personal task list in a local JSON file.

Usage:
    from dailytask import TaskManager

    manager = TaskManager()
    manager.load()

    task = manager.add("Buy milk", "high")
    manager.mark_complete(task.id)
    print(manager.get_stats())

    manager.delete(task.id)
"""

__version__ = "1.0.0"

from .schema import (
    Task,
    TaskStatus,
    TaskPriority,
    TaskFilter,
    TaskStats,
)

from .manager import TaskManager, TaskStoreError, PersistenceError

__all__ = [
    "TaskManager",
    "TaskStoreError",
    "PersistenceError",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "TaskFilter",
    "TaskStats",
]
