"""
DAILY TASK CLI - Task Manager
=============================
Owns the in-memory task list and its JSON backing document.
Every mutating call rewrites the whole document; a failed write rolls the
in-memory list back so memory never claims more than disk holds.
"""

import json
import os
import shutil
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, List, Union, Any
import logging

from pydantic import ValidationError

from .schema import (
    Task, TaskStats, TaskStatus, TaskPriority, TaskFilter, utcnow
)

logger = logging.getLogger("dailytask")

TASKS_FILE_ENV = "DAILY_TASK_FILE"
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def default_tasks_file(project_root: Path = PROJECT_ROOT) -> Path:
    """
    data/tasks.json inside a source checkout, otherwise a per-user file
    (~/.daily-task/tasks.json) so installed copies never write into site-packages.
    """
    if (project_root / "pyproject.toml").exists():
        return project_root / "data" / "tasks.json"
    return Path.home() / ".daily-task" / "tasks.json"


DEFAULT_TASKS_FILE = default_tasks_file()

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

TaskId = Union[int, str]


class TaskStoreError(Exception):
    """Base class for task store failures"""


class PersistenceError(TaskStoreError):
    """The backing document could not be written"""


def _coerce_id(task_id: Any) -> Optional[int]:
    """
    Accept ints and base-10 integer strings; anything else matches no task.

    Stricter than a JS Number() conversion: "1e3", "1704103200000.0" and
    floats are not treated as ids.
    """
    if isinstance(task_id, bool):
        return None
    if isinstance(task_id, int):
        return task_id
    if isinstance(task_id, str):
        try:
            return int(task_id.strip())
        except ValueError:
            return None
    return None


def _epoch_millis(moment: datetime) -> int:
    return (moment - _EPOCH) // timedelta(milliseconds=1)


class TaskManager:
    """
    Daily Task Manager

    Storage: a single JSON array at tasks_file
    (argument > $DAILY_TASK_FILE > default_tasks_file())

    Call load() once before using the other operations.
    """

    def __init__(self, tasks_file: Optional[Union[str, Path]] = None):
        if tasks_file is None:
            tasks_file = os.environ.get(TASKS_FILE_ENV) or DEFAULT_TASKS_FILE
        self.tasks_file = Path(tasks_file)
        self._tasks: List[Task] = []

    def __len__(self) -> int:
        return len(self._tasks)

    # ========================================
    # PERSISTENCE OPERATIONS
    # ========================================

    @property
    def backup_file(self) -> Path:
        return self.tasks_file.with_name(self.tasks_file.name + ".bak")

    def load(self) -> List[Task]:
        """
        Load tasks from file.

        A missing file means an empty list. An unreadable document, or single
        records that fail validation, are dropped with a warning; in both cases
        the original file is copied to backup_file before anything can
        overwrite it.
        """
        self._tasks = []

        if not self.tasks_file.exists():
            logger.debug(f"No task file at {self.tasks_file}, starting empty")
            return []

        try:
            with open(self.tasks_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
        except (OSError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"⚠️ Could not read {self.tasks_file}, starting empty: {e}")
            self._backup_original()
            return []

        tasks: List[Task] = []
        skipped = 0
        for position, item in enumerate(data):
            try:
                tasks.append(Task.model_validate(item))
            except ValidationError as e:
                skipped += 1
                logger.warning(f"⚠️ Skipping invalid task #{position} in {self.tasks_file}: {e}")

        if skipped:
            self._backup_original()

        self._tasks = tasks
        logger.info(f"📂 Loaded {len(tasks)} tasks from {self.tasks_file}")
        return self._copies(self._tasks)

    def _backup_original(self) -> None:
        try:
            shutil.copyfile(self.tasks_file, self.backup_file)
        except OSError as e:
            logger.error(f"❌ Could not back up {self.tasks_file} to {self.backup_file}: {e}")
            return
        logger.warning(f"⚠️ Kept a copy of the original task file at {self.backup_file}")

    def save(self) -> None:
        """Write the full task list to file, replacing the previous document"""
        tmp_path = self.tasks_file.with_name(self.tasks_file.name + ".tmp")
        try:
            payload = [t.model_dump(mode="json", by_alias=True) for t in self._tasks]
            self.tasks_file.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.tasks_file)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"❌ Error saving tasks to {self.tasks_file}: {e}")
            try:
                tmp_path.unlink()
            except OSError:
                pass
            raise PersistenceError(str(e)) from e

        logger.debug(f"💾 Saved {len(self._tasks)} tasks to {self.tasks_file}")

    # ========================================
    # TASK OPERATIONS
    # ========================================

    def add(self, description: str, priority: Optional[str] = "medium") -> Optional[Task]:
        """Add a new pending task; None if it could not be saved"""
        if not isinstance(description, str) or not description.strip():
            raise ValueError("description is required")

        now = utcnow()
        task = Task(
            id=self._next_id(now),
            description=description,
            priority=TaskPriority.normalize(priority),
            status=TaskStatus.PENDING,
            created_at=now,
            completed_at=None,
        )

        self._tasks.append(task)
        try:
            self.save()
        except PersistenceError:
            self._tasks.pop()
            return None

        logger.info(f"➕ Added task {task.id} ({task.priority.value}): {task.description}")
        return task.model_copy()

    def mark_complete(self, task_id: TaskId) -> bool:
        """Mark a task as completed; already-completed tasks are left alone"""
        task = self._get_task(task_id)
        if task is None:
            logger.warning(f"Task not found: {task_id}")
            return False

        if task.is_completed:
            logger.info(f"Task {task.id} is already completed")
            return True

        task.status = TaskStatus.COMPLETED
        task.completed_at = utcnow()
        try:
            self.save()
        except PersistenceError:
            task.status = TaskStatus.PENDING
            task.completed_at = None
            return False

        logger.info(f"✅ Completed task {task.id}: {task.description}")
        return True

    def delete(self, task_id: TaskId) -> bool:
        """Delete a task by ID"""
        index = self._index_of(task_id)
        if index is None:
            logger.warning(f"Task not found: {task_id}")
            return False

        task = self._tasks.pop(index)
        try:
            self.save()
        except PersistenceError:
            self._tasks.insert(index, task)
            return False

        logger.info(f"🗑️ Deleted task {task.id}: {task.description}")
        return True

    def clear_all(self) -> bool:
        """Remove every task (confirmation is the caller's job)"""
        previous = self._tasks
        self._tasks = []
        try:
            self.save()
        except PersistenceError:
            self._tasks = previous
            return False

        logger.info(f"🧹 Cleared {len(previous)} tasks")
        return True

    # ========================================
    # QUERIES
    # ========================================

    def get_tasks(self, filter: Union[str, TaskFilter] = TaskFilter.ALL) -> List[Task]:
        """Tasks matching a named filter, in insertion order"""
        selected = TaskFilter.parse(filter)
        if selected is None:
            logger.debug(f"Unknown filter {filter!r}, showing all tasks")
            selected = TaskFilter.ALL

        if selected == TaskFilter.PENDING:
            tasks = [t for t in self._tasks if t.status == TaskStatus.PENDING]
        elif selected == TaskFilter.COMPLETED:
            tasks = [t for t in self._tasks if t.status == TaskStatus.COMPLETED]
        elif selected == TaskFilter.HIGH:
            tasks = [t for t in self._tasks if t.priority == TaskPriority.HIGH]
        elif selected == TaskFilter.TODAY:
            tasks = self._created_today()
        else:
            tasks = self._tasks

        return self._copies(tasks)

    def get_task_by_id(self, task_id: TaskId) -> Optional[Task]:
        task = self._get_task(task_id)
        return task.model_copy() if task is not None else None

    def get_stats(self) -> TaskStats:
        """Counters over the current list"""
        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.is_completed)

        return TaskStats(
            total=total,
            completed=completed,
            pending=total - completed,
            completion_rate=_percent(completed, total),
            high_priority=sum(1 for t in self._tasks if t.priority == TaskPriority.HIGH),
            today=len(self._created_today()),
        )

    def search(self, keyword: Optional[str]) -> List[Task]:
        """Case-insensitive substring search; an empty keyword matches everything"""
        if not keyword or not keyword.strip():
            return self._copies(self._tasks)

        needle = keyword.lower()
        return self._copies(t for t in self._tasks if needle in t.description.lower())

    # ========================================
    # HELPER METHODS
    # ========================================

    def _get_task(self, task_id: TaskId) -> Optional[Task]:
        index = self._index_of(task_id)
        return self._tasks[index] if index is not None else None

    def _index_of(self, task_id: TaskId) -> Optional[int]:
        wanted = _coerce_id(task_id)
        if wanted is None:
            return None
        for i, task in enumerate(self._tasks):
            if task.id == wanted:
                return i
        return None

    def _next_id(self, now: datetime) -> int:
        """Millisecond timestamp, bumped past the largest id already in use"""
        candidate = _epoch_millis(now)
        highest = max((t.id for t in self._tasks), default=0)
        if candidate <= highest:
            candidate = highest + 1
        return candidate

    def _created_today(self) -> List[Task]:
        today = datetime.now().astimezone().date()
        return [t for t in self._tasks if t.created_on(today)]

    @staticmethod
    def _copies(tasks) -> List[Task]:
        return [t.model_copy() for t in tasks]


def _percent(part: int, whole: int) -> int:
    """Integer percentage rounded half up; 0 for an empty whole"""
    if whole <= 0:
        return 0
    return (part * 200 + whole) // (whole * 2)
