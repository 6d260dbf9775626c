#!/usr/bin/env python3
"""
DAILY TASK CLI - Command Line Interface
=======================================
Command-line tool for managing a personal daily task list.

Usage:
    task add "Buy groceries" high
    task list pending
    task complete 1760000000000
    task delete 1760000000000
    task search "meeting"
    task stats
    task clear
"""

import argparse
import json
import logging
import platform
import sys
from datetime import datetime
from typing import Callable, List, Optional

from . import __version__
from . import theme
from .theme import color
from .manager import TaskManager
from .schema import Task, TaskFilter, TaskPriority

logger = logging.getLogger("dailytask")

COMMAND_ALIASES = {
    "ls": "list",
    "done": "complete",
    "del": "delete",
    "remove": "delete",
    "status": "stats",
    "clean": "clear",
}

YES_ANSWERS = {"yes", "y"}

InputFn = Callable[[str], str]


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def confirm(question: str, input_fn: InputFn = input) -> bool:
    """Ask a yes/no question; only 'yes' or 'y' (any case) counts as yes"""
    try:
        answer = input_fn(question)
    except EOFError:
        return False
    return answer.strip().lower() in YES_ANSWERS


def _local_time(moment: Optional[datetime]) -> str:
    if moment is None:
        return "-"
    return moment.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _status_icon(task: Task) -> str:
    if task.is_completed:
        return color(theme.CHECK, theme.GREEN)
    return color(theme.PENDING, theme.YELLOW)


def _priority_text(priority: TaskPriority) -> str:
    return color(priority.value, theme.PRIORITY_COLOR.get(priority.value, theme.WHITE))


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _tasks_as_json(tasks: List[Task]) -> list:
    return [t.model_dump(mode="json", by_alias=True) for t in tasks]


def _print_task_details(tasks: List[Task]) -> None:
    for index, task in enumerate(tasks, start=1):
        print(f"{color(f'{index}.', theme.WHITE)} {_status_icon(task)} {task.description}")
        print(f"   {color('ID:', theme.GRAY)} {color(str(task.id), theme.CYAN)}")
        print(f"   {color('Priority:', theme.GRAY)} {_priority_text(task.priority)}")
        print(f"   {color('Status:', theme.GRAY)} "
              f"{color(task.status.value, theme.STATUS_COLOR[task.status.value])}")
        print(f"   {color('Created:', theme.GRAY)} {_local_time(task.created_at)}")
        if task.is_completed and task.completed_at:
            print(f"   {color('Completed:', theme.GRAY)} {_local_time(task.completed_at)}")
        if index < len(tasks):
            print(f"   {color('─' * 40, theme.GRAY)}")


def _add_common_options(parser: argparse.ArgumentParser, suppress: bool = False) -> None:
    # Sub-commands suppress their defaults so options given before the command survive
    defaults = {"default": argparse.SUPPRESS} if suppress else {}
    parser.add_argument("--file", dest="tasks_file",
                        help="Task file (default: $DAILY_TASK_FILE or data/tasks.json)", **defaults)
    parser.add_argument("--verbose", action="store_true", help="Show debug logging", **defaults)


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    _add_common_options(common, suppress=True)

    parser = argparse.ArgumentParser(
        prog="task",
        description="Daily Task CLI - Command Line Task Manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  task add "Buy groceries"              Add a task (priority: medium)
  task add "Finish report" high         Add a high priority task
  task list                             List all tasks
  task list pending                     List pending tasks (all/pending/completed/high/today)
  task complete 1234567890              Mark task as completed
  task delete 1234567890                Delete a task (asks for confirmation)
  task search "meeting"                 Search tasks by keyword
  task stats                            Show task statistics
  task clear                            Delete all tasks (asks for confirmation)

Priority: low/medium/high (default: medium)
        """
    )
    _add_common_options(parser)
    parser.add_argument("-v", "--version", action="store_true", help="Show version information")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ADD command
    add_parser = subparsers.add_parser("add", parents=[common], help="Add a new task")
    add_parser.add_argument("description", help="Task description")
    add_parser.add_argument("priority", nargs="?", default=None, help="low/medium/high (default: medium)")

    # LIST command
    list_parser = subparsers.add_parser("list", aliases=["ls"], parents=[common], help="List tasks")
    list_parser.add_argument("filter", nargs="?", default=TaskFilter.ALL.value,
                             help="all/pending/completed/high/today (default: all)")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # COMPLETE command
    complete_parser = subparsers.add_parser("complete", aliases=["done"], parents=[common],
                                            help="Mark task as completed")
    complete_parser.add_argument("task_id", help="Task ID to complete")

    # DELETE command
    delete_parser = subparsers.add_parser("delete", aliases=["del", "remove"], parents=[common],
                                          help="Delete a task (with confirmation)")
    delete_parser.add_argument("task_id", help="Task ID to delete")
    delete_parser.add_argument("-y", "--yes", action="store_true", help="Don't ask for confirmation")

    # STATS command
    stats_parser = subparsers.add_parser("stats", aliases=["status"], parents=[common],
                                         help="Show task statistics")
    stats_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # CLEAR command
    clear_parser = subparsers.add_parser("clear", aliases=["clean"], parents=[common],
                                         help="Clear all tasks (with confirmation)")
    clear_parser.add_argument("-y", "--yes", action="store_true", help="Don't ask for confirmation")

    # SEARCH command
    search_parser = subparsers.add_parser("search", parents=[common], help="Search tasks by keyword")
    search_parser.add_argument("keyword", nargs="+", help="Search term")
    search_parser.add_argument("--json", action="store_true", help="Output as JSON")

    subparsers.add_parser("help", help="Show this help message")
    subparsers.add_parser("version", help="Show version information")

    return parser


def show_version() -> None:
    print(color(f"Daily Task CLI v{__version__}", theme.BLUE))
    print(color(f"Python {platform.python_version()}", theme.GRAY))


# ========================================
# COMMAND HANDLERS
# ========================================

def handle_add(manager: TaskManager, args) -> int:
    description = args.description.strip()
    if not description:
        print(color("Error: Please provide a task description", theme.RED))
        print('Usage: task add "Your task description" [priority]')
        return 1

    priority = args.priority or TaskPriority.MEDIUM.value
    if not TaskPriority.is_valid(priority):
        print(color(f"Warning: Invalid priority '{priority}'. Using 'medium'.", theme.YELLOW))
        print(f"Valid priorities: {', '.join(p.value for p in TaskPriority)}")

    task = manager.add(description, priority)
    if task is None:
        print(color("Error: Failed to save task", theme.RED))
        return 1

    print()
    print(color(f"{theme.CHECK} Task added successfully!", theme.GREEN))
    print(f"{color('└─', theme.GRAY)} ID: {color(str(task.id), theme.CYAN)}")
    print(f'{color("└─", theme.GRAY)} Description: "{task.description}"')
    print(f"{color('└─', theme.GRAY)} Priority: {_priority_text(task.priority)}")
    print(f"{color('└─', theme.GRAY)} Status: {color(task.status.value, theme.YELLOW)}")
    return 0


def handle_list(manager: TaskManager, args) -> int:
    selected = TaskFilter.parse(args.filter)
    if selected is None:
        print(color(f"Invalid filter: '{args.filter}'", theme.RED))
        print(f"Valid filters: {', '.join(f.value for f in TaskFilter)}")
        return 1

    tasks = manager.get_tasks(selected)

    if args.json:
        _print_json(_tasks_as_json(tasks))
        return 0

    if not tasks:
        suffix = "" if selected == TaskFilter.ALL else f" ({selected.value})"
        print(color(f"No tasks found{suffix}", theme.YELLOW))
        return 0

    title = "All" if selected == TaskFilter.ALL else selected.value.capitalize()
    print()
    print(color(f"{title} Tasks ({len(tasks)})", theme.BLUE))
    print(color("─" * 60, theme.GRAY))
    _print_task_details(tasks)
    return 0


def handle_complete(manager: TaskManager, args) -> int:
    task = manager.get_task_by_id(args.task_id)
    if task is None:
        print(color(f"Error: Task with ID '{args.task_id}' not found", theme.RED))
        print(f"Use {color('task list', theme.CYAN)} to see available tasks")
        return 1

    if task.is_completed:
        print(color(f"Task '{task.description}' is already completed", theme.YELLOW))
        return 0

    if not manager.mark_complete(task.id):
        print(color("Error updating task", theme.RED))
        return 1

    completed = manager.get_task_by_id(task.id)
    print()
    print(color(f"{theme.CHECK} Task marked as completed!", theme.GREEN))
    print(f'"{task.description}"')
    print(color(f"Completed at: {_local_time(completed.completed_at if completed else None)}", theme.GRAY))
    return 0


def handle_delete(manager: TaskManager, args, input_fn: InputFn = input) -> int:
    task = manager.get_task_by_id(args.task_id)
    if task is None:
        print(color(f"Error: Task with ID '{args.task_id}' not found", theme.RED))
        print(f"Use {color('task list', theme.CYAN)} to see available tasks")
        return 1

    question = color(f'{theme.WARNING}Delete task "{task.description}"? (yes/no): ', theme.YELLOW)
    if not args.yes and not confirm(question, input_fn):
        print(color("Deletion cancelled", theme.YELLOW))
        return 0

    if not manager.delete(task.id):
        print(color("Error deleting task", theme.RED))
        return 1

    print(color(f"{theme.CHECK} Task deleted successfully!", theme.GREEN))
    return 0


def handle_stats(manager: TaskManager, args) -> int:
    stats = manager.get_stats()

    if args.json:
        _print_json(stats.model_dump(by_alias=True))
        return 0

    print()
    print(color(f"{theme.STATS} Task Statistics", theme.CYAN))
    print(color("─" * 30, theme.GRAY))
    print(f"{color('Total tasks:', theme.WHITE)}    {stats.total}")
    print(f"{color('Completed:', theme.WHITE)}      {color(str(stats.completed), theme.GREEN)}")
    print(f"{color('Pending:', theme.WHITE)}        {color(str(stats.pending), theme.YELLOW)}")
    print(f"{color('High priority:', theme.WHITE)}  {color(str(stats.high_priority), theme.RED)}")
    print(f"{color('Created today:', theme.WHITE)}  {stats.today}")

    if stats.total > 0:
        bar = theme.progress_bar(stats.completed, stats.total)
        print()
        print(f"{color('Completion:', theme.WHITE)} {bar} {stats.completion_rate}%")

    if stats.pending == 0 and stats.total > 0:
        print()
        print(color(f"{theme.PARTY} All tasks completed! Excellent work!", theme.GREEN))
    elif stats.completion_rate >= 75:
        print()
        print(color("Great progress! Keep going!", theme.GREEN))
    elif stats.pending > 0:
        print()
        print(color(f"You have {stats.pending} task(s) pending. Let's get to work!", theme.YELLOW))
    return 0


def handle_clear(manager: TaskManager, args, input_fn: InputFn = input) -> int:
    count = len(manager)
    question = color(
        f"{theme.WARNING}Delete ALL {count} tasks? This cannot be undone. (yes/no): ", theme.RED
    )
    if not args.yes and not confirm(question, input_fn):
        print(color("Operation cancelled. No tasks were deleted.", theme.YELLOW))
        return 0

    if not manager.clear_all():
        print(color("Error clearing tasks", theme.RED))
        return 1

    print(color(f"{theme.CHECK} All tasks have been cleared!", theme.GREEN))
    return 0


def handle_search(manager: TaskManager, args) -> int:
    keyword = " ".join(args.keyword)
    tasks = manager.search(keyword)

    if args.json:
        _print_json(_tasks_as_json(tasks))
        return 0

    if not tasks:
        print(color(f'No tasks found matching "{keyword}"', theme.YELLOW))
        return 0

    print()
    print(color(f'Search results for "{keyword}" ({len(tasks)})', theme.BLUE))
    print(color("─" * 60, theme.GRAY))
    for index, task in enumerate(tasks, start=1):
        description = theme.highlight(task.description, keyword, theme.CYAN)
        print(f"{color(f'{index}.', theme.WHITE)} {_status_icon(task)} {description}")
        print(color(f"   ID: {task.id} | Priority: {task.priority.value} | Status: {task.status.value}",
                    theme.GRAY))
    return 0


def main(argv: Optional[List[str]] = None, input_fn: InputFn = input) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _setup_logging(getattr(args, "verbose", False))

    if args.version or args.command == "version":
        show_version()
        return 0

    if not args.command or args.command == "help":
        parser.print_help()
        return 0

    command = COMMAND_ALIASES.get(args.command, args.command)

    try:
        # Initialize manager
        manager = TaskManager(tasks_file=args.tasks_file)
        manager.load()

        # Execute command
        if command == "add":
            return handle_add(manager, args)
        elif command == "list":
            return handle_list(manager, args)
        elif command == "complete":
            return handle_complete(manager, args)
        elif command == "delete":
            return handle_delete(manager, args, input_fn)
        elif command == "stats":
            return handle_stats(manager, args)
        elif command == "clear":
            return handle_clear(manager, args, input_fn)
        elif command == "search":
            return handle_search(manager, args)
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        print(color(f"Unexpected error: {e}", theme.RED))
        return 1

    print(color(f"Error: Unknown command '{args.command}'", theme.RED))
    return 1


if __name__ == "__main__":
    sys.exit(main())
