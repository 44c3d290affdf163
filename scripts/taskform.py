#!/usr/bin/env python3
"""
Task Form

Interactive terminal form that collects a task and appends it to a
JSON task list.

Usage:
    taskform.py                 Launch the form
    taskform.py --list          Print stored tasks and exit (no TUI)
    taskform.py --json          Print stored tasks as JSON and exit
    taskform.py --file PATH     Use PATH instead of db/tasks.json

Environment:
    TASKFORM_TASKS_FILE, TASKFORM_LOG_DIR, TASKFORM_LOG_LEVEL

Requirements:
    pip install textual jsonschema
"""

import argparse
import json
import logging
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).resolve().parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from logging_setup import setup_logging  # noqa: E402
from settings import get_settings  # noqa: E402
from tui.task_store import FileTaskStore, StoreError  # noqa: E402

logger = logging.getLogger("taskform")


def print_tasks_once(store: FileTaskStore) -> int:
    """Print stored tasks and exit."""
    tasks = store.load()

    if not tasks:
        print(f"No tasks in {store.path}.")
        print("Run 'python3 scripts/taskform.py' to create one.")
        return 0

    print(f"Tasks in {store.path}: {len(tasks)}")
    print()
    for i, task in enumerate(tasks, start=1):
        print(f"{i:>3}. {task.title or '(untitled)'}")
        details = [
            ("Description", task.description),
            ("Urgency", task.urgency),
            ("Status", task.status),
            ("Assigned by", task.assigned_by),
        ]
        for label, value in details:
            if value:
                print(f"     {label}: {value}")
        for comment in task.comments:
            print(f"     Comment: {comment}")
    return 0


def print_tasks_json(store: FileTaskStore) -> int:
    """Print stored tasks as JSON and exit."""
    tasks = store.load()
    print(json.dumps([t.to_dict() for t in tasks], indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Task Form",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print stored tasks and exit (no TUI)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print stored tasks as JSON and exit",
    )
    parser.add_argument(
        "--file",
        type=Path,
        help="Path to the task list (default: db/tasks.json)",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        help="Directory for taskform.log (default: .local/taskform)",
    )
    parser.add_argument(
        "--log-level",
        help="File log level (default: INFO)",
    )

    args = parser.parse_args(argv)
    settings = get_settings().with_overrides(
        tasks_file=args.file,
        log_dir=args.log_dir,
        log_level=args.log_level.upper() if args.log_level else None,
    )

    try:
        setup_logging(
            log_dir=settings.log_dir,
            file_level=getattr(logging, settings.log_level, logging.INFO),
        )
    except OSError as e:
        print(f"could not start program: {e}", file=sys.stderr)
        return 1

    store = FileTaskStore(settings.tasks_file)

    if args.json or args.list:
        try:
            return print_tasks_json(store) if args.json else print_tasks_once(store)
        except StoreError as e:
            logger.error("Could not read %s: %s", store.path, e)
            return 1

    from tui.app import run

    logger.info("Starting form, tasks file %s", store.path)
    try:
        return run(tasks_file=settings.tasks_file)
    except OSError as e:
        logger.error("could not start program: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
