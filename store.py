"""Task and task entry persistence, one constant statement per operation"""
from typing import Any, Dict, List, Optional

from sqlalchemy.engine import Engine

from db import Err, execute_query

INSERT_TASK = "INSERT INTO task (name) VALUES (:name)"
DELETE_TASK = "DELETE FROM task WHERE id = :id"
SELECT_TASKS = "SELECT id, name FROM task ORDER BY id"
SELECT_TASK = "SELECT id, name FROM task WHERE id = :id"

INSERT_ENTRY = "INSERT INTO task_entry (task_id, task_details) VALUES (:task_id, :details)"
SELECT_ENTRIES = (
    "SELECT id, task_id, task_details FROM task_entry WHERE task_id = :task_id ORDER BY id"
)
DELETE_ENTRY = "DELETE FROM task_entry WHERE id = :id"


class DatabaseError(Exception):
    """A statement issued by the store did not complete"""

    def __init__(self, statement: str, error: Exception):
        super().__init__(f"{statement!r} failed: {error}")
        self.statement = statement
        self.error = error


def _run(engine: Engine, statement: str, params=None) -> List[Dict[str, Any]]:
    result = execute_query(engine, statement, params)
    if isinstance(result, Err):
        raise DatabaseError(statement, result.error) from result.error
    return result.rows


def create_task(engine: Engine, name: str):
    _run(engine, INSERT_TASK, {"name": name})


def delete_task_by_id(engine: Engine, task_id: int):
    _run(engine, DELETE_TASK, {"id": task_id})


def list_tasks(engine: Engine) -> List[Dict[str, Any]]:
    return _run(engine, SELECT_TASKS)


def create_task_entry(engine: Engine, task_id: int, details: str):
    _run(engine, INSERT_ENTRY, {"task_id": task_id, "details": details})


def get_task_name(engine: Engine, task_id: int) -> List[Dict[str, Any]]:
    """Zero or one task rows"""
    return _run(engine, SELECT_TASK, {"id": task_id})


def list_task_entries(engine: Engine, task_id: int) -> Optional[List[Dict[str, Any]]]:
    """Entries of a task in insertion order, or None when it has none"""
    rows = _run(engine, SELECT_ENTRIES, {"task_id": task_id})
    return rows or None


def delete_task_entry(engine: Engine, entry_id: int):
    _run(engine, DELETE_ENTRY, {"id": entry_id})
