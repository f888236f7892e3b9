"""Storage layer for todo lists.

Two interchangeable backends implement ``ListStore``:

- ``SessionStore`` keeps lists as plain dictionaries inside a session
  mapping (the signed browser session cookie when served over HTTP).
- ``DatabaseStore`` keeps lists and todos in SQLite tables.

Lookups of missing lists or todos return ``None``/``False`` rather than
raising, so callers decide how to report them.
"""

import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import List, MutableMapping, Optional, Union

from .todo import Todo
from .todo_list import TodoList, next_id


logger = logging.getLogger(__name__)

SESSION_KEY = "lists"


class ListStore(ABC):
    """Repository interface for lists and their todos."""

    @abstractmethod
    def all_lists(self) -> List[TodoList]:
        """Return every list in creation order."""

    @abstractmethod
    def find_list(self, list_id: int) -> Optional[TodoList]:
        """Return the list with the given id, or None."""

    @abstractmethod
    def create_list(self, name: str) -> TodoList:
        """Create an empty list with an auto-assigned id."""

    @abstractmethod
    def update_list_name(self, list_id: int, name: str) -> bool:
        """Rename a list. Returns False if the list does not exist.

        Raises:
            ValueError: If another list already has the name
        """

    @abstractmethod
    def delete_list(self, list_id: int) -> bool:
        """Delete a list and all of its todos."""

    @abstractmethod
    def create_todo(self, list_id: int, name: str) -> Optional[Todo]:
        """Add an incomplete todo to a list. Returns None if the list is missing."""

    @abstractmethod
    def delete_todo(self, list_id: int, todo_id: int) -> bool:
        """Delete a todo from a list."""

    @abstractmethod
    def update_todo_status(self, list_id: int, todo_id: int, completed: bool) -> bool:
        """Set a todo's completion state."""

    @abstractmethod
    def mark_all_todos_completed(self, list_id: int) -> bool:
        """Mark every todo in a list as completed."""


class SessionStore(ListStore):
    """List storage backed by a session mapping.

    Lists are stored under ``session["lists"]`` as JSON-serializable
    dictionaries so the session middleware can sign and persist them.
    """

    def __init__(self, session: MutableMapping):
        self.session = session
        self.session.setdefault(SESSION_KEY, [])

    def _load(self) -> List[TodoList]:
        return [TodoList.from_dict(data) for data in self.session[SESSION_KEY]]

    def _save(self, lists: List[TodoList]):
        self.session[SESSION_KEY] = [todo_list.to_dict() for todo_list in lists]

    @staticmethod
    def _find(lists: List[TodoList], list_id: int) -> Optional[TodoList]:
        for todo_list in lists:
            if todo_list.id == list_id:
                return todo_list
        return None

    def all_lists(self) -> List[TodoList]:
        return self._load()

    def find_list(self, list_id: int) -> Optional[TodoList]:
        return self._find(self._load(), list_id)

    def create_list(self, name: str) -> TodoList:
        lists = self._load()
        if any(todo_list.name == name for todo_list in lists):
            raise ValueError(f"List '{name}' already exists")

        todo_list = TodoList(id=next_id(lists), name=name)
        lists.append(todo_list)
        self._save(lists)
        logger.debug(f"Created list {todo_list.id} ({name})")
        return todo_list

    def update_list_name(self, list_id: int, name: str) -> bool:
        lists = self._load()
        todo_list = self._find(lists, list_id)
        if todo_list is None:
            return False
        if any(other.name == name and other.id != list_id for other in lists):
            raise ValueError(f"List '{name}' already exists")

        todo_list.name = name
        self._save(lists)
        logger.debug(f"Renamed list {list_id} to {name}")
        return True

    def delete_list(self, list_id: int) -> bool:
        lists = self._load()
        remaining = [todo_list for todo_list in lists if todo_list.id != list_id]
        if len(remaining) == len(lists):
            return False

        self._save(remaining)
        logger.debug(f"Deleted list {list_id}")
        return True

    def create_todo(self, list_id: int, name: str) -> Optional[Todo]:
        lists = self._load()
        todo_list = self._find(lists, list_id)
        if todo_list is None:
            return None

        todo = todo_list.add_todo(name)
        self._save(lists)
        logger.debug(f"Added todo {todo.id} to list {list_id}")
        return todo

    def delete_todo(self, list_id: int, todo_id: int) -> bool:
        lists = self._load()
        todo_list = self._find(lists, list_id)
        if todo_list is None or not todo_list.remove_todo(todo_id):
            return False

        self._save(lists)
        logger.debug(f"Deleted todo {todo_id} from list {list_id}")
        return True

    def update_todo_status(self, list_id: int, todo_id: int, completed: bool) -> bool:
        lists = self._load()
        todo_list = self._find(lists, list_id)
        todo = todo_list.find_todo(todo_id) if todo_list else None
        if todo is None:
            return False

        todo.set_completed(completed)
        self._save(lists)
        logger.debug(f"Set todo {todo_id} in list {list_id} completed={completed}")
        return True

    def mark_all_todos_completed(self, list_id: int) -> bool:
        lists = self._load()
        todo_list = self._find(lists, list_id)
        if todo_list is None:
            return False

        todo_list.complete_all()
        self._save(lists)
        logger.debug(f"Completed all todos in list {list_id}")
        return True


class DatabaseStore(ListStore):
    """SQLite-backed list storage shared by every browser session."""

    def __init__(self, db_path: Union[str, Path]):
        """Initialize the database store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self._initialize_db()

    @contextmanager
    def get_connection(self):
        """Get database connection with context manager.

        Yields:
            sqlite3.Connection: Database connection
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _initialize_db(self):
        """Initialize database schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self.get_connection() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS lists (
                        id INTEGER PRIMARY KEY,
                        name TEXT UNIQUE NOT NULL
                    )
                """)

                conn.execute("""
                    CREATE TABLE IF NOT EXISTS todos (
                        list_id INTEGER NOT NULL,
                        id INTEGER NOT NULL,
                        name TEXT NOT NULL,
                        completed BOOLEAN NOT NULL DEFAULT 0,
                        PRIMARY KEY (list_id, id),
                        FOREIGN KEY (list_id) REFERENCES lists (id) ON DELETE CASCADE
                    )
                """)

            logger.debug(f"Initialized list database at {self.db_path}")
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    @staticmethod
    def _row_to_todo(row: sqlite3.Row) -> Todo:
        return Todo(id=row["id"], name=row["name"], completed=bool(row["completed"]))

    def _todos_for(self, conn, list_id: int) -> List[Todo]:
        cursor = conn.execute(
            "SELECT id, name, completed FROM todos WHERE list_id = ? ORDER BY id",
            (list_id,),
        )
        return [self._row_to_todo(row) for row in cursor.fetchall()]

    def all_lists(self) -> List[TodoList]:
        with self.get_connection() as conn:
            lists = {
                row["id"]: TodoList(id=row["id"], name=row["name"])
                for row in conn.execute("SELECT id, name FROM lists ORDER BY id")
            }
            for row in conn.execute(
                "SELECT list_id, id, name, completed FROM todos ORDER BY list_id, id"
            ):
                lists[row["list_id"]].todos.append(self._row_to_todo(row))

        return list(lists.values())

    def find_list(self, list_id: int) -> Optional[TodoList]:
        with self.get_connection() as conn:
            row = conn.execute(
                "SELECT id, name FROM lists WHERE id = ?", (list_id,)
            ).fetchone()
            if row is None:
                return None
            return TodoList(id=row["id"], name=row["name"], todos=self._todos_for(conn, list_id))

    def create_list(self, name: str) -> TodoList:
        try:
            with self.get_connection() as conn:
                cursor = conn.execute("""
                    INSERT INTO lists (id, name)
                    VALUES ((SELECT COALESCE(MAX(id), 0) + 1 FROM lists), ?)
                """, (name,))
                list_id = cursor.lastrowid
        except sqlite3.IntegrityError:
            raise ValueError(f"List '{name}' already exists")

        logger.debug(f"Created list {list_id} ({name})")
        return TodoList(id=list_id, name=name)

    def update_list_name(self, list_id: int, name: str) -> bool:
        try:
            with self.get_connection() as conn:
                cursor = conn.execute(
                    "UPDATE lists SET name = ? WHERE id = ?", (name, list_id)
                )
                updated = cursor.rowcount > 0
        except sqlite3.IntegrityError:
            raise ValueError(f"List '{name}' already exists")

        if updated:
            logger.debug(f"Renamed list {list_id} to {name}")
        return updated

    def delete_list(self, list_id: int) -> bool:
        with self.get_connection() as conn:
            cursor = conn.execute("DELETE FROM lists WHERE id = ?", (list_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.debug(f"Deleted list {list_id}")
        return deleted

    def create_todo(self, list_id: int, name: str) -> Optional[Todo]:
        with self.get_connection() as conn:
            exists = conn.execute(
                "SELECT 1 FROM lists WHERE id = ?", (list_id,)
            ).fetchone()
            if exists is None:
                return None

            todo_id = conn.execute(
                "SELECT COALESCE(MAX(id), 0) + 1 FROM todos WHERE list_id = ?",
                (list_id,),
            ).fetchone()[0]
            conn.execute(
                "INSERT INTO todos (list_id, id, name, completed) VALUES (?, ?, ?, 0)",
                (list_id, todo_id, name),
            )

        logger.debug(f"Added todo {todo_id} to list {list_id}")
        return Todo(id=todo_id, name=name)

    def delete_todo(self, list_id: int, todo_id: int) -> bool:
        with self.get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM todos WHERE list_id = ? AND id = ?", (list_id, todo_id)
            )
            deleted = cursor.rowcount > 0

        if deleted:
            logger.debug(f"Deleted todo {todo_id} from list {list_id}")
        return deleted

    def update_todo_status(self, list_id: int, todo_id: int, completed: bool) -> bool:
        with self.get_connection() as conn:
            cursor = conn.execute(
                "UPDATE todos SET completed = ? WHERE list_id = ? AND id = ?",
                (completed, list_id, todo_id),
            )
            updated = cursor.rowcount > 0

        if updated:
            logger.debug(f"Set todo {todo_id} in list {list_id} completed={completed}")
        return updated

    def mark_all_todos_completed(self, list_id: int) -> bool:
        with self.get_connection() as conn:
            exists = conn.execute(
                "SELECT 1 FROM lists WHERE id = ?", (list_id,)
            ).fetchone()
            if exists is None:
                return False
            conn.execute("UPDATE todos SET completed = 1 WHERE list_id = ?", (list_id,))

        logger.debug(f"Completed all todos in list {list_id}")
        return True


# Global database store, shared across requests
_db_store: Optional[DatabaseStore] = None


def get_database_store(db_path: Union[str, Path]) -> DatabaseStore:
    """Get the global database store, creating it on first use."""
    global _db_store

    if _db_store is None or _db_store.db_path != Path(db_path):
        _db_store = DatabaseStore(db_path)

    return _db_store


def reset_database_store():
    """Reset global database store (for testing)."""
    global _db_store
    _db_store = None
