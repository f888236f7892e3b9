"""
Tests for the list storage backends
"""

import logging
import sqlite3

import pytest

from todo_web.storage import (
    DatabaseStore,
    SessionStore,
    get_database_store,
    reset_database_store,
)


@pytest.fixture(params=["session", "database"])
def store(request, tmp_path):
    """Each storage backend, empty"""
    if request.param == "session":
        return SessionStore({})
    return DatabaseStore(tmp_path / "todos.db")


@pytest.fixture
def groceries(store):
    """A list with two todos, the second completed"""
    todo_list = store.create_list("Groceries")
    store.create_todo(todo_list.id, "Milk")
    eggs = store.create_todo(todo_list.id, "Eggs")
    store.update_todo_status(todo_list.id, eggs.id, True)
    return store.find_list(todo_list.id)


class TestListOperations:
    """List CRUD against every backend"""

    def test_starts_empty(self, store):
        assert store.all_lists() == []

    def test_create_list_assigns_ids(self, store):
        first = store.create_list("Groceries")
        second = store.create_list("Chores")

        assert first.id == 1
        assert second.id == 2
        assert [todo_list.name for todo_list in store.all_lists()] == ["Groceries", "Chores"]

    def test_id_is_max_plus_one(self, store):
        store.create_list("A")
        second = store.create_list("B")
        store.create_list("C")
        store.delete_list(1)

        assert store.create_list("D").id == 4
        store.delete_list(4)
        store.delete_list(3)
        assert store.create_list("E").id == second.id + 1

    def test_create_duplicate_raises(self, store):
        store.create_list("Groceries")

        with pytest.raises(ValueError, match="already exists"):
            store.create_list("Groceries")

    def test_find_list(self, store, groceries):
        found = store.find_list(groceries.id)

        assert found.name == "Groceries"
        assert [todo.name for todo in found.todos] == ["Milk", "Eggs"]
        assert store.find_list(99) is None

    def test_update_list_name(self, store, groceries):
        assert store.update_list_name(groceries.id, "Shopping") is True
        assert store.find_list(groceries.id).name == "Shopping"
        assert store.update_list_name(99, "Nope") is False

    def test_rename_to_existing_name_raises(self, store):
        store.create_list("Groceries")
        chores = store.create_list("Chores")

        with pytest.raises(ValueError, match="already exists"):
            store.update_list_name(chores.id, "Groceries")

        assert store.find_list(chores.id).name == "Chores"

    def test_rename_to_own_name(self, store, groceries):
        assert store.update_list_name(groceries.id, "Groceries") is True

    def test_delete_list_removes_todos(self, store, groceries):
        assert store.delete_list(groceries.id) is True
        assert store.find_list(groceries.id) is None
        assert store.all_lists() == []
        assert store.delete_list(groceries.id) is False


class TestTodoOperations:
    """Todo CRUD against every backend"""

    def test_create_todo(self, store, groceries):
        bread = store.create_todo(groceries.id, "Bread")

        assert bread.id == 3
        assert bread.completed is False
        assert store.find_list(groceries.id).find_todo(3).name == "Bread"

    def test_todo_ids_are_per_list(self, store, groceries):
        chores = store.create_list("Chores")

        assert store.create_todo(chores.id, "Dishes").id == 1

    def test_create_todo_missing_list(self, store):
        assert store.create_todo(99, "Orphan") is None

    def test_delete_todo(self, store, groceries):
        assert store.delete_todo(groceries.id, 1) is True
        assert [todo.id for todo in store.find_list(groceries.id).todos] == [2]
        assert store.delete_todo(groceries.id, 1) is False
        assert store.delete_todo(99, 2) is False

    def test_update_todo_status(self, store, groceries):
        assert store.update_todo_status(groceries.id, 1, True) is True
        assert store.find_list(groceries.id).is_complete()

        assert store.update_todo_status(groceries.id, 2, False) is True
        assert store.find_list(groceries.id).find_todo(2).completed is False

    def test_update_todo_status_is_logged(self, store, groceries, caplog):
        with caplog.at_level(logging.DEBUG, logger="todo_web.storage"):
            store.update_todo_status(groceries.id, 1, True)

        assert "Set todo 1 in list 1 completed=True" in caplog.text

    def test_update_todo_status_missing(self, store, groceries):
        assert store.update_todo_status(groceries.id, 42, True) is False
        assert store.update_todo_status(99, 1, True) is False

    def test_mark_all_todos_completed(self, store, groceries):
        assert store.mark_all_todos_completed(groceries.id) is True

        todo_list = store.find_list(groceries.id)
        assert todo_list.todos_remaining_count == 0
        assert todo_list.is_complete()

    def test_mark_all_on_empty_list(self, store):
        empty = store.create_list("Empty")

        assert store.mark_all_todos_completed(empty.id) is True
        assert not store.find_list(empty.id).is_complete()

    def test_mark_all_missing_list(self, store):
        assert store.mark_all_todos_completed(99) is False


class TestSessionStore:
    """Session-specific behaviour"""

    def test_session_holds_plain_dicts(self):
        session = {}
        store = SessionStore(session)
        todo_list = store.create_list("Groceries")
        store.create_todo(todo_list.id, "Milk")

        assert session["lists"] == [
            {"id": 1, "name": "Groceries", "todos": [{"id": 1, "name": "Milk", "completed": False}]}
        ]

    def test_reads_existing_session(self):
        session = {"lists": [{"id": 7, "name": "Old", "todos": []}]}
        store = SessionStore(session)

        assert store.find_list(7).name == "Old"
        assert store.create_list("New").id == 8


class TestDatabaseStore:
    """SQLite-specific behaviour"""

    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "todos.db"
        DatabaseStore(db_path)

        assert db_path.exists()

    def test_data_persists_across_instances(self, tmp_path):
        db_path = tmp_path / "todos.db"
        first = DatabaseStore(db_path)
        todo_list = first.create_list("Groceries")
        first.create_todo(todo_list.id, "Milk")

        second = DatabaseStore(db_path)
        assert [todo.name for todo in second.find_list(todo_list.id).todos] == ["Milk"]

    def test_cascade_delete(self, tmp_path):
        db_path = tmp_path / "todos.db"
        store = DatabaseStore(db_path)
        todo_list = store.create_list("Groceries")
        store.create_todo(todo_list.id, "Milk")
        store.delete_list(todo_list.id)

        with sqlite3.connect(db_path) as conn:
            assert conn.execute("SELECT COUNT(*) FROM todos").fetchone()[0] == 0

    def test_global_store_is_shared(self, tmp_path):
        db_path = tmp_path / "todos.db"

        assert get_database_store(db_path) is get_database_store(db_path)
        reset_database_store()
        assert get_database_store(str(db_path)).db_path == db_path
