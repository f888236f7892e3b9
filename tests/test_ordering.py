"""Tests for display ordering of lists and todos."""

from todo_web.ordering import partition_by_completion, sort_lists, sort_todos
from todo_web.todo import Todo
from todo_web.todo_list import TodoList


def make_list(list_id, name, *completed_flags):
    todo_list = TodoList(id=list_id, name=name)
    for flag in completed_flags:
        todo_list.add_todo(f"todo {todo_list.todos_count + 1}").set_completed(flag)
    return todo_list


def test_sort_todos_puts_incomplete_first_and_keeps_order():
    todos = [
        Todo(id=1, name="a", completed=True),
        Todo(id=2, name="b"),
        Todo(id=3, name="c", completed=True),
        Todo(id=4, name="d"),
    ]

    assert [todo.id for todo in sort_todos(todos)] == [2, 4, 1, 3]


def test_sort_todos_does_not_mutate_input():
    todos = [Todo(id=1, name="a", completed=True), Todo(id=2, name="b")]

    sort_todos(todos)

    assert [todo.id for todo in todos] == [1, 2]


def test_sort_lists_puts_complete_lists_last():
    done = make_list(1, "Done", True, True)
    empty = make_list(2, "Empty")
    partial = make_list(3, "Partial", True, False)

    ordered = sort_lists([done, empty, partial])

    assert [todo_list.name for todo_list in ordered] == ["Empty", "Partial", "Done"]


def test_sort_empty_collections():
    assert sort_lists([]) == []
    assert sort_todos([]) == []


def test_partition_accepts_any_iterable():
    result = partition_by_completion(iter([4, 3, 2, 1]), lambda n: n % 2 == 0)

    assert result == [3, 1, 4, 2]
