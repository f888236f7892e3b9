"""Display ordering for lists and todos.

Incomplete items are shown before complete ones. The relative order inside
each group is preserved, so the sort is stable with respect to creation order.
"""

from typing import Callable, Iterable, List, TypeVar

from .todo import Todo
from .todo_list import TodoList


T = TypeVar("T")


def partition_by_completion(items: Iterable[T], is_complete: Callable[[T], bool]) -> List[T]:
    """Return a new list with incomplete items first, then complete items."""
    incomplete = []
    complete = []
    for item in items:
        if is_complete(item):
            complete.append(item)
        else:
            incomplete.append(item)
    return incomplete + complete


def sort_lists(lists: Iterable[TodoList]) -> List[TodoList]:
    """Order lists for display: incomplete lists before complete lists."""
    return partition_by_completion(lists, lambda todo_list: todo_list.is_complete())


def sort_todos(todos: Iterable[Todo]) -> List[Todo]:
    """Order todos for display: incomplete todos before completed todos."""
    return partition_by_completion(todos, lambda todo: todo.completed)
