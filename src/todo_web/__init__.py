"""Todo Web - a browser-based todo list manager."""

__version__ = "0.1.0"

from .todo import Todo
from .todo_list import TodoList

__all__ = ["Todo", "TodoList", "__version__"]
