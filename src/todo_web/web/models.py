"""
Pydantic models for the JSON API
"""

from typing import List

from pydantic import BaseModel, Field

from todo_web.ordering import sort_todos
from todo_web.todo import Todo
from todo_web.todo_list import TodoList


class TodoResponse(BaseModel):
    """Todo item response model"""
    id: int
    name: str = Field(..., min_length=1, max_length=100)
    completed: bool

    @classmethod
    def from_todo(cls, todo: Todo) -> "TodoResponse":
        return cls(id=todo.id, name=todo.name, completed=todo.completed)


class ListResponse(BaseModel):
    """Todo list response model, todos in display order"""
    id: int
    name: str = Field(..., min_length=1, max_length=100)
    complete: bool
    todos_count: int = 0
    todos_remaining_count: int = 0
    todos: List[TodoResponse] = []

    @classmethod
    def from_list(cls, todo_list: TodoList) -> "ListResponse":
        return cls(
            id=todo_list.id,
            name=todo_list.name,
            complete=todo_list.is_complete(),
            todos_count=todo_list.todos_count,
            todos_remaining_count=todo_list.todos_remaining_count,
            todos=[TodoResponse.from_todo(todo) for todo in sort_todos(todo_list.todos)],
        )


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str = "healthy"
    version: str
    storage: str
    total_lists: int
