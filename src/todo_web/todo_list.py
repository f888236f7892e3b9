"""Todo list model for the Todo Web application."""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from .todo import Todo


def next_id(items) -> int:
    """Return the next identifier for a collection: max existing id + 1."""
    return max((item.id for item in items), default=0) + 1


@dataclass
class TodoList:
    """A named list that exclusively owns its todos."""
    
    id: int
    name: str
    todos: List[Todo] = field(default_factory=list)
    
    @property
    def todos_count(self) -> int:
        return len(self.todos)
    
    @property
    def todos_remaining_count(self) -> int:
        return sum(1 for todo in self.todos if not todo.completed)
    
    def is_complete(self) -> bool:
        """A list is complete when it has todos and all of them are done.
        
        An empty list is never complete.
        """
        return self.todos_count > 0 and self.todos_remaining_count == 0
    
    def find_todo(self, todo_id: int) -> Optional[Todo]:
        """Return the todo with the given id, or None."""
        for todo in self.todos:
            if todo.id == todo_id:
                return todo
        return None
    
    def add_todo(self, name: str) -> Todo:
        """Append a new incomplete todo with an auto-assigned id."""
        todo = Todo(id=next_id(self.todos), name=name)
        self.todos.append(todo)
        return todo
    
    def remove_todo(self, todo_id: int) -> bool:
        """Remove a todo by id.
        
        Returns:
            True if a todo was removed
        """
        for i, todo in enumerate(self.todos):
            if todo.id == todo_id:
                self.todos.pop(i)
                return True
        return False
    
    def complete_all(self):
        """Mark every todo in the list as completed."""
        for todo in self.todos:
            todo.complete()
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert list to a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "todos": [todo.to_dict() for todo in self.todos],
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TodoList':
        """Create a TodoList from a dictionary."""
        return cls(
            id=int(data.get("id", 0)),
            name=data.get("name", ""),
            todos=[Todo.from_dict(item) for item in data.get("todos", [])],
        )
