"""Todo item model for the Todo Web application."""

from dataclasses import dataclass
from typing import Dict, Any


@dataclass
class Todo:
    """A single todo item owned by a list."""
    
    id: int
    name: str
    completed: bool = False
    
    def complete(self):
        """Mark the todo as completed."""
        self.completed = True
    
    def reopen(self):
        """Mark a completed todo as incomplete again."""
        self.completed = False
    
    def set_completed(self, completed: bool):
        """Set completion state explicitly."""
        if completed:
            self.complete()
        else:
            self.reopen()
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert todo to a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "completed": self.completed,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Todo':
        """Create a Todo from a dictionary."""
        return cls(
            id=int(data.get("id", 0)),
            name=data.get("name", ""),
            completed=bool(data.get("completed", False)),
        )
