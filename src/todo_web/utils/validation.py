"""Validation rules for list names and todo text.

The ``error_for_*`` functions return a user-facing message, or ``None`` when
the input is valid. The ``validate_*`` variants raise ``ValidationError``
instead and return the stripped value; the form handlers use these.
"""

import logging
from typing import Any, Iterable, Optional

from ..todo_list import TodoList

logger = logging.getLogger(__name__)


MIN_NAME_LENGTH = 1
MAX_NAME_LENGTH = 100

LIST_NAME_LENGTH_ERROR = "List name must be between 1 and 100 characters."
LIST_NAME_UNIQUE_ERROR = "List name must be unique."
TODO_LENGTH_ERROR = "Todo must be between 1 and 100 characters."


class ValidationError(Exception):
    """Exception raised when list or todo input fails validation."""
    
    def __init__(self, message: str, field_name: str, value: Any):
        self.field_name = field_name
        self.value = value
        super().__init__(message)


def _length_ok(name: str) -> bool:
    return MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH


def error_for_list_name(name: str, lists: Iterable[TodoList]) -> Optional[str]:
    """Return an error message if the list name is invalid.
    
    Args:
        name: Candidate list name, already stripped of surrounding whitespace
        lists: Existing lists; the name must not match any of them
        
    Returns:
        Error message, or None if the name is valid
    """
    if not _length_ok(name):
        return LIST_NAME_LENGTH_ERROR
    if any(todo_list.name == name for todo_list in lists):
        return LIST_NAME_UNIQUE_ERROR
    return None


def error_for_todo(name: str) -> Optional[str]:
    """Return an error message if the todo text is invalid."""
    if not _length_ok(name):
        return TODO_LENGTH_ERROR
    return None


def validate_list_name(name: str, lists: Iterable[TodoList]) -> str:
    """Strip and validate a list name.
    
    Raises:
        ValidationError: If the name is invalid
    """
    name = name.strip()
    error = error_for_list_name(name, lists)
    if error:
        logger.debug(f"Rejected list name {name!r}: {error}")
        raise ValidationError(error, "list_name", name)
    return name


def validate_todo_name(name: str) -> str:
    """Strip and validate todo text.
    
    Raises:
        ValidationError: If the text is invalid
    """
    name = name.strip()
    error = error_for_todo(name)
    if error:
        logger.debug(f"Rejected todo {name!r}: {error}")
        raise ValidationError(error, "todo", name)
    return name
