from __future__ import annotations

from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class TodoStatus(IntEnum):
    """Completion status of a Todo. Stored as 0/1."""

    INCOMPLETE = 0
    COMPLETE = 1


# PUBLIC_INTERFACE
class Deadline(str, Enum):
    """Derived due-date classification of a Todo relative to a given day."""

    WITHIN = "within"
    OVERDUE = "overdue"


# PUBLIC_INTERFACE
class UserEntity(TypedDict):
    """
    A user created on first successful social login.

    Fields:
    - id: Unique integer identifier
    - external_id: Identifier assigned by the identity provider (unique)
    - nickname: Provider screen name, unique, used in the profile URL
    - name: Display name, refreshed on every login
    - avatar_url: Optional avatar image URL, refreshed on every login
    - created_at / updated_at: local timestamps
    """

    id: int
    external_id: str
    nickname: str
    name: str
    avatar_url: Optional[str]
    created_at: datetime
    updated_at: datetime


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A Todo item owned by exactly one user.

    Fields:
    - id: Unique integer identifier
    - user_id: Owning user's id
    - content: Free text (trimmed, non-empty on input via schemas)
    - due_date: Calendar date as submitted, normally YYYY-MM-DD. The format is
      not enforced; see deadline.parse_due_date.
    - status: TodoStatus
    - created_at / updated_at: local timestamps
    """

    id: int
    user_id: int
    content: str
    due_date: str
    status: TodoStatus
    created_at: datetime
    updated_at: datetime
