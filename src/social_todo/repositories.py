from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from threading import RLock
from typing import Iterable, List, Optional, Tuple

from fastapi import Request

from .errors import Conflict
from .models import TodoEntity, TodoStatus, UserEntity
from .settings import Settings

SORT_FIELDS = {"created_at", "due_date"}


@dataclass(frozen=True)
class ListQuery:
    """
    Query parameters for listing a user's todos.
    """
    limit: int = 50
    offset: int = 0
    incomplete: bool = False
    sort: str = "created_at"  # allowed: created_at, -created_at, due_date, -due_date


def normalize_sort(sort: Optional[str]) -> Tuple[str, bool]:
    """Return (field, descending) for a sort expression, defaulting to created_at ascending."""
    key = (sort or "created_at").strip().lower()
    reverse = key.startswith("-")
    field = key.lstrip("-")
    if field not in SORT_FIELDS:
        return "created_at", False
    return field, reverse


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for user and todo storage backends."""

    # Users

    @abstractmethod
    def create_user(self, external_id: str, nickname: str, name: str, avatar_url: Optional[str]) -> UserEntity:
        """Create and return a new UserEntity."""

    @abstractmethod
    def update_user_profile(self, user_id: int, name: str, avatar_url: Optional[str]) -> Optional[UserEntity]:
        """Refresh display name and avatar. Return the updated user or None if not found."""

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[UserEntity]:
        """Return a UserEntity by id, or None if not found."""

    @abstractmethod
    def get_user_by_external_id(self, external_id: str) -> Optional[UserEntity]:
        """Return the user linked to a provider identity, or None."""

    @abstractmethod
    def get_user_by_nickname(self, nickname: str) -> Optional[UserEntity]:
        """Return a UserEntity by nickname, or None if not found."""

    # Todos

    @abstractmethod
    def create_todo(self, user_id: int, content: str, due_date: str) -> TodoEntity:
        """Create and return a new incomplete TodoEntity owned by user_id."""

    @abstractmethod
    def get_todo(self, todo_id: int) -> Optional[TodoEntity]:
        """Return a TodoEntity by id, or None if not found."""

    @abstractmethod
    def set_status(self, todo_id: int, status: TodoStatus) -> Optional[TodoEntity]:
        """Persist a new status. Return updated entity or None if not found."""

    @abstractmethod
    def delete_todo(self, todo_id: int) -> bool:
        """Delete a TodoEntity by id. Return True if deleted, False if not found."""

    @abstractmethod
    def delete_todos_with_status(self, user_id: int, status: TodoStatus) -> int:
        """Delete every todo of user_id with the given status. Return the number removed."""

    @abstractmethod
    def list_todos(self, user_id: int, query: Optional[ListQuery] = None) -> Tuple[List[TodoEntity], int]:
        """
        Return a slice of the user's TodoEntities and the total count matching filters.
        - Supports limit/offset
        - Filter to incomplete only
        - Sorting by created_at/due_date (asc/desc)
        """

    @abstractmethod
    def count_todos(self, user_id: int, due_date: str, status: TodoStatus) -> int:
        """Count the user's todos due on due_date (YYYY-MM-DD) with the given status."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._users: dict[int, UserEntity] = {}
        self._todos: dict[int, TodoEntity] = {}
        self._next_user_id = 1
        self._next_todo_id = 1

    def _now(self) -> datetime:
        return datetime.now()

    def create_user(self, external_id: str, nickname: str, name: str, avatar_url: Optional[str]) -> UserEntity:
        now = self._now()
        with self._lock:
            if any(u["nickname"] == nickname for u in self._users.values()):
                raise Conflict(f"nickname already taken: {nickname}")
            user: UserEntity = {
                "id": self._next_user_id,
                "external_id": external_id,
                "nickname": nickname,
                "name": name,
                "avatar_url": avatar_url,
                "created_at": now,
                "updated_at": now,
            }
            self._next_user_id += 1
            self._users[user["id"]] = user
            return user.copy()

    def update_user_profile(self, user_id: int, name: str, avatar_url: Optional[str]) -> Optional[UserEntity]:
        with self._lock:
            existing = self._users.get(user_id)
            if existing is None:
                return None
            updated = existing.copy()
            updated["name"] = name
            updated["avatar_url"] = avatar_url
            updated["updated_at"] = self._now()
            self._users[user_id] = updated
            return updated.copy()

    def get_user(self, user_id: int) -> Optional[UserEntity]:
        with self._lock:
            user = self._users.get(user_id)
            return None if user is None else user.copy()

    def get_user_by_external_id(self, external_id: str) -> Optional[UserEntity]:
        with self._lock:
            for user in self._users.values():
                if user["external_id"] == external_id:
                    return user.copy()
            return None

    def get_user_by_nickname(self, nickname: str) -> Optional[UserEntity]:
        with self._lock:
            for user in self._users.values():
                if user["nickname"] == nickname:
                    return user.copy()
            return None

    def create_todo(self, user_id: int, content: str, due_date: str) -> TodoEntity:
        now = self._now()
        with self._lock:
            todo: TodoEntity = {
                "id": self._next_todo_id,
                "user_id": user_id,
                "content": content,
                "due_date": due_date,
                "status": TodoStatus.INCOMPLETE,
                "created_at": now,
                "updated_at": now,
            }
            self._next_todo_id += 1
            self._todos[todo["id"]] = todo
            return todo.copy()

    def get_todo(self, todo_id: int) -> Optional[TodoEntity]:
        with self._lock:
            item = self._todos.get(todo_id)
            return None if item is None else item.copy()

    def set_status(self, todo_id: int, status: TodoStatus) -> Optional[TodoEntity]:
        with self._lock:
            existing = self._todos.get(todo_id)
            if existing is None:
                return None
            updated = existing.copy()
            updated["status"] = TodoStatus(status)
            updated["updated_at"] = self._now()
            self._todos[todo_id] = updated
            return updated.copy()

    def delete_todo(self, todo_id: int) -> bool:
        with self._lock:
            return self._todos.pop(todo_id, None) is not None

    def delete_todos_with_status(self, user_id: int, status: TodoStatus) -> int:
        with self._lock:
            doomed = [
                t["id"] for t in self._todos.values()
                if t["user_id"] == user_id and t["status"] == status
            ]
            for todo_id in doomed:
                del self._todos[todo_id]
            return len(doomed)

    def list_todos(self, user_id: int, query: Optional[ListQuery] = None) -> Tuple[List[TodoEntity], int]:
        q = query or ListQuery()
        with self._lock:
            items: Iterable[TodoEntity] = [t for t in self._todos.values() if t["user_id"] == user_id]

            if q.incomplete:
                items = [t for t in items if t["status"] == TodoStatus.INCOMPLETE]

            total = len(items)

            field, reverse = normalize_sort(q.sort)
            # id breaks ties so equal timestamps keep insertion order
            items_sorted = sorted(items, key=lambda t: (t[field], t["id"]), reverse=reverse)

            start = max(q.offset, 0)
            end = start + max(q.limit, 0)
            return [t.copy() for t in items_sorted[start:end]], total

    def count_todos(self, user_id: int, due_date: str, status: TodoStatus) -> int:
        with self._lock:
            return sum(
                1 for t in self._todos.values()
                if t["user_id"] == user_id and t["due_date"] == due_date and t["status"] == status
            )


# PUBLIC_INTERFACE
def build_repository(settings: Settings) -> Repository:
    """
    Factory to return the configured repository based on settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository (stdlib sqlite3)
    """
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        return SQLiteRepository(settings.sqlite_db_path)
    return InMemoryRepository()


# PUBLIC_INTERFACE
def get_repository(request: Request) -> Repository:
    """FastAPI dependency returning the repository the app was built with."""
    return request.app.state.repository
