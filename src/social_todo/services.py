from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Tuple

from fastapi import Depends, Request

from .deadline import evaluate_deadline, tomorrow_of
from .errors import NotFound, NotOwner, ValidationFailed
from .models import Deadline, TodoEntity, TodoStatus, UserEntity
from .ogp import render_todo_card
from .repositories import ListQuery, Repository, get_repository

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class TodoService:
    """
    Due-date lifecycle of a user's Todos.

    Every mutating operation takes the authenticated caller explicitly and
    checks ownership before touching storage. The current day is always passed
    in by the caller.
    """

    def __init__(self, repo: Repository, ogp_font_path: Optional[str] = None) -> None:
        self._repo = repo
        self._ogp_font_path = ogp_font_path

    def _owned_todo(self, caller: UserEntity, todo_id: int) -> TodoEntity:
        todo = self.get(todo_id)
        if todo["user_id"] != caller["id"]:
            raise NotOwner("Todo belongs to another user")
        return todo

    def create(self, caller: UserEntity, content: str, due_date: str) -> TodoEntity:
        content = (content or "").strip()
        if not content:
            raise ValidationFailed("content is required", detail=[{"loc": ["content"], "msg": "required"}])
        due_date = (due_date or "").strip()
        if not due_date:
            raise ValidationFailed("due_date is required", detail=[{"loc": ["due_date"], "msg": "required"}])
        todo = self._repo.create_todo(caller["id"], content, due_date)
        logger.info("user %s created todo %s due %s", caller["id"], todo["id"], due_date)
        return todo

    def get(self, todo_id: int) -> TodoEntity:
        todo = self._repo.get_todo(todo_id)
        if todo is None:
            raise NotFound("Todo not found")
        return todo

    def evaluate_deadline(self, todo: TodoEntity, today: date) -> Deadline:
        return evaluate_deadline(todo, today)

    def update_status(self, caller: UserEntity, todo_id: int, new_status: TodoStatus) -> TodoEntity:
        self._owned_todo(caller, todo_id)
        updated = self._repo.set_status(todo_id, TodoStatus(new_status))
        if updated is None:
            raise NotFound("Todo not found")
        logger.info("user %s set todo %s status to %s", caller["id"], todo_id, updated["status"].name)
        return updated

    def delete(self, caller: UserEntity, todo_id: int) -> None:
        self._owned_todo(caller, todo_id)
        if not self._repo.delete_todo(todo_id):
            raise NotFound("Todo not found")
        logger.info("user %s deleted todo %s", caller["id"], todo_id)

    def bulk_delete_completed(self, caller: UserEntity) -> int:
        removed = self._repo.delete_todos_with_status(caller["id"], TodoStatus.COMPLETE)
        logger.info("user %s removed %d completed todos", caller["id"], removed)
        return removed

    def list_for_user(
        self, caller: UserEntity, owner: UserEntity, query: Optional[ListQuery] = None
    ) -> Tuple[List[TodoEntity], int]:
        if caller["id"] != owner["id"]:
            raise NotOwner("Todo lists are only visible to their owner")
        return self._repo.list_todos(owner["id"], query)

    def count_near_due(self, caller: UserEntity, today: date) -> int:
        return self._repo.count_todos(caller["id"], tomorrow_of(today), TodoStatus.INCOMPLETE)

    def render_social_preview(self, todo_id: int, today: date) -> bytes:
        todo = self.get(todo_id)
        return render_todo_card(todo, evaluate_deadline(todo, today), font_path=self._ogp_font_path)


# PUBLIC_INTERFACE
class UserService:
    """Find-or-create of users from provider identities, and profile lookups."""

    def __init__(self, repo: Repository) -> None:
        self._repo = repo

    def login(self, identity) -> UserEntity:
        """
        Return the user linked to ``identity`` (an ExternalIdentity), creating
        it on first login. Name and avatar are refreshed on every login.

        Raises:
            Conflict: a new account's nickname is already held by another user.
        """
        existing = self._repo.get_user_by_external_id(identity.external_id)
        if existing is None:
            user = self._repo.create_user(
                identity.external_id, identity.nickname, identity.name, identity.avatar_url
            )
            logger.info("created user %s (%s)", user["id"], user["nickname"])
            return user
        refreshed = self._repo.update_user_profile(existing["id"], identity.name, identity.avatar_url)
        if refreshed is None:
            raise NotFound("User not found")
        logger.info("user %s logged in", refreshed["id"])
        return refreshed

    def get(self, user_id: int) -> Optional[UserEntity]:
        return self._repo.get_user(user_id)

    def by_nickname(self, nickname: str) -> UserEntity:
        user = self._repo.get_user_by_nickname(nickname)
        if user is None:
            raise NotFound("User not found")
        return user


# PUBLIC_INTERFACE
def get_todo_service(request: Request, repo: Repository = Depends(get_repository)) -> TodoService:
    """FastAPI dependency building a TodoService over the app's repository."""
    return TodoService(repo, ogp_font_path=request.app.state.settings.ogp_font_path)


# PUBLIC_INTERFACE
def get_user_service(repo: Repository = Depends(get_repository)) -> UserService:
    """FastAPI dependency building a UserService over the app's repository."""
    return UserService(repo)
