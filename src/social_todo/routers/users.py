from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..auth import get_current_user
from ..models import UserEntity
from ..repositories import ListQuery
from ..schemas import ProfilePage, TodoOut, UserOut
from ..services import TodoService, UserService, get_todo_service, get_user_service
from ..utils import pagination_envelope

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


# PUBLIC_INTERFACE
@router.get(
    "/{nickname}",
    response_model=ProfilePage,
    summary="User profile",
    description=(
        "List the Todos of a user. Only the owner may view the list.\n\n"
        "Query parameters:\n"
        "- incomplete: when truthy, only incomplete Todos are returned\n"
        "- limit / offset: pagination\n"
        "- sort: one of created_at, -created_at, due_date, -due_date"
    ),
    responses={
        200: {"description": "Profile retrieved"},
        401: {"description": "Not logged in"},
        403: {"description": "Profile belongs to another user"},
        404: {"description": "User not found"},
    },
)
def show_profile(
    nickname: str,
    incomplete: Optional[bool] = Query(None, description="Only incomplete Todos"),
    limit: int = Query(50, ge=0, le=1000, description="Maximum number of items to return"),
    offset: int = Query(0, ge=0, description="Number of items to skip"),
    sort: Optional[str] = Query("created_at", description="created_at, -created_at, due_date, -due_date"),
    caller: UserEntity = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
    todos: TodoService = Depends(get_todo_service),
) -> ProfilePage:
    owner = users.by_nickname(nickname)
    query = ListQuery(limit=limit, offset=offset, incomplete=bool(incomplete), sort=sort or "created_at")
    items, total = todos.list_for_user(caller, owner, query)
    envelope = pagination_envelope(
        items=[TodoOut(**it) for it in items],  # type: ignore[arg-type]
        total=total,
        limit=limit,
        offset=offset,
    )
    return ProfilePage(user=UserOut(**owner), **envelope)  # type: ignore[arg-type]
