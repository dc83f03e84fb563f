from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

from ..auth import get_optional_user
from ..clock import get_today
from ..deadline import near_due_message
from ..models import UserEntity
from ..schemas import HomePage, Link, UserOut
from ..services import TodoService, get_todo_service

APP_TITLE = "Todo!!"

router = APIRouter(tags=["home"])


# PUBLIC_INTERFACE
@router.get("/", response_model=HomePage, summary="Home")
def home(
    today: date = Depends(get_today),
    user: Optional[UserEntity] = Depends(get_optional_user),
    service: TodoService = Depends(get_todo_service),
) -> HomePage:
    """
    Dashboard. Anonymous visitors get a login link; logged-in users get links
    to home and their profile plus the number of incomplete Todos due tomorrow.
    """
    if user is None:
        return HomePage(title=APP_TITLE, links=[Link(label="Login", href="/login")])

    count = service.count_near_due(user, today)
    return HomePage(
        title=APP_TITLE,
        user=UserOut(**user),  # type: ignore[arg-type]
        links=[
            Link(label="Home", href="/"),
            Link(label="マイページ", href=f"/users/{user['nickname']}"),
        ],
        near_due_count=count,
        near_due_message=near_due_message(count),
    )
