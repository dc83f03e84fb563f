from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse, Response

from ..auth import get_current_user
from ..clock import get_today
from ..deadline import deadline_message
from ..models import Deadline, UserEntity
from ..schemas import StatusUpdate, TodoCreate, TodoDetail, TodoOut
from ..services import TodoService, get_todo_service
from ..utils import todo_url, tweet_intent_url

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)


def _profile_url(user: UserEntity) -> str:
    return f"/users/{user['nickname']}"


# PUBLIC_INTERFACE
@router.post(
    "",
    status_code=status.HTTP_302_FOUND,
    summary="Create Todo",
    description="Create a new incomplete Todo for the logged-in user and redirect to their profile.",
    responses={
        302: {"description": "Todo created, redirect to profile"},
        401: {"description": "Not logged in"},
        422: {"description": "Validation error"},
    },
)
def create_todo(
    payload: TodoCreate,
    user: UserEntity = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
) -> RedirectResponse:
    """
    Create a new Todo.
    """
    service.create(user, payload.content, payload.due_date)
    return RedirectResponse(url=_profile_url(user), status_code=status.HTTP_302_FOUND)


# PUBLIC_INTERFACE
@router.post(
    "/completed/delete",
    status_code=status.HTTP_302_FOUND,
    summary="Delete completed Todos",
    description="Delete every completed Todo of the logged-in user. Incomplete Todos are kept.",
    responses={
        302: {"description": "Completed Todos removed, redirect to profile"},
        401: {"description": "Not logged in"},
    },
)
def delete_completed_todos(
    user: UserEntity = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
) -> RedirectResponse:
    service.bulk_delete_completed(user)
    return RedirectResponse(url=_profile_url(user), status_code=status.HTTP_302_FOUND)


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoDetail,
    summary="Show Todo",
    description=(
        "Single Todo with its deadline classification for today. Overdue Todos carry "
        "a prompt and a link to share them on Twitter."
    ),
    responses={
        200: {"description": "Todo found"},
        404: {"description": "Todo not found"},
    },
)
def show_todo(
    todo_id: int,
    request: Request,
    today: date = Depends(get_today),
    service: TodoService = Depends(get_todo_service),
) -> TodoDetail:
    todo = service.get(todo_id)
    deadline = service.evaluate_deadline(todo, today)
    page_url = todo_url(request.app.state.settings.app_url, todo_id)
    return TodoDetail(
        todo=TodoOut(**todo),  # type: ignore[arg-type]
        deadline=deadline,
        message=deadline_message(deadline),
        share_url=tweet_intent_url(todo["content"], page_url) if deadline is Deadline.OVERDUE else None,
        ogp_image_url=f"{page_url}/ogp.png",
    )


# PUBLIC_INTERFACE
@router.post(
    "/{todo_id}",
    status_code=status.HTTP_302_FOUND,
    summary="Update Todo status",
    description="Mark a Todo complete (1) or incomplete (0) and redirect to its page.",
    responses={
        302: {"description": "Status updated"},
        401: {"description": "Not logged in"},
        403: {"description": "Todo belongs to another user"},
        404: {"description": "Todo not found"},
    },
)
def update_todo_status(
    todo_id: int,
    payload: StatusUpdate,
    user: UserEntity = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
) -> RedirectResponse:
    service.update_status(user, todo_id, payload.status)
    return RedirectResponse(url=f"/todos/{todo_id}", status_code=status.HTTP_302_FOUND)


# PUBLIC_INTERFACE
@router.post(
    "/{todo_id}/delete",
    status_code=status.HTTP_302_FOUND,
    summary="Delete Todo",
    description="Delete a Todo permanently and redirect to the owner's profile.",
    responses={
        302: {"description": "Todo deleted"},
        401: {"description": "Not logged in"},
        403: {"description": "Todo belongs to another user"},
        404: {"description": "Todo not found"},
    },
)
def delete_todo(
    todo_id: int,
    user: UserEntity = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
) -> RedirectResponse:
    service.delete(user, todo_id)
    return RedirectResponse(url=_profile_url(user), status_code=status.HTTP_302_FOUND)


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}/ogp.png",
    response_class=Response,
    summary="Todo preview image",
    description="PNG card used as the og:image of the Todo page.",
    responses={
        200: {"content": {"image/png": {}}, "description": "Preview image"},
        404: {"description": "Todo not found"},
    },
)
def todo_ogp_image(
    todo_id: int,
    today: date = Depends(get_today),
    service: TodoService = Depends(get_todo_service),
) -> Response:
    png = service.render_social_preview(todo_id, today)
    return Response(content=png, media_type="image/png")
