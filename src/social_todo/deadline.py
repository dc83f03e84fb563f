from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Union

from .models import Deadline, TodoEntity

WITHIN_DEADLINE_MESSAGE = "期限内です"
OVERDUE_MESSAGE = "\\ Twitterにシェアして反省しましょう!! /"
NEAR_DUE_MESSAGE = "期日が明日までのTodoが{count}件あります"

DueDateLike = Union[date, str]


# PUBLIC_INTERFACE
def parse_due_date(value: DueDateLike) -> Optional[date]:
    """Return the due date as a date, or None when the stored text is not an ISO date."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def _due_of(todo_or_due: Union[TodoEntity, DueDateLike]) -> DueDateLike:
    if isinstance(todo_or_due, dict):
        return todo_or_due["due_date"]
    return todo_or_due


# PUBLIC_INTERFACE
def evaluate_deadline(todo_or_due: Union[TodoEntity, DueDateLike], today: date) -> Deadline:
    """
    Classify a Todo (or a bare due date) against ``today``.

    A due date on or after today is within the deadline, anything earlier is
    overdue. Completion status plays no part. Due dates that are not ISO dates
    are compared as text against today's ISO form, the same ordering a string
    column gives.
    """
    due = _due_of(todo_or_due)
    parsed = parse_due_date(due)
    if parsed is not None:
        within = parsed >= today
    else:
        within = str(due).strip() >= today.isoformat()
    return Deadline.WITHIN if within else Deadline.OVERDUE


# PUBLIC_INTERFACE
def deadline_message(deadline: Deadline) -> str:
    """Text shown on the Todo page for a deadline classification."""
    return WITHIN_DEADLINE_MESSAGE if deadline is Deadline.WITHIN else OVERDUE_MESSAGE


# PUBLIC_INTERFACE
def tomorrow_of(today: date) -> str:
    """
    Due date text a near-due Todo carries. Repositories match it exactly
    against the stored YYYY-MM-DD value when counting.
    """
    return (today + timedelta(days=1)).isoformat()


# PUBLIC_INTERFACE
def near_due_message(count: int) -> Optional[str]:
    """Home page notice for near-due Todos; None when there are none."""
    if count <= 0:
        return None
    return NEAR_DUE_MESSAGE.format(count=count)
