from datetime import date

import pytest

from social_todo.deadline import (
    deadline_message,
    evaluate_deadline,
    near_due_message,
    parse_due_date,
    tomorrow_of,
)
from social_todo.models import Deadline, TodoStatus

TODAY = date(2025, 6, 15)


def make_todo(due_date, status=TodoStatus.INCOMPLETE):
    return {"id": 1, "user_id": 1, "content": "c", "due_date": due_date, "status": status}


@pytest.mark.parametrize(
    "due, expected",
    [
        ("2025-06-16", Deadline.WITHIN),
        ("2025-06-15", Deadline.WITHIN),
        ("2025-06-14", Deadline.OVERDUE),
        ("2030-01-01", Deadline.WITHIN),
        ("2020-01-01", Deadline.OVERDUE),
        (date(2025, 6, 15), Deadline.WITHIN),
    ],
)
def test_evaluate_deadline(due, expected):
    assert evaluate_deadline(due, TODAY) is expected


def test_status_does_not_affect_deadline():
    assert evaluate_deadline(make_todo("2020-01-01", TodoStatus.COMPLETE), TODAY) is Deadline.OVERDUE
    assert evaluate_deadline(make_todo("2030-01-01", TodoStatus.COMPLETE), TODAY) is Deadline.WITHIN


def test_unparseable_due_date_compares_as_text():
    assert parse_due_date("0401-20-30") is None
    # "0401..." sorts before "2025-..."
    assert evaluate_deadline("0401-20-30", TODAY) is Deadline.OVERDUE
    assert evaluate_deadline("someday", TODAY) is Deadline.WITHIN


def test_messages():
    assert deadline_message(Deadline.WITHIN) == "期限内です"
    assert deadline_message(Deadline.OVERDUE) == "\\ Twitterにシェアして反省しましょう!! /"
    assert near_due_message(0) is None
    assert near_due_message(3) == "期日が明日までのTodoが3件あります"


def test_tomorrow_of():
    assert tomorrow_of(TODAY) == "2025-06-16"
    assert tomorrow_of(date(2025, 6, 30)) == "2025-07-01"
    assert tomorrow_of(date(2024, 12, 31)) == "2025-01-01"
