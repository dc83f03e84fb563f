import pytest

from social_todo.db import SQLiteRepository
from social_todo.errors import Conflict
from social_todo.models import TodoStatus
from social_todo.repositories import ListQuery, build_repository

from conftest import make_settings


@pytest.fixture
def repo(tmp_path):
    return SQLiteRepository(str(tmp_path / "data" / "todos.db"))


@pytest.fixture
def user(repo):
    return repo.create_user("1111111", "test", "testuser", None)


class TestUsers:
    def test_create_and_lookup(self, repo, user):
        assert repo.get_user(user["id"])["nickname"] == "test"
        assert repo.get_user_by_external_id("1111111")["id"] == user["id"]
        assert repo.get_user_by_nickname("test")["id"] == user["id"]
        assert repo.get_user_by_nickname("nobody") is None

    def test_nickname_is_unique(self, repo, user):
        with pytest.raises(Conflict):
            repo.create_user("other-id", "test", "someone", None)

    def test_update_profile(self, repo, user):
        updated = repo.update_user_profile(user["id"], "renamed", "https://img/a.png")
        assert updated["name"] == "renamed"
        assert updated["avatar_url"] == "https://img/a.png"
        assert repo.update_user_profile(999, "x", None) is None


class TestTodos:
    def test_create_get_status(self, repo, user):
        todo = repo.create_todo(user["id"], "test", "2030-04-01")
        assert todo["status"] == TodoStatus.INCOMPLETE
        assert repo.get_todo(todo["id"])["due_date"] == "2030-04-01"

        updated = repo.set_status(todo["id"], TodoStatus.COMPLETE)
        assert updated["status"] == TodoStatus.COMPLETE
        assert updated["content"] == "test"
        assert repo.set_status(999, TodoStatus.COMPLETE) is None

    def test_delete(self, repo, user):
        todo = repo.create_todo(user["id"], "gone", "2030-04-01")
        assert repo.delete_todo(todo["id"]) is True
        assert repo.delete_todo(todo["id"]) is False
        assert repo.get_todo(todo["id"]) is None

    def test_delete_with_status(self, repo, user):
        other = repo.create_user("2", "other", "Other", None)
        done = repo.create_todo(user["id"], "done", "2030-04-01")
        repo.set_status(done["id"], TodoStatus.COMPLETE)
        repo.create_todo(user["id"], "open", "2030-04-01")
        theirs = repo.create_todo(other["id"], "theirs", "2030-04-01")
        repo.set_status(theirs["id"], TodoStatus.COMPLETE)

        assert repo.delete_todos_with_status(user["id"], TodoStatus.COMPLETE) == 1
        _, total = repo.list_todos(user["id"])
        assert total == 1
        assert repo.get_todo(theirs["id"]) is not None

    def test_list_filter_sort_and_page(self, repo, user):
        for day in (3, 1, 2):
            repo.create_todo(user["id"], f"day {day}", f"2030-01-0{day}")
        first = repo.list_todos(user["id"], ListQuery(sort="due_date"))[0][0]
        repo.set_status(first["id"], TodoStatus.COMPLETE)

        items, total = repo.list_todos(user["id"], ListQuery(incomplete=True, sort="-due_date"))
        assert total == 2
        assert [t["content"] for t in items] == ["day 3", "day 2"]

        items, total = repo.list_todos(user["id"], ListQuery(limit=1, offset=1, sort="due_date"))
        assert total == 3
        assert [t["content"] for t in items] == ["day 2"]

    def test_count(self, repo, user):
        repo.create_todo(user["id"], "a", "2025-06-16")
        done = repo.create_todo(user["id"], "b", "2025-06-16")
        repo.set_status(done["id"], TodoStatus.COMPLETE)
        assert repo.count_todos(user["id"], "2025-06-16", TodoStatus.INCOMPLETE) == 1
        assert repo.count_todos(user["id"], "2025-06-17", TodoStatus.INCOMPLETE) == 0


def test_build_repository_selects_sqlite(tmp_path):
    settings = make_settings(persistence_backend="sqlite", sqlite_db_path=str(tmp_path / "app.db"))
    assert isinstance(build_repository(settings), SQLiteRepository)
    assert (tmp_path / "app.db").exists()
