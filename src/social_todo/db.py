from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional, Tuple

from .errors import Conflict
from .models import TodoEntity, TodoStatus, UserEntity
from .repositories import ListQuery, Repository, normalize_sort


@dataclass(frozen=True)
class _UserCols:
    table: str = "users"
    id: str = "id"
    external_id: str = "external_id"
    nickname: str = "nickname"
    name: str = "name"
    avatar_url: str = "avatar_url"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


@dataclass(frozen=True)
class _TodoCols:
    table: str = "todos"
    id: str = "id"
    user_id: str = "user_id"
    content: str = "content"
    due_date: str = "due_date"
    status: str = "status"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_U = _UserCols()
_T = _TodoCols()


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_U.table} (
                    {_U.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_U.external_id} TEXT NOT NULL UNIQUE,
                    {_U.nickname} TEXT NOT NULL UNIQUE,
                    {_U.name} TEXT NOT NULL,
                    {_U.avatar_url} TEXT NULL,
                    {_U.created_at} TEXT NOT NULL,
                    {_U.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_T.table} (
                    {_T.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_T.user_id} INTEGER NOT NULL REFERENCES {_U.table}({_U.id}) ON DELETE CASCADE,
                    {_T.content} TEXT NOT NULL,
                    {_T.due_date} TEXT NOT NULL,
                    {_T.status} INTEGER NOT NULL DEFAULT 0,
                    {_T.created_at} TEXT NOT NULL,
                    {_T.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_T.table}_user_status ON {_T.table}({_T.user_id}, {_T.status})"
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_T.table}_due_date ON {_T.table}({_T.due_date})"
            )

    def _row_to_user(self, row: sqlite3.Row) -> UserEntity:
        return {
            "id": int(row[_U.id]),
            "external_id": str(row[_U.external_id]),
            "nickname": str(row[_U.nickname]),
            "name": str(row[_U.name]),
            "avatar_url": row[_U.avatar_url],
            "created_at": datetime.fromisoformat(row[_U.created_at]),
            "updated_at": datetime.fromisoformat(row[_U.updated_at]),
        }

    def _row_to_todo(self, row: sqlite3.Row) -> TodoEntity:
        return {
            "id": int(row[_T.id]),
            "user_id": int(row[_T.user_id]),
            "content": str(row[_T.content]),
            "due_date": str(row[_T.due_date]),
            "status": TodoStatus(int(row[_T.status])),
            "created_at": datetime.fromisoformat(row[_T.created_at]),
            "updated_at": datetime.fromisoformat(row[_T.updated_at]),
        }

    def _fetch_user(self, conn: sqlite3.Connection, column: str, value) -> Optional[UserEntity]:
        row = conn.execute(f"SELECT * FROM {_U.table} WHERE {column} = ?", (value,)).fetchone()
        return self._row_to_user(row) if row else None

    def _fetch_todo(self, conn: sqlite3.Connection, todo_id: int) -> Optional[TodoEntity]:
        row = conn.execute(f"SELECT * FROM {_T.table} WHERE {_T.id} = ?", (todo_id,)).fetchone()
        return self._row_to_todo(row) if row else None

    # Users

    def create_user(self, external_id: str, nickname: str, name: str, avatar_url: Optional[str]) -> UserEntity:
        now = datetime.now().isoformat()
        with self._conn() as conn:
            try:
                cur = conn.execute(
                    f"""
                    INSERT INTO {_U.table} ({_U.external_id}, {_U.nickname}, {_U.name},
                        {_U.avatar_url}, {_U.created_at}, {_U.updated_at})
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (external_id, nickname, name, avatar_url, now, now),
                )
            except sqlite3.IntegrityError as e:
                raise Conflict(f"nickname already taken: {nickname}") from e
            user = self._fetch_user(conn, _U.id, cur.lastrowid)
            assert user is not None
            return user

    def update_user_profile(self, user_id: int, name: str, avatar_url: Optional[str]) -> Optional[UserEntity]:
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                UPDATE {_U.table}
                SET {_U.name} = ?, {_U.avatar_url} = ?, {_U.updated_at} = ?
                WHERE {_U.id} = ?
                """,
                (name, avatar_url, datetime.now().isoformat(), user_id),
            )
            if cur.rowcount == 0:
                return None
            return self._fetch_user(conn, _U.id, user_id)

    def get_user(self, user_id: int) -> Optional[UserEntity]:
        with self._conn() as conn:
            return self._fetch_user(conn, _U.id, user_id)

    def get_user_by_external_id(self, external_id: str) -> Optional[UserEntity]:
        with self._conn() as conn:
            return self._fetch_user(conn, _U.external_id, external_id)

    def get_user_by_nickname(self, nickname: str) -> Optional[UserEntity]:
        with self._conn() as conn:
            return self._fetch_user(conn, _U.nickname, nickname)

    # Todos

    def create_todo(self, user_id: int, content: str, due_date: str) -> TodoEntity:
        now = datetime.now().isoformat()
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_T.table} ({_T.user_id}, {_T.content}, {_T.due_date},
                    {_T.status}, {_T.created_at}, {_T.updated_at})
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user_id, content, due_date, int(TodoStatus.INCOMPLETE), now, now),
            )
            todo = self._fetch_todo(conn, cur.lastrowid)
            assert todo is not None
            return todo

    def get_todo(self, todo_id: int) -> Optional[TodoEntity]:
        with self._conn() as conn:
            return self._fetch_todo(conn, todo_id)

    def set_status(self, todo_id: int, status: TodoStatus) -> Optional[TodoEntity]:
        with self._conn() as conn:
            cur = conn.execute(
                f"UPDATE {_T.table} SET {_T.status} = ?, {_T.updated_at} = ? WHERE {_T.id} = ?",
                (int(status), datetime.now().isoformat(), todo_id),
            )
            if cur.rowcount == 0:
                return None
            return self._fetch_todo(conn, todo_id)

    def delete_todo(self, todo_id: int) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_T.table} WHERE {_T.id} = ?", (todo_id,))
            return cur.rowcount > 0

    def delete_todos_with_status(self, user_id: int, status: TodoStatus) -> int:
        with self._conn() as conn:
            cur = conn.execute(
                f"DELETE FROM {_T.table} WHERE {_T.user_id} = ? AND {_T.status} = ?",
                (user_id, int(status)),
            )
            return cur.rowcount

    def list_todos(self, user_id: int, query: Optional[ListQuery] = None) -> Tuple[List[TodoEntity], int]:
        q = query or ListQuery()
        clauses = [f"{_T.user_id} = ?"]
        params: list = [user_id]

        if q.incomplete:
            clauses.append(f"{_T.status} = ?")
            params.append(int(TodoStatus.INCOMPLETE))

        where_sql = f"WHERE {' AND '.join(clauses)}"

        field, reverse = normalize_sort(q.sort)
        direction = "DESC" if reverse else "ASC"
        order_sql = f"ORDER BY {field} {direction}, {_T.id} {direction}"

        limit = max(q.limit, 0)
        offset = max(q.offset, 0)

        with self._conn() as conn:
            count_row = conn.execute(
                f"SELECT COUNT(*) as cnt FROM {_T.table} {where_sql}", params
            ).fetchone()
            total = int(count_row["cnt"]) if count_row else 0

            rows = conn.execute(
                f"""
                SELECT * FROM {_T.table}
                {where_sql}
                {order_sql}
                LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            ).fetchall()
            return [self._row_to_todo(r) for r in rows], total

    def count_todos(self, user_id: int, due_date: str, status: TodoStatus) -> int:
        with self._conn() as conn:
            row = conn.execute(
                f"""
                SELECT COUNT(*) as cnt FROM {_T.table}
                WHERE {_T.user_id} = ? AND {_T.due_date} = ? AND {_T.status} = ?
                """,
                (user_id, due_date, int(status)),
            ).fetchone()
            return int(row["cnt"]) if row else 0
