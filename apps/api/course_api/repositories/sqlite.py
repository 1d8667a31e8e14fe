"""SQLite storage: users and courses in two relational tables."""

from __future__ import annotations

import logging
import sqlite3
import threading

from course_api.repositories.base import (
    COURSE_FIELD_NAMES,
    CourseFields,
    CourseRecord,
    Storage,
    UserRecord,
)

logger = logging.getLogger(__name__)

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        first_name TEXT NOT NULL,
        last_name TEXT NOT NULL,
        email_address TEXT NOT NULL UNIQUE,
        password TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS courses (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        title TEXT NOT NULL,
        description TEXT NOT NULL,
        estimated_time TEXT,
        materials_needed TEXT
    );
"""

_USER_COLUMNS = "id, first_name, last_name, email_address, password"
_COURSE_COLUMNS = "id, user_id, title, description, estimated_time, materials_needed"


def _user_from_row(row: sqlite3.Row) -> UserRecord:
    return UserRecord(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        email_address=row["email_address"],
        password_hash=row["password"],
    )


def _course_from_row(row: sqlite3.Row) -> CourseRecord:
    return CourseRecord(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        description=row["description"],
        estimated_time=row["estimated_time"],
        materials_needed=row["materials_needed"],
    )


class SqliteStore(Storage):
    """Single-connection SQLite store shared by worker threads.

    The connection is serialized behind a lock; every write runs in its own
    transaction.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._lock = threading.Lock()
        self._connection: sqlite3.Connection | None = None

    def open(self) -> None:
        if self._connection is not None:
            return
        connection = sqlite3.connect(self._path, check_same_thread=False)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        connection.executescript(_SCHEMA)
        self._connection = connection
        logger.info("storage.opened backend=sqlite path=%s", self._path)

    def close(self) -> None:
        with self._lock:
            if self._connection is None:
                return
            self._connection.close()
            self._connection = None
        logger.info("storage.closed backend=sqlite path=%s", self._path)

    @property
    def connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise RuntimeError("SqliteStore is not open")
        return self._connection

    def find_user_by_email(self, email_address: str) -> UserRecord | None:
        with self._lock:
            row = self.connection.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE email_address = ?",
                (email_address,),
            ).fetchone()
        return _user_from_row(row) if row is not None else None

    def find_user_by_id(self, user_id: int) -> UserRecord | None:
        with self._lock:
            row = self.connection.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        return _user_from_row(row) if row is not None else None

    def create_user_if_absent(
        self,
        *,
        email_address: str,
        first_name: str,
        last_name: str,
        password_hash: str,
    ) -> tuple[UserRecord, bool]:
        with self._lock:
            connection = self.connection
            try:
                with connection:
                    cursor = connection.execute(
                        "INSERT INTO users (first_name, last_name, email_address, password) VALUES (?, ?, ?, ?)",
                        (first_name, last_name, email_address, password_hash),
                    )
            except sqlite3.IntegrityError:
                row = connection.execute(
                    f"SELECT {_USER_COLUMNS} FROM users WHERE email_address = ?",
                    (email_address,),
                ).fetchone()
                if row is None:
                    raise
                return _user_from_row(row), False

            user = UserRecord(
                id=cursor.lastrowid,
                first_name=first_name,
                last_name=last_name,
                email_address=email_address,
                password_hash=password_hash,
            )
            return user, True

    def list_courses(self) -> list[CourseRecord]:
        with self._lock:
            rows = self.connection.execute(f"SELECT {_COURSE_COLUMNS} FROM courses ORDER BY id").fetchall()
        return [_course_from_row(row) for row in rows]

    def find_course(self, course_id: int) -> CourseRecord | None:
        with self._lock:
            row = self.connection.execute(
                f"SELECT {_COURSE_COLUMNS} FROM courses WHERE id = ?",
                (course_id,),
            ).fetchone()
        return _course_from_row(row) if row is not None else None

    def create_course(self, *, owner_id: int, fields: CourseFields) -> CourseRecord:
        with self._lock:
            connection = self.connection
            try:
                with connection:
                    cursor = connection.execute(
                        "INSERT INTO courses (user_id, title, description, estimated_time, materials_needed) "
                        "VALUES (?, ?, ?, ?, ?)",
                        (
                            owner_id,
                            fields["title"],
                            fields["description"],
                            fields.get("estimated_time"),
                            fields.get("materials_needed"),
                        ),
                    )
            except sqlite3.IntegrityError as exc:
                raise ValueError(f"Unknown course owner: {owner_id}") from exc

        return CourseRecord(
            id=cursor.lastrowid,
            user_id=owner_id,
            title=fields["title"],
            description=fields["description"],
            estimated_time=fields.get("estimated_time"),
            materials_needed=fields.get("materials_needed"),
        )

    def update_course(self, course_id: int, fields: CourseFields) -> CourseRecord | None:
        columns = [name for name in COURSE_FIELD_NAMES if name in fields]
        with self._lock:
            connection = self.connection
            with connection:
                if columns:
                    assignments = ", ".join(f"{name} = ?" for name in columns)
                    connection.execute(
                        f"UPDATE courses SET {assignments} WHERE id = ?",
                        (*(fields[name] for name in columns), course_id),
                    )
                row = connection.execute(
                    f"SELECT {_COURSE_COLUMNS} FROM courses WHERE id = ?",
                    (course_id,),
                ).fetchone()
        return _course_from_row(row) if row is not None else None

    def delete_course(self, course_id: int) -> bool:
        with self._lock:
            connection = self.connection
            with connection:
                cursor = connection.execute("DELETE FROM courses WHERE id = ?", (course_id,))
        return cursor.rowcount > 0
