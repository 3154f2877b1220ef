from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
import sqlite3
import threading
from typing import List, Protocol

from shared.models.application import Application
from shared.models.discovery import CloudProvider
from shared.models.errors import ApplicationExistsError


class ApplicationStore(Protocol):
    def get_by_id(self, app_id: str) -> Application | None:
        ...

    def get_by_name(self, name: str) -> Application | None:
        ...

    def add(self, app: Application) -> Application:
        ...

    def list(self) -> List[Application]:
        ...


class InMemoryApplicationStore:
    def __init__(self, apps: List[Application] | None = None) -> None:
        self._lock = threading.Lock()
        self._apps: dict[str, Application] = {}
        for app in apps or []:
            self.add(app)

    def get_by_id(self, app_id: str) -> Application | None:
        with self._lock:
            return self._apps.get(app_id)

    def get_by_name(self, name: str) -> Application | None:
        with self._lock:
            return next((app for app in self._apps.values() if app.name == name), None)

    def add(self, app: Application) -> Application:
        with self._lock:
            if any(existing.name == app.name for existing in self._apps.values()):
                raise ApplicationExistsError(app.name)
            self._apps[app.id] = app
        return app

    def list(self) -> List[Application]:
        with self._lock:
            return sorted(self._apps.values(), key=lambda app: app.created_at)


class SqliteApplicationStore:
    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self.db_path)
        connection.row_factory = sqlite3.Row
        return connection

    def _initialize(self) -> None:
        with self._connect() as connection:
            connection.execute(
                """
                CREATE TABLE IF NOT EXISTS applications (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE,
                    description TEXT NOT NULL DEFAULT '',
                    git_repo_url TEXT NOT NULL DEFAULT '',
                    source_path TEXT NOT NULL DEFAULT '',
                    provider TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
                """
            )
            connection.commit()

    @staticmethod
    def _row_to_app(row: sqlite3.Row) -> Application:
        created_at = datetime.fromisoformat(str(row["created_at"]))
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        return Application(
            id=str(row["id"]),
            name=str(row["name"]),
            description=str(row["description"]),
            git_repo_url=str(row["git_repo_url"]),
            source_path=str(row["source_path"]),
            provider=CloudProvider(str(row["provider"])),
            created_at=created_at,
        )

    def _fetch_one(self, column: str, value: str) -> Application | None:
        with self._connect() as connection:
            row = connection.execute(
                f"SELECT * FROM applications WHERE {column} = ? LIMIT 1",
                (value,),
            ).fetchone()
        return self._row_to_app(row) if row is not None else None

    def get_by_id(self, app_id: str) -> Application | None:
        return self._fetch_one("id", app_id)

    def get_by_name(self, name: str) -> Application | None:
        return self._fetch_one("name", name)

    def add(self, app: Application) -> Application:
        try:
            with self._connect() as connection:
                connection.execute(
                    """
                    INSERT INTO applications(id, name, description, git_repo_url, source_path, provider, created_at)
                    VALUES(?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        app.id,
                        app.name,
                        app.description,
                        app.git_repo_url,
                        app.source_path,
                        app.provider.value,
                        app.created_at.isoformat(),
                    ),
                )
                connection.commit()
        except sqlite3.IntegrityError as exc:
            raise ApplicationExistsError(app.name) from exc
        return app

    def list(self) -> List[Application]:
        with self._connect() as connection:
            rows = connection.execute(
                "SELECT * FROM applications ORDER BY created_at ASC, name ASC"
            ).fetchall()
        return [self._row_to_app(row) for row in rows]
