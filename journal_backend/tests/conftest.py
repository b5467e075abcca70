from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.api.commands import Commands
from src.api.config import Settings
from src.api.database import Database
from src.api.main import create_app
from src.api.note_service import NoteService
from src.api.user_service import UserService


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        db_path=str(tmp_path / "journal.db"),
        log_level="DEBUG",
        log_dir=None,
        log_file_name="journal.log",
        frontend_origin="http://localhost:1420",
        busy_timeout=30.0,
    )


@pytest.fixture()
def db(settings: Settings):
    # isolate the database file per test
    database = Database.open(settings.db_path)
    yield database
    database.close()


@pytest.fixture()
def notes(db: Database) -> NoteService:
    return NoteService(db)


@pytest.fixture()
def users(db: Database) -> UserService:
    return UserService(db)


@pytest.fixture()
def commands(notes: NoteService, users: UserService) -> Commands:
    return Commands(notes=notes, users=users)


@pytest.fixture()
def client(settings: Settings, db: Database):
    app = create_app(settings, db=db)
    with TestClient(app) as test_client:
        yield test_client
