"""
Boundary commands invoked by the desktop shell.

Each command calls one service operation. Errors raised below this layer
are logged and turned into an ErrorResponse here, and nowhere else, so raw
storage error text never crosses the boundary.
"""
from typing import List, Optional

from src.api.errors import ErrorResponse, to_error_response
from src.api.note_service import NoteService
from src.api.schemas import Note, NoteMetadata, User, UserUpdate
from src.api.user_service import UserService


class CommandError(Exception):
    """Raised by commands; carries only the sanitized ErrorResponse."""

    def __init__(self, error: ErrorResponse):
        super().__init__(error.message)
        self.error = error


class Commands:
    """The command set bound to one pair of services."""

    def __init__(self, notes: NoteService, users: UserService):
        self.notes = notes
        self.users = users

    def _run(self, operation, *args):
        try:
            return operation(*args)
        except Exception as exc:
            raise CommandError(to_error_response(exc)) from None

    # -------- Notes --------

    # PUBLIC_INTERFACE
    def save_note(self, date: str, content: str) -> Note:
        return self._run(self.notes.save, date, content)

    # PUBLIC_INTERFACE
    def get_note(self, date: str) -> Optional[Note]:
        return self._run(self.notes.get, date)

    # PUBLIC_INTERFACE
    def delete_note(self, date: str) -> None:
        self._run(self.notes.delete, date)

    # PUBLIC_INTERFACE
    def list_notes(self) -> List[NoteMetadata]:
        return self._run(self.notes.list_all)

    # PUBLIC_INTERFACE
    def search_notes(self, query: str) -> List[NoteMetadata]:
        return self._run(self.notes.search, query)

    # -------- Users --------

    # PUBLIC_INTERFACE
    def get_user(self, user_id: str) -> User:
        return self._run(self.users.get, user_id)

    # PUBLIC_INTERFACE
    def create_user(self, email: str, name: str) -> User:
        return self._run(self.users.create, email, name)

    # PUBLIC_INTERFACE
    def update_user(self, user_id: str, data: UserUpdate) -> User:
        return self._run(self.users.update, user_id, data)
