import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Depends, Request, Query, Path, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.commands import CommandError, Commands
from src.api.config import Settings, get_settings
from src.api.database import Database
from src.api.errors import NOT_FOUND
from src.api.logging_config import configure_logging
from src.api.note_service import NoteService
from src.api.schemas import (
    Note,
    NoteMetadata,
    NoteSaveRequest,
    User,
    UserCreateRequest,
    UserUpdate,
    UserUpdateRequest,
)
from src.api.user_service import UserService

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def get_commands(request: Request) -> Commands:
    """Dependency returning the command set bound to this app's database."""
    return request.app.state.commands


async def command_error_handler(request: Request, exc: CommandError) -> JSONResponse:
    # Status follows the code alone, so a duplicate email (DATABASE_ERROR) is a 500
    status_code = (
        status.HTTP_404_NOT_FOUND
        if exc.error.code == NOT_FOUND
        else status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return JSONResponse(status_code=status_code, content=exc.error.model_dump(exclude_none=True))


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, db: Optional[Database] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Opens the database from settings unless a handle is passed in. Each
    service gets its own clone of the handle; the app's handles are closed
    on shutdown.
    """
    settings = settings or get_settings()
    if db is None:
        configure_logging(settings.log_level, settings.log_dir, settings.log_file_name)
        db = Database.open(settings.db_path, busy_timeout=settings.busy_timeout)
    else:
        db = db.clone()

    handles = [db, db.clone()]
    commands = Commands(notes=NoteService(handles[0]), users=UserService(handles[1]))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        for handle in handles:
            handle.close()

    app = FastAPI(
        title="Journal API",
        description="Local daily-journal backend: notes keyed by date and user profiles.",
        version="1.0.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Health", "description": "Service health and status."},
            {"name": "Notes", "description": "Daily notes keyed by date."},
            {"name": "Users", "description": "User profiles."},
        ],
    )
    app.state.commands = commands
    app.add_exception_handler(CommandError, command_error_handler)

    # CORS setup - allow the desktop webview
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:

    # PUBLIC_INTERFACE
    @app.get("/", tags=["Health"], summary="Health Check")
    def health_check():
        """
        Health check endpoint.

        Returns:
            JSON object indicating service status.
        """
        return {"message": "Healthy"}

    # -------- Notes Routes --------

    # PUBLIC_INTERFACE
    @app.get(
        "/notes",
        response_model=List[NoteMetadata],
        tags=["Notes"],
        summary="List all notes, most recent first",
    )
    def list_notes(commands: Commands = Depends(get_commands)):
        """
        List every note as metadata (preview instead of content), ordered by date descending.
        """
        return commands.list_notes()

    # PUBLIC_INTERFACE
    @app.get(
        "/notes/search",
        response_model=List[NoteMetadata],
        tags=["Notes"],
        summary="Search notes by content",
    )
    def search_notes(
        q: str = Query(..., description="Substring to look for in note content"),
        commands: Commands = Depends(get_commands),
    ):
        """
        Return notes whose content contains q. % and _ in q act as wildcards.
        """
        return commands.search_notes(q)

    # PUBLIC_INTERFACE
    @app.get(
        "/notes/{date}",
        response_model=Optional[Note],
        tags=["Notes"],
        summary="Get the note for a date",
    )
    def get_note(
        date: str = Path(..., description="Calendar date, YYYY-MM-DD"),
        commands: Commands = Depends(get_commands),
    ):
        """
        Retrieve the note for a date. Returns null when there is none.
        """
        return commands.get_note(date)

    # PUBLIC_INTERFACE
    @app.put(
        "/notes/{date}",
        response_model=Note,
        tags=["Notes"],
        summary="Create or overwrite the note for a date",
    )
    def save_note(
        payload: NoteSaveRequest,
        date: str = Path(..., description="Calendar date, YYYY-MM-DD"),
        commands: Commands = Depends(get_commands),
    ):
        """
        Save note content for a date. The first save creates the note; later
        saves keep its id and created_at and replace the content.
        """
        return commands.save_note(date, payload.content)

    # PUBLIC_INTERFACE
    @app.delete(
        "/notes/{date}",
        status_code=status.HTTP_204_NO_CONTENT,
        tags=["Notes"],
        summary="Delete the note for a date",
    )
    def delete_note(
        date: str = Path(..., description="Calendar date, YYYY-MM-DD"),
        commands: Commands = Depends(get_commands),
    ):
        """
        Delete the note for a date. Deleting a missing note also succeeds.
        """
        commands.delete_note(date)
        return None

    # -------- User Routes --------

    # PUBLIC_INTERFACE
    @app.post(
        "/users",
        response_model=User,
        status_code=status.HTTP_201_CREATED,
        tags=["Users"],
        summary="Create a user profile",
    )
    def create_user(payload: UserCreateRequest, commands: Commands = Depends(get_commands)):
        """
        Create a user profile.

        Raises:
            500 DATABASE_ERROR if the email is already in use.
        """
        return commands.create_user(payload.email, payload.name)

    # PUBLIC_INTERFACE
    @app.get(
        "/users/{user_id}",
        response_model=User,
        tags=["Users"],
        summary="Get a user profile",
    )
    def get_user(user_id: str, commands: Commands = Depends(get_commands)):
        """
        Retrieve a user profile.

        Raises:
            404 NOT_FOUND if no user has this id.
        """
        return commands.get_user(user_id)

    # PUBLIC_INTERFACE
    @app.patch(
        "/users/{user_id}",
        response_model=User,
        tags=["Users"],
        summary="Update a user profile",
    )
    def update_user(
        payload: UserUpdateRequest,
        user_id: str,
        commands: Commands = Depends(get_commands),
    ):
        """
        Update name and/or email. Fields left out are unchanged.
        """
        data = UserUpdate(email=payload.email, name=payload.name)
        return commands.update_user(user_id, data)


# PUBLIC_INTERFACE
def run() -> None:
    """Serve the API with uvicorn on localhost."""
    import uvicorn

    uvicorn.run(create_app(), host="127.0.0.1", port=8000)
