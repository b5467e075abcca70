import logging
import uuid

from src.api.database import Database
from src.api.errors import NotFoundError
from src.api import models
from src.api.schemas import User, UserUpdate

logger = logging.getLogger(__name__)


def _to_user(row: models.User) -> User:
    return User(
        id=row.id,
        email=row.email,
        name=row.name,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class UserService:
    """User profiles keyed by an opaque id."""

    def __init__(self, db: Database):
        self.db = db

    # PUBLIC_INTERFACE
    def create(self, email: str, name: str) -> User:
        """
        Insert a new user with a fresh id.

        Raises:
            UniqueConstraintError if the email is already taken.
        """
        now = models.utc_now_iso()
        user = models.User(
            id=str(uuid.uuid4()),
            email=email,
            name=name,
            created_at=now,
            updated_at=now,
        )
        with self.db.session() as session:
            session.add(user)
        logger.debug("User created", extra={"user_id": user.id})
        return _to_user(user)

    # PUBLIC_INTERFACE
    def get(self, user_id: str) -> User:
        """
        Fetch a user by id.

        Raises:
            NotFoundError if no user has this id.
        """
        with self.db.session() as session:
            user = session.get(models.User, user_id)
            if user is None:
                raise NotFoundError(f"User not found: {user_id}")
            return _to_user(user)

    # PUBLIC_INTERFACE
    def update(self, user_id: str, data: UserUpdate) -> User:
        """
        Apply the fields set in data and refresh updated_at.

        Raises:
            NotFoundError if no user has this id.
            UniqueConstraintError if the new email is already taken.
        """
        with self.db.session() as session:
            user = session.get(models.User, user_id)
            if user is None:
                raise NotFoundError(f"User not found: {user_id}")
            if data.name is not None:
                user.name = data.name
            if data.email is not None:
                user.email = data.email
            user.updated_at = models.utc_now_iso()
        logger.debug("User updated", extra={"user_id": user_id})
        return _to_user(user)
