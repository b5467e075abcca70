from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Text, Index
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utc_now_iso() -> str:
    """Current time as stored in the timestamp columns, ISO-8601 with offset."""
    return datetime.now(timezone.utc).isoformat()


class User(Base):
    """
    User profile with unique email. Timestamps are ISO-8601 strings.
    """
    __tablename__ = "users"

    id = Column(Text, primary_key=True)
    email = Column(Text, unique=True, nullable=False)
    name = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    __table_args__ = (
        Index("idx_users_email", "email"),
    )


class Note(Base):
    """
    Journal entry, one per calendar date (YYYY-MM-DD).
    """
    __tablename__ = "notes"

    id = Column(Text, primary_key=True)
    date = Column(Text, unique=True, nullable=False)
    content = Column(Text, nullable=False)
    word_count = Column(Integer, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    __table_args__ = (
        Index("idx_notes_date", "date"),
    )


class Setting(Base):
    """
    Key/value application preferences.
    """
    __tablename__ = "settings"

    key = Column(Text, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)
