import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert

from src.api.database import Database
from src.api.derived import count_words, content_with_nul, make_preview, preview_expression
from src.api import models
from src.api.schemas import Note, NoteMetadata

logger = logging.getLogger(__name__)


def _to_note(row) -> Note:
    return Note(
        id=row.id,
        date=row.date,
        content=row.content,
        word_count=row.word_count,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_metadata(row) -> NoteMetadata:
    return NoteMetadata(
        id=row.id,
        date=row.date,
        word_count=row.word_count,
        preview=row.preview if row.raw_content is None else make_preview(row.raw_content),
        updated_at=row.updated_at,
    )


class NoteService:
    """
    Journal entries keyed by date.

    Holds nothing but the shared Database handle; every call goes straight
    to SQLite.
    """

    def __init__(self, db: Database):
        self.db = db

    def _metadata_query(self):
        return select(
            models.Note.id,
            models.Note.date,
            models.Note.word_count,
            preview_expression(models.Note.content).label("preview"),
            content_with_nul(models.Note.content).label("raw_content"),
            models.Note.updated_at,
        ).order_by(models.Note.date.desc())

    # PUBLIC_INTERFACE
    def save(self, date: str, content: str) -> Note:
        """
        Create the note for date or overwrite its content.

        One INSERT ... ON CONFLICT(date) DO UPDATE statement, so two saves
        racing on the same date cannot create two rows. An existing note
        keeps its id and created_at.
        """
        now = models.utc_now_iso()
        stmt = insert(models.Note).values(
            id=str(uuid.uuid4()),
            date=date,
            content=content,
            word_count=count_words(content),
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[models.Note.date],
            set_={
                "content": stmt.excluded.content,
                "word_count": stmt.excluded.word_count,
                "updated_at": stmt.excluded.updated_at,
            },
        ).returning(
            models.Note.id,
            models.Note.date,
            models.Note.content,
            models.Note.word_count,
            models.Note.created_at,
            models.Note.updated_at,
        )
        with self.db.session() as session:
            row = session.execute(stmt).one()
        note = _to_note(row)
        logger.debug("Note saved", extra={"date": date, "note_id": note.id, "word_count": note.word_count})
        return note

    # PUBLIC_INTERFACE
    def get(self, date: str) -> Optional[Note]:
        """Return the note for date, or None."""
        with self.db.session() as session:
            row = session.scalars(
                select(models.Note).where(models.Note.date == date)
            ).first()
            if row is None:
                return None
            return _to_note(row)

    # PUBLIC_INTERFACE
    def delete(self, date: str) -> None:
        """Remove the note for date; nothing happens when there is none."""
        with self.db.session() as session:
            result = session.execute(delete(models.Note).where(models.Note.date == date))
        logger.debug("Note delete", extra={"date": date, "deleted": result.rowcount})

    # PUBLIC_INTERFACE
    def list_all(self) -> List[NoteMetadata]:
        """All notes as metadata, most recent date first."""
        with self.db.session() as session:
            rows = session.execute(self._metadata_query()).all()
        return [_to_metadata(row) for row in rows]

    # PUBLIC_INTERFACE
    def search(self, query: str) -> List[NoteMetadata]:
        """
        Notes whose content matches LIKE '%query%', most recent date first.

        % and _ inside query are not escaped and act as wildcards.
        """
        pattern = f"%{query}%"
        stmt = self._metadata_query().where(models.Note.content.like(pattern))
        with self.db.session() as session:
            rows = session.execute(stmt).all()
        return [_to_metadata(row) for row in rows]
