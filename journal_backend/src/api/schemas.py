from typing import Optional

from pydantic import BaseModel, Field, EmailStr
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys (wordCount, createdAt, ...)."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# Users

class User(CamelModel):
    """User profile record"""
    id: str
    email: str
    name: str
    created_at: str
    updated_at: str


class UserUpdate(BaseModel):
    """Partial user update; None means leave the field unchanged"""
    email: Optional[str] = None
    name: Optional[str] = None


class UserCreateRequest(BaseModel):
    """
    Request model to create a user profile.

    EmailStr normalizes the address (the domain is lowercased), so the stored
    email and the uniqueness check use the normalized form.
    """
    email: EmailStr = Field(..., description="User email")
    name: str = Field(..., description="Display name")


class UserUpdateRequest(BaseModel):
    """Update user request (partial); email is normalized as in UserCreateRequest"""
    email: Optional[EmailStr] = Field(None, description="New email")
    name: Optional[str] = Field(None, description="New display name")


# Notes

class Note(CamelModel):
    """Journal entry for one date"""
    id: str
    date: str = Field(..., description="Calendar date, YYYY-MM-DD")
    content: str
    word_count: int
    created_at: str
    updated_at: str


class NoteMetadata(CamelModel):
    """List view of a note: a preview instead of the full content"""
    id: str
    date: str
    word_count: int
    preview: str
    updated_at: str


class NoteSaveRequest(BaseModel):
    """Save note request; the date comes from the path"""
    content: str = Field("", description="Note content")
