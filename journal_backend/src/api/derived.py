"""
Fields derived from note content: word count and list preview.

make_preview and preview_expression must agree exactly. SQLite builds the
preview so list queries never fetch full content, except for content holding
a NUL character: SQLite text functions stop at the first NUL, so those rows
bring their content back (content_with_nul) and go through make_preview.
"""
from sqlalchemy import LargeBinary, Text, case, cast, func
from sqlalchemy.sql.elements import ColumnElement

PREVIEW_LENGTH = 100
ELLIPSIS = "..."
# Unicode White_Space, stripped from both ends after CR/LF have become spaces
TRIM_CHARS = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)


def count_words(content: str) -> int:
    """Number of whitespace-delimited tokens in content."""
    return len(content.split())


def clean_preview_text(content: str) -> str:
    return content.replace("\r", " ").replace("\n", " ").strip(TRIM_CHARS)


def make_preview(content: str, length: int = PREVIEW_LENGTH) -> str:
    """
    First `length` characters of the cleaned content, plus "..." if cut.

    Cleaning replaces every CR and LF with a space and trims the result.
    """
    cleaned = clean_preview_text(content)
    if len(cleaned) > length:
        return cleaned[:length] + ELLIPSIS
    return cleaned


def preview_expression(content_column, length: int = PREVIEW_LENGTH) -> ColumnElement:
    """SQL expression computing make_preview(content_column) inside SQLite."""
    cleaned = func.trim(
        func.replace(
            func.replace(content_column, "\r", " ", type_=Text),
            "\n",
            " ",
            type_=Text,
        ),
        TRIM_CHARS,
        type_=Text,
    )
    return case(
        (
            func.length(cleaned) > length,
            func.substr(cleaned, 1, length, type_=Text).concat(ELLIPSIS),
        ),
        else_=cleaned,
    )


def content_with_nul(content_column) -> ColumnElement:
    """The content itself when it holds a NUL character, else NULL."""
    return case(
        (func.instr(cast(content_column, LargeBinary), b"\x00") > 0, content_column),
        else_=None,
    )
