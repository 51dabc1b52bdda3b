"""SQLite storage for collected contents and their subject links.

Example:
    >>> from store.db import ContentDatabase
    >>>
    >>> db = ContentDatabase("data/collect.db")
    >>> with db.transaction():
    ...     db.create_schema()
"""

from .database import ContentDatabase, Row
from .errors import DatabaseError, DatabaseUnavailableError, IntegrityError, SchemaError

__all__ = [
    "ContentDatabase",
    "Row",
    "DatabaseError",
    "DatabaseUnavailableError",
    "IntegrityError",
    "SchemaError",
]
