"""Errors raised by the content database."""


class DatabaseError(Exception):
    """A statement or transaction against the content database failed."""


class DatabaseUnavailableError(DatabaseError):
    """The database file could not be opened."""


class IntegrityError(DatabaseError):
    """A row broke a uniqueness, foreign key or rating constraint."""


class SchemaError(DatabaseError):
    """The tables could not be created."""
