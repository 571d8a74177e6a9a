import sqlite3


class TrackerError(Exception):
    pass


class ConflictError(TrackerError):
    """A uniqueness constraint rejected the write (e.g. a taken email)."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


def is_unique_violation(exc: sqlite3.IntegrityError, column: str) -> bool:
    # sqlite reports "UNIQUE constraint failed: users.email"
    text = str(exc)
    return "UNIQUE constraint failed" in text and column in text
