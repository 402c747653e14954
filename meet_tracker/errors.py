"""Exception types raised by meet_tracker."""

from __future__ import annotations


class MeetTrackerError(Exception):
    """Base class for all meet_tracker errors."""


class ParseError(MeetTrackerError, ValueError):
    """An interchange document is not well formed."""


class MalformedRecordError(ParseError):
    """A single interchange record is missing or has invalid fields.

    Only raised by the strict record policy; the default policy fills in
    defaults instead.
    """

    def __init__(self, index: int, fields: list[str]) -> None:
        self.index = index
        self.fields = fields
        super().__init__(f"record #{index} has invalid fields: {', '.join(fields)}")


class StorageError(MeetTrackerError):
    """The contact store could not read or write its data."""


class ContactNotFoundError(MeetTrackerError, KeyError):
    """No stored contact has the requested id."""

    def __str__(self) -> str:
        return f"contact not found: {self.args[0]!r}" if self.args else "contact not found"


class ExportError(MeetTrackerError):
    """The interchange document could not be built."""


# What commit_import may raise.
IMPORT_ERRORS = (ParseError, StorageError)
