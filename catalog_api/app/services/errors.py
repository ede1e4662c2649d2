"""
Error values returned by the record services.

Expected failures are returned, not raised.  Every variant is a frozen
dataclass with a ``kind`` discriminator so that transport adapters can
branch on ``error.kind`` and cover each case.  ``CreateError`` and
``UpdateError`` list the variants each operation can produce.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Optional, Union


class ErrorKind(str, Enum):
    RECORD_INVALID = "RECORD_INVALID"
    TITLE_EXISTS = "TITLE_EXISTS"
    ISAN_EXISTS = "ISAN_EXISTS"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    VERSION_INVALID = "VERSION_INVALID"
    VERSION_OUTDATED = "VERSION_OUTDATED"


@dataclass(frozen=True)
class RecordInvalid:
    """Field rules violated; ``messages`` maps field name to message."""

    messages: Dict[str, str]
    kind: ClassVar[ErrorKind] = ErrorKind.RECORD_INVALID


@dataclass(frozen=True)
class TitleExists:
    titel: Optional[str]
    id: Optional[str] = None
    kind: ClassVar[ErrorKind] = ErrorKind.TITLE_EXISTS


@dataclass(frozen=True)
class IsanExists:
    isan: Optional[str]
    id: Optional[str] = None
    kind: ClassVar[ErrorKind] = ErrorKind.ISAN_EXISTS


@dataclass(frozen=True)
class RecordNotFound:
    id: Optional[str]
    kind: ClassVar[ErrorKind] = ErrorKind.RECORD_NOT_FOUND


@dataclass(frozen=True)
class VersionInvalid:
    """The version token was missing (``None``) or not an integer."""

    version: Optional[str]
    kind: ClassVar[ErrorKind] = ErrorKind.VERSION_INVALID


@dataclass(frozen=True)
class VersionOutdated:
    id: str
    version: int
    kind: ClassVar[ErrorKind] = ErrorKind.VERSION_OUTDATED


CreateError = Union[RecordInvalid, TitleExists, IsanExists]
UpdateError = Union[RecordInvalid, RecordNotFound, TitleExists, IsanExists, VersionInvalid, VersionOutdated]
ServiceError = Union[CreateError, UpdateError]

SERVICE_ERRORS = (RecordInvalid, TitleExists, IsanExists, RecordNotFound, VersionInvalid, VersionOutdated)


def is_error(result: object) -> bool:
    """True if ``result`` is one of the service error values."""
    return isinstance(result, SERVICE_ERRORS)


def message_for(error: ServiceError, kind_label: str = "Datensatz") -> str:
    """Human readable text for an error value, shared by REST and GraphQL."""
    if isinstance(error, RecordInvalid):
        return " ".join(error.messages.values())
    if isinstance(error, TitleExists):
        return f'Der Titel "{error.titel}" existiert bereits.'
    if isinstance(error, IsanExists):
        return f'Die ISAN-Nummer "{error.isan}" existiert bereits.'
    if isinstance(error, RecordNotFound):
        return f'Es gibt keinen {kind_label} mit der ID "{error.id}".'
    if isinstance(error, VersionInvalid):
        if error.version is None:
            return "Versionsnummer fehlt"
        return f'Die Versionsnummer "{error.version}" ist ungueltig.'
    if isinstance(error, VersionOutdated):
        return f'Die Versionsnummer "{error.version}" ist nicht aktuell.'
    raise TypeError(f"Not a service error: {error!r}")
