"""
Business logic shared by all record kinds.

``RecordService`` implements the find, create, update and delete
workflows on top of a ``DocumentStore``.  Subclasses name their
collection, provide the field validator and translate search criteria.

Create: validate → title unique → secondary key unique → persist in a
transaction (version 0) → notification mail.

Update: parse version token → validate → title unique except for the
record itself → record exists → token not older than the stored
version → replace and increment the version in one compare‑and‑swap
write.

Expected failures come back as values from ``errors``; only
unexpected store faults raise.
"""

import html
import logging
import re
from typing import Any, Callable, ClassVar, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel

from ..core.db import DocumentStore, DuplicateKeyError, check_name
from ..core.mail import Mailer
from .errors import (
    CreateError,
    IsanExists,
    RecordInvalid,
    RecordNotFound,
    TitleExists,
    UpdateError,
    VersionInvalid,
    VersionOutdated,
)

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

# Longer search texts are matched exactly instead of as substring.
MAX_PATTERN_LENGTH = 10

# Search parameter types shared by every collection.
COMMON_FIELD_TYPES: Dict[str, Callable[[str], Any]] = {"version": int}


def to_bool(value: str) -> Union[bool, str]:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return value


class RecordService:
    """Find, create, update and delete records of one kind."""

    collection: ClassVar[str]
    # Used in log lines and the notification mail.
    kind_label: ClassVar[str]
    # Second unique field checked before create, e.g. ``isan``.
    secondary_key: ClassVar[Optional[str]] = None
    # Query parameters converted before comparing with stored values.
    field_types: ClassVar[Dict[str, Callable[[str], Any]]] = {}

    def __init__(self, store: DocumentStore, mailer: Optional[Mailer] = None) -> None:
        self.store = store
        self.mailer = mailer

    def validate(self, candidate: BaseModel) -> Optional[Dict[str, str]]:
        raise NotImplementedError

    @property
    def _name(self) -> str:
        return type(self).__name__

    @staticmethod
    def _strip_timestamps(record: Record) -> Record:
        record.pop("created_at", None)
        record.pop("updated_at", None)
        return record

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def find_by_id(self, record_id: Optional[str]) -> Optional[Record]:
        """Return the record or ``None``; malformed ids are simply not found."""
        logger.debug("%s.find_by_id(): id=%s", self._name, record_id)
        record = self.store.find_by_id(self.collection, record_id)
        if record is None:
            return None
        return self._strip_timestamps(record)

    def build_criteria(self, query: Mapping[str, Any]) -> Dict[str, Any]:
        """Translate search parameters into store criteria.

        ``titel`` becomes a case insensitive substring match when it is
        shorter than ``MAX_PATTERN_LENGTH``, an exact match otherwise.
        The text is matched literally.  Other parameters are equality
        filters; ``version`` and the values of ``field_types`` fields are
        converted first.
        """
        criteria: Dict[str, Any] = {}
        converters = {**COMMON_FIELD_TYPES, **self.field_types}
        for field, value in query.items():
            if value is None:
                continue
            try:
                check_name(field)
            except ValueError:
                logger.debug("%s.build_criteria(): ignoring %r", self._name, field)
                continue
            if field == "titel" and isinstance(value, str) and len(value) < MAX_PATTERN_LENGTH:
                criteria["titel"] = {"$regex": re.escape(value), "$options": "i"}
            elif field in converters and isinstance(value, str):
                try:
                    criteria[field] = converters[field](value.strip())
                except ValueError:
                    criteria[field] = value
            else:
                criteria[field] = value
        return criteria

    async def find(self, query: Optional[Mapping[str, Any]] = None) -> List[Record]:
        """Search records, sorted by title.

        Without search parameters all records are returned.
        """
        logger.debug("%s.find(): query=%s", self._name, query)
        criteria = self.build_criteria(query or {})
        logger.debug("%s.find(): criteria=%s", self._name, criteria)
        records = self.store.find(self.collection, criteria, sort="titel")
        return [self._strip_timestamps(record) for record in records]

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def _find_by_titel(self, titel: Optional[str]) -> Optional[Record]:
        if titel is None:
            return None
        return self.store.find_one(self.collection, {"titel": titel})

    def _duplicate(self, exc: DuplicateKeyError) -> Union[TitleExists, IsanExists]:
        existing = self.store.find_one(self.collection, {exc.field: exc.value})
        existing_id = existing["id"] if existing else None
        logger.debug("%s: duplicate %s=%s (id=%s)", self._name, exc.field, exc.value, existing_id)
        if exc.field == "titel":
            return TitleExists(exc.value, existing_id)
        return IsanExists(exc.value, existing_id)

    async def _validate_create(self, candidate: BaseModel) -> Optional[CreateError]:
        messages = self.validate(candidate)
        if messages is not None:
            logger.debug("%s.validate_create(): messages=%s", self._name, messages)
            return RecordInvalid(messages)

        titel = getattr(candidate, "titel", None)
        existing = self._find_by_titel(titel)
        if existing is not None:
            return TitleExists(titel, existing["id"])

        if self.secondary_key is not None:
            value = getattr(candidate, self.secondary_key, None)
            if value is not None:
                existing = self.store.find_one(self.collection, {self.secondary_key: value})
                if existing is not None:
                    return IsanExists(value, existing["id"])

        logger.debug("%s.validate_create(): ok", self._name)
        return None

    async def create(self, candidate: BaseModel) -> Union[str, CreateError]:
        """Store a new record and return its id, or an error value."""
        logger.debug("%s.create(): candidate=%s", self._name, candidate)
        error = await self._validate_create(candidate)
        if error is not None:
            return error

        fields = candidate.model_dump(mode="json")
        try:
            with self.store.transaction() as tx:
                record_id = tx.insert(self.collection, fields)
        except DuplicateKeyError as exc:
            # Another request stored the same key after our pre-check.
            return self._duplicate(exc)
        logger.info("%s created %s", self.kind_label, record_id)

        await self._send_mail(record_id, fields)
        return record_id

    async def _send_mail(self, record_id: str, fields: Mapping[str, Any]) -> None:
        if self.mailer is None:
            return
        subject = f"Neuer {self.kind_label} {record_id}"
        body = (
            f"Der {self.kind_label} mit dem Titel "
            f"<strong>{html.escape(str(fields.get('titel')))}</strong> ist angelegt"
        )
        try:
            await self.mailer.send(subject, body)
        except Exception as exc:
            logger.error("%s.create(): Fehler beim Verschicken der Email: %s", self._name, exc)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    @staticmethod
    def parse_version(version_token: Union[str, int, None]) -> Union[int, VersionInvalid]:
        if version_token is None:
            return VersionInvalid(None)
        try:
            return int(str(version_token).strip())
        except ValueError:
            return VersionInvalid(str(version_token))

    async def _validate_update(
        self,
        candidate: BaseModel,
        record_id: Optional[str],
        version: int,
    ) -> Optional[UpdateError]:
        messages = self.validate(candidate)
        if messages is not None:
            return RecordInvalid(messages)

        titel = getattr(candidate, "titel", None)
        existing = self._find_by_titel(titel)
        if existing is not None and existing["id"] != record_id:
            return TitleExists(titel, existing["id"])

        current = self.store.find_by_id(self.collection, record_id)
        if current is None:
            logger.debug("%s.validate_update(): not found id=%s", self._name, record_id)
            return RecordNotFound(record_id)

        if version < current["version"]:
            logger.debug(
                "%s.validate_update(): outdated version=%d, stored=%d",
                self._name,
                version,
                current["version"],
            )
            return VersionOutdated(record_id, version)

        logger.debug("%s.validate_update(): ok", self._name)
        return None

    async def update(
        self,
        candidate: BaseModel,
        record_id: Optional[str],
        version_token: Union[str, int, None],
    ) -> Union[int, UpdateError]:
        """Replace a record's fields and return the new version, or an error value."""
        logger.debug("%s.update(): id=%s, version=%s", self._name, record_id, version_token)
        version = self.parse_version(version_token)
        if isinstance(version, VersionInvalid):
            logger.debug("%s.update(): invalid version %r", self._name, version_token)
            return version

        error = await self._validate_update(candidate, record_id, version)
        if error is not None:
            return error

        fields = candidate.model_dump(mode="json")
        try:
            new_version = self.store.replace(self.collection, record_id, fields, version)
        except DuplicateKeyError as exc:
            return self._duplicate(exc)

        if new_version is None:
            # Changed or removed by another request after the checks.
            if self.store.find_by_id(self.collection, record_id) is None:
                return RecordNotFound(record_id)
            return VersionOutdated(record_id, version)

        logger.debug("%s.update(): id=%s, new version=%d", self._name, record_id, new_version)
        return new_version

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete(self, record_id: Optional[str]) -> bool:
        """Remove a record; ``True`` if it existed."""
        deleted = self.store.delete(self.collection, record_id)
        logger.debug("%s.delete(): id=%s, deleted=%s", self._name, record_id, deleted)
        return deleted


__all__ = ["RecordService", "Record", "MAX_PATTERN_LENGTH", "to_bool"]
