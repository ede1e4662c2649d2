"""
Document storage on top of SQLite, plus an in‑memory fixture store.

Each record kind lives in its own collection.  A collection is a
SQLite table holding one JSON document per row next to the
bookkeeping columns ``id`` (generated UUID), ``version``,
``created_at`` and ``updated_at``.  Unique constraints on document
fields (``titel``, ``isan``) are enforced with unique indexes on
``json_extract`` expressions, so two concurrent creates with the same
title cannot both be stored.

Queries use a tiny criteria language modelled after MongoDB filters:

* ``{"field": value}`` – equality
* ``{"field": {"$regex": pattern, "$options": "i"}}`` – regular
  expression search, ``i`` for case insensitive
* ``{"field": {"$all": [a, b]}}`` – list field contains every value

``SQLiteDocumentStore`` and ``InMemoryDocumentStore`` implement the
same ``DocumentStore`` interface; ``create_store`` picks one based on
the settings.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import re
import sqlite3
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .config import Settings
from .testdata import FIXTURES

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
Criteria = Mapping[str, Any]

# Collection name -> document fields with a unique constraint.
COLLECTIONS: Dict[str, Tuple[str, ...]] = {
    "filme": ("titel", "isan"),
    "songs": ("titel",),
}

# Keys managed by the store, never part of the stored JSON document.
BOOKKEEPING_FIELDS = ("id", "version", "created_at", "updated_at")

_NAME_RE = re.compile(r"^[A-Za-z_]\w*$")


class DuplicateKeyError(Exception):
    """A write violated the unique constraint on ``field``."""

    def __init__(self, collection: str, field: str, value: Any) -> None:
        super().__init__(f"Duplicate {field} {value!r} in {collection}")
        self.collection = collection
        self.field = field
        self.value = value


def check_name(name: str) -> str:
    """Return ``name`` if it is usable as a collection or field name."""
    if not _NAME_RE.match(name):
        raise ValueError(f"Invalid name: {name!r}")
    return name


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _strip_bookkeeping(document: Mapping[str, Any]) -> Document:
    return {k: v for k, v in document.items() if k not in BOOKKEEPING_FIELDS}


class DocumentStore(ABC):
    """Interface shared by the SQLite and the in‑memory store."""

    def __init__(self, collections: Mapping[str, Sequence[str]] = COLLECTIONS) -> None:
        self.collections = {check_name(name): tuple(fields) for name, fields in collections.items()}

    @abstractmethod
    def create_collections(self) -> None:
        """Create storage for every configured collection if missing."""

    @abstractmethod
    def find_by_id(self, collection: str, record_id: Optional[str]) -> Optional[Document]:
        """Return the document with ``record_id`` or ``None``."""

    @abstractmethod
    def find(
        self,
        collection: str,
        criteria: Optional[Criteria] = None,
        sort: Optional[str] = None,
    ) -> List[Document]:
        """Return all documents matching ``criteria``, optionally sorted by a field."""

    def find_one(self, collection: str, criteria: Criteria) -> Optional[Document]:
        found = self.find(collection, criteria)
        return found[0] if found else None

    @abstractmethod
    def insert(self, collection: str, fields: Mapping[str, Any]) -> str:
        """Store a new document with version 0 and return its generated id."""

    @abstractmethod
    def replace(
        self,
        collection: str,
        record_id: str,
        fields: Mapping[str, Any],
        expected_version: int,
    ) -> Optional[int]:
        """Replace the document fields and increment the version.

        The write only happens while the stored version is not greater
        than ``expected_version``.  Returns the new version, or ``None``
        when the document is missing or its version moved past
        ``expected_version``.
        """

    @abstractmethod
    def delete(self, collection: str, record_id: Optional[str]) -> bool:
        """Remove a document; ``True`` if something was removed."""

    @abstractmethod
    def load(self, collection: str, documents: Sequence[Mapping[str, Any]]) -> None:
        """Replace the contents of ``collection`` with ``documents``.

        Documents carry their own ``id`` and ``version``.
        """

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator["DocumentStore"]:
        """Yield a store whose writes are committed or rolled back together."""

    def _unique_fields(self, collection: str) -> Tuple[str, ...]:
        try:
            return self.collections[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection!r}") from None


# ---------------------------------------------------------------------------
# SQLite
# ---------------------------------------------------------------------------

def get_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are used as is; relative paths are resolved against
    the project root.
    """
    if os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


def _regexp(pattern: str, value: Any) -> bool:
    if value is None:
        return False
    return re.search(pattern, str(value)) is not None


def get_connection(db_path: str) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` and a ``REGEXP`` function is
    registered for ``$regex`` criteria.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.create_function("REGEXP", 2, _regexp, deterministic=True)
    return conn


class SQLiteDocumentStore(DocumentStore):
    """Collections as SQLite tables with JSON documents."""

    def __init__(
        self,
        db_path: str,
        collections: Mapping[str, Sequence[str]] = COLLECTIONS,
        connection: Optional[sqlite3.Connection] = None,
    ) -> None:
        super().__init__(collections)
        self.db_path = db_path
        # Set only on stores handed out by ``transaction``.
        self._connection = connection

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        if self._connection is not None:
            yield self._connection.cursor()
            return
        conn = get_connection(self.db_path)
        try:
            yield conn.cursor()
            conn.commit()
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator["SQLiteDocumentStore"]:
        if self._connection is not None:
            yield self
            return
        conn = get_connection(self.db_path)
        try:
            yield SQLiteDocumentStore(self.db_path, self.collections, connection=conn)
            conn.commit()
        except BaseException:
            logger.warning("Transaction on %s rolled back", self.db_path)
            conn.rollback()
            raise
        finally:
            conn.close()

    def create_collections(self) -> None:
        with self._cursor() as cursor:
            for name, unique_fields in self.collections.items():
                cursor.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {name} (
                        id TEXT PRIMARY KEY,
                        version INTEGER NOT NULL DEFAULT 0,
                        document TEXT NOT NULL,
                        created_at TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                    """
                )
                for field in unique_fields:
                    check_name(field)
                    cursor.execute(
                        f"CREATE UNIQUE INDEX IF NOT EXISTS ux_{name}_{field} "
                        f"ON {name} (json_extract(document, '$.{field}'))"
                    )
        logger.debug("Collections ready: %s", ", ".join(self.collections))

    @staticmethod
    def _row_to_document(row: sqlite3.Row) -> Document:
        document: Document = {"id": row["id"], "version": row["version"]}
        document.update(json.loads(row["document"]))
        document["created_at"] = row["created_at"]
        document["updated_at"] = row["updated_at"]
        return document

    @staticmethod
    def _where(criteria: Criteria) -> Tuple[str, List[Any]]:
        clauses: List[str] = []
        params: List[Any] = []
        for field, condition in criteria.items():
            path = f"$.{check_name(field)}"
            # Bookkeeping keys are columns, everything else lives in the document.
            if field in BOOKKEEPING_FIELDS:
                target, target_params = field, []
            else:
                target, target_params = "json_extract(document, ?)", [path]
            if isinstance(condition, Mapping) and "$regex" in condition:
                pattern = condition["$regex"]
                if "i" in condition.get("$options", ""):
                    pattern = f"(?i){pattern}"
                clauses.append(f"{target} REGEXP ?")
                params.extend([*target_params, pattern])
            elif isinstance(condition, Mapping) and "$all" in condition:
                if field in BOOKKEEPING_FIELDS:
                    clauses.append("0")
                    continue
                for value in condition["$all"]:
                    clauses.append(
                        "EXISTS (SELECT 1 FROM json_each(document, ?) AS item WHERE item.value = ?)"
                    )
                    params.extend([path, value])
            else:
                clauses.append(f"{target} = ?")
                params.extend([*target_params, condition])
        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params

    def _duplicate_key(self, collection: str, fields: Mapping[str, Any], exc: sqlite3.IntegrityError) -> Exception:
        message = str(exc)
        for field in self._unique_fields(collection):
            if f"ux_{collection}_{field}" in message:
                return DuplicateKeyError(collection, field, fields.get(field))
        return exc

    def find_by_id(self, collection: str, record_id: Optional[str]) -> Optional[Document]:
        self._unique_fields(collection)
        if record_id is None:
            return None
        with self._cursor() as cursor:
            row = cursor.execute(
                f"SELECT * FROM {collection} WHERE id = ?",
                (record_id,),
            ).fetchone()
        return self._row_to_document(row) if row else None

    def find(
        self,
        collection: str,
        criteria: Optional[Criteria] = None,
        sort: Optional[str] = None,
    ) -> List[Document]:
        self._unique_fields(collection)
        where, params = self._where(criteria or {})
        query = f"SELECT * FROM {collection}{where}"
        if sort:
            query += f" ORDER BY json_extract(document, '$.{check_name(sort)}') ASC"
        with self._cursor() as cursor:
            rows = cursor.execute(query, tuple(params)).fetchall()
        return [self._row_to_document(row) for row in rows]

    def insert(self, collection: str, fields: Mapping[str, Any]) -> str:
        self._unique_fields(collection)
        record_id = str(uuid.uuid4())
        now = _now()
        try:
            with self._cursor() as cursor:
                cursor.execute(
                    f"""
                    INSERT INTO {collection} (id, version, document, created_at, updated_at)
                    VALUES (?, 0, ?, ?, ?)
                    """,
                    (record_id, json.dumps(_strip_bookkeeping(fields)), now, now),
                )
        except sqlite3.IntegrityError as exc:
            raise self._duplicate_key(collection, fields, exc) from exc
        return record_id

    def replace(
        self,
        collection: str,
        record_id: str,
        fields: Mapping[str, Any],
        expected_version: int,
    ) -> Optional[int]:
        self._unique_fields(collection)
        try:
            with self._cursor() as cursor:
                cursor.execute(
                    f"""
                    UPDATE {collection}
                    SET document = ?, version = version + 1, updated_at = ?
                    WHERE id = ? AND version <= ?
                    """,
                    (json.dumps(_strip_bookkeeping(fields)), _now(), record_id, expected_version),
                )
                if cursor.rowcount == 0:
                    return None
                row = cursor.execute(
                    f"SELECT version FROM {collection} WHERE id = ?",
                    (record_id,),
                ).fetchone()
        except sqlite3.IntegrityError as exc:
            raise self._duplicate_key(collection, fields, exc) from exc
        return row["version"]

    def delete(self, collection: str, record_id: Optional[str]) -> bool:
        self._unique_fields(collection)
        if record_id is None:
            return False
        with self._cursor() as cursor:
            cursor.execute(f"DELETE FROM {collection} WHERE id = ?", (record_id,))
            return cursor.rowcount > 0

    def load(self, collection: str, documents: Sequence[Mapping[str, Any]]) -> None:
        self._unique_fields(collection)
        now = _now()
        with self._cursor() as cursor:
            cursor.execute(f"DELETE FROM {collection}")
            cursor.executemany(
                f"""
                INSERT INTO {collection} (id, version, document, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (doc["id"], doc.get("version", 0), json.dumps(_strip_bookkeeping(doc)), now, now)
                    for doc in documents
                ],
            )
        logger.info("Loaded %d documents into %s", len(documents), collection)


# ---------------------------------------------------------------------------
# In memory
# ---------------------------------------------------------------------------

def matches(document: Mapping[str, Any], criteria: Criteria) -> bool:
    """Evaluate ``criteria`` against a plain document."""
    for field, condition in criteria.items():
        value = document.get(field)
        if isinstance(condition, Mapping) and "$regex" in condition:
            flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
            if value is None or not re.search(condition["$regex"], str(value), flags):
                return False
        elif isinstance(condition, Mapping) and "$all" in condition:
            if not isinstance(value, list) or not all(item in value for item in condition["$all"]):
                return False
        elif value != condition:
            return False
    return True


class InMemoryDocumentStore(DocumentStore):
    """Dictionary backed store, seeded with fixture data.

    Used when ``MOCK_DB`` is enabled and in tests.  Documents are
    copied on the way in and out so callers never share state with the
    store.
    """

    def __init__(self, collections: Mapping[str, Sequence[str]] = COLLECTIONS) -> None:
        super().__init__(collections)
        self._data: Dict[str, Dict[str, Document]] = {}
        self.create_collections()

    def create_collections(self) -> None:
        for name in self.collections:
            self._data.setdefault(name, {})

    @contextmanager
    def transaction(self) -> Iterator["InMemoryDocumentStore"]:
        snapshot = copy.deepcopy(self._data)
        try:
            yield self
        except BaseException:
            logger.warning("In-memory transaction rolled back")
            self._data = snapshot
            raise

    def _check_unique(self, collection: str, fields: Mapping[str, Any], record_id: Optional[str] = None) -> None:
        for field in self._unique_fields(collection):
            value = fields.get(field)
            if value is None:
                continue
            for other_id, other in self._data[collection].items():
                if other_id != record_id and other.get(field) == value:
                    raise DuplicateKeyError(collection, field, value)

    def find_by_id(self, collection: str, record_id: Optional[str]) -> Optional[Document]:
        self._unique_fields(collection)
        document = self._data[collection].get(record_id) if record_id is not None else None
        return copy.deepcopy(document) if document is not None else None

    def find(
        self,
        collection: str,
        criteria: Optional[Criteria] = None,
        sort: Optional[str] = None,
    ) -> List[Document]:
        self._unique_fields(collection)
        found = [
            copy.deepcopy(doc)
            for doc in self._data[collection].values()
            if matches(doc, criteria or {})
        ]
        if sort:
            check_name(sort)
            # Documents without the sort field come first, like SQL NULLs.
            found.sort(key=lambda doc: (doc.get(sort) is not None, doc.get(sort) or ""))
        return found

    def insert(self, collection: str, fields: Mapping[str, Any]) -> str:
        self._check_unique(collection, fields)
        record_id = str(uuid.uuid4())
        now = _now()
        document = copy.deepcopy(_strip_bookkeeping(fields))
        document.update(id=record_id, version=0, created_at=now, updated_at=now)
        self._data[collection][record_id] = document
        return record_id

    def replace(
        self,
        collection: str,
        record_id: str,
        fields: Mapping[str, Any],
        expected_version: int,
    ) -> Optional[int]:
        self._unique_fields(collection)
        current = self._data[collection].get(record_id)
        if current is None or current["version"] > expected_version:
            return None
        self._check_unique(collection, fields, record_id)
        document = copy.deepcopy(_strip_bookkeeping(fields))
        document.update(
            id=record_id,
            version=current["version"] + 1,
            created_at=current["created_at"],
            updated_at=_now(),
        )
        self._data[collection][record_id] = document
        return document["version"]

    def delete(self, collection: str, record_id: Optional[str]) -> bool:
        self._unique_fields(collection)
        if record_id is None:
            return False
        return self._data[collection].pop(record_id, None) is not None

    def load(self, collection: str, documents: Sequence[Mapping[str, Any]]) -> None:
        self._unique_fields(collection)
        now = _now()
        self._data[collection] = {}
        for doc in documents:
            document = copy.deepcopy(dict(doc))
            document.setdefault("version", 0)
            document.update(created_at=now, updated_at=now)
            self._data[collection][document["id"]] = document


def init_db(store: DocumentStore, populate: bool = False) -> None:
    """Create the collections and optionally reload the fixture data.

    Reloading drops whatever the collections held before, which is
    what the test and demo setups want.
    """
    store.create_collections()
    if populate:
        for collection, documents in FIXTURES.items():
            store.load(collection, documents)


def create_store(settings: Settings) -> DocumentStore:
    """Build the store selected by ``settings``.

    The in‑memory store always starts with the fixture data.
    """
    if settings.mock_db:
        logger.info("Using in-memory document store")
        store: DocumentStore = InMemoryDocumentStore()
        init_db(store, populate=True)
        return store
    db_path = get_database_path(settings.database_url)
    logger.info("Using SQLite document store at %s", db_path)
    return SQLiteDocumentStore(db_path)
