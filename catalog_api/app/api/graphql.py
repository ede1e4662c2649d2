"""
GraphQL interface for songs.

The schema mirrors the REST song endpoints on top of the same
``SongService``.  Service error values are logged and raised as
``GraphQLError`` whose message is the REST error text and whose
``extensions.code`` names the error kind, e.g.::

    {"message": "Der Titel \"Mood\" existiert bereits.",
     "extensions": {"code": "TITLE_EXISTS"}}

Mounted by ``create_app`` under ``/graphql``.
"""

import logging
from typing import List, Optional

import strawberry
from graphql import GraphQLError
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from ..schemas.song import SongCreate, SongUpdate
from ..services.errors import RecordInvalid, ServiceError, is_error, message_for
from ..services.record_service import Record
from ..services.song_service import SongService

logger = logging.getLogger(__name__)

SONG_FIELDS = ("titel", "label", "produzent", "interpret", "lauflaenge", "erscheinungsdatum")


@strawberry.type
class Song:
    id: strawberry.ID
    version: int
    titel: Optional[str] = None
    label: Optional[str] = None
    produzent: Optional[str] = None
    interpret: Optional[str] = None
    lauflaenge: Optional[float] = None
    erscheinungsdatum: Optional[str] = None

    @classmethod
    def from_record(cls, record: Record) -> "Song":
        return cls(
            id=strawberry.ID(record["id"]),
            version=record["version"],
            **{name: record.get(name) for name in SONG_FIELDS},
        )


@strawberry.input
class SongInput:
    titel: Optional[str] = None
    label: Optional[str] = None
    produzent: Optional[str] = None
    interpret: Optional[str] = None
    lauflaenge: Optional[float] = None
    erscheinungsdatum: Optional[str] = None

    def to_fields(self) -> dict:
        return {name: getattr(self, name) for name in SONG_FIELDS}


def _service(info: Info) -> SongService:
    return info.context["request"].app.state.song_service


def _raise(error: ServiceError, operation: str) -> None:
    message = message_for(error, "Song")
    logger.warning("%s: %s", operation, message)
    extensions = {"code": error.kind.value}
    if isinstance(error, RecordInvalid):
        extensions["messages"] = error.messages
    raise GraphQLError(message, extensions=extensions)


@strawberry.type
class Query:
    @strawberry.field
    async def songs(self, info: Info, titel: Optional[str] = None) -> List[Song]:
        """Songs whose title matches ``titel``, or all songs."""
        query = {"titel": titel} if titel else None
        records = await _service(info).find(query)
        return [Song.from_record(record) for record in records]

    @strawberry.field
    async def song(self, info: Info, id: strawberry.ID) -> Optional[Song]:
        record = await _service(info).find_by_id(str(id))
        return Song.from_record(record) if record is not None else None


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_song(self, info: Info, song: SongInput) -> Optional[strawberry.ID]:
        """Create a song and return its id."""
        result = await _service(info).create(SongCreate.model_validate(song.to_fields()))
        if is_error(result):
            _raise(result, "createSong")
        return strawberry.ID(result)

    @strawberry.mutation
    async def update_song(self, info: Info, id: strawberry.ID, version: int, song: SongInput) -> Optional[int]:
        """Replace a song's fields and return the new version."""
        result = await _service(info).update(SongUpdate.model_validate(song.to_fields()), str(id), version)
        if is_error(result):
            _raise(result, "updateSong")
        return result

    @strawberry.mutation
    async def delete_song(self, info: Info, id: strawberry.ID) -> bool:
        return await _service(info).delete(str(id))


schema = strawberry.Schema(query=Query, mutation=Mutation)


def create_graphql_router() -> GraphQLRouter:
    return GraphQLRouter(schema)
