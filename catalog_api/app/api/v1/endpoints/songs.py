"""
Song endpoints, same contract as the film endpoints.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from ....core.security import require_roles
from ....schemas.song import SongCreate, SongRead, SongUpdate
from ....services.errors import is_error
from ....services.song_service import SongService
from ...deps import get_song_service
from ..responses import (
    check_content_type,
    collection_uri,
    error_response,
    etag,
    read_body,
    record_body,
    record_links,
    version_token,
)

router = APIRouter()

KIND_LABEL = "Song"


@router.get("")
async def find_songs(
    request: Request,
    service: SongService = Depends(get_song_service),
) -> Response:
    """Search songs by query parameters; 404 when nothing matches."""
    songs = await service.find(dict(request.query_params))
    if not songs:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    base = collection_uri(request, "find_songs")
    return JSONResponse(
        [record_body(SongRead, song, record_links(base, song["id"], self_only=True)) for song in songs]
    )


@router.get("/{song_id}")
async def get_song_by_id(
    song_id: str,
    request: Request,
    service: SongService = Depends(get_song_service),
) -> Response:
    song = await service.find_by_id(song_id)
    if song is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    current = etag(song["version"])
    if request.headers.get("if-none-match") == current:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED)
    base = collection_uri(request, "find_songs")
    return JSONResponse(record_body(SongRead, song, record_links(base, song_id)), headers={"ETag": current})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_song(
    request: Request,
    service: SongService = Depends(get_song_service),
    current_user: Dict[str, Any] = Depends(require_roles("admin", "mitarbeiter")),
) -> Response:
    song = await read_body(request, SongCreate)
    if isinstance(song, Response):
        return song
    result = await service.create(song)
    if is_error(result):
        return error_response(result, KIND_LABEL)
    location = f"{collection_uri(request, 'find_songs')}/{result}"
    return Response(status_code=status.HTTP_201_CREATED, headers={"Location": location})


@router.put("/{song_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_song(
    song_id: str,
    request: Request,
    service: SongService = Depends(get_song_service),
    current_user: Dict[str, Any] = Depends(require_roles("admin", "mitarbeiter")),
) -> Response:
    rejected = check_content_type(request)
    if rejected is not None:
        return rejected
    token = version_token(request)
    if isinstance(token, Response):
        return token
    song = await read_body(request, SongUpdate)
    if isinstance(song, Response):
        return song
    result = await service.update(song, song_id, token)
    if is_error(result):
        return error_response(result, KIND_LABEL)
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers={"ETag": etag(result)})


@router.delete("/{song_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_song(
    song_id: str,
    service: SongService = Depends(get_song_service),
    current_user: Dict[str, Any] = Depends(require_roles("admin")),
) -> Response:
    await service.delete(song_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
