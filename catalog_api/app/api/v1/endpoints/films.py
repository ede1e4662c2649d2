"""
Film endpoints.

Reads are public.  Creating and replacing films requires the role
``admin`` or ``mitarbeiter``; deleting requires ``admin``.  Replacing a
film needs the current version in ``If-Match``; reads return it in
``ETag``.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from ....core.security import require_roles
from ....schemas.film import FilmCreate, FilmRead, FilmUpdate
from ....services.errors import is_error
from ....services.film_service import FilmService
from ...deps import get_film_service
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

logger = logging.getLogger(__name__)

router = APIRouter()

KIND_LABEL = "Film"


@router.get("")
async def find_films(
    request: Request,
    service: FilmService = Depends(get_film_service),
) -> Response:
    """Search films by query parameters.

    - **titel**: substring (case insensitive) or, from 10 characters
      on, the exact title.
    - **comedy**, **abenteuer**: ``true`` selects films of that genre.
    - any other film field: equality.

    Answers 404 when nothing matches.
    """
    films = await service.find(dict(request.query_params))
    if not films:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    base = collection_uri(request, "find_films")
    body = [record_body(FilmRead, film, record_links(base, film["id"], self_only=True)) for film in films]
    return JSONResponse(body)


@router.get("/{film_id}")
async def get_film_by_id(
    film_id: str,
    request: Request,
    service: FilmService = Depends(get_film_service),
) -> Response:
    """Retrieve a single film with ``ETag`` and links.

    Answers 304 when ``If-None-Match`` carries the current version.
    """
    film = await service.find_by_id(film_id)
    if film is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    current = etag(film["version"])
    if request.headers.get("if-none-match") == current:
        logger.debug("get_film_by_id(): not modified, id=%s", film_id)
        return Response(status_code=status.HTTP_304_NOT_MODIFIED)
    base = collection_uri(request, "find_films")
    body = record_body(FilmRead, film, record_links(base, film_id))
    return JSONResponse(body, headers={"ETag": current})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_film(
    request: Request,
    service: FilmService = Depends(get_film_service),
    current_user: Dict[str, Any] = Depends(require_roles("admin", "mitarbeiter")),
) -> Response:
    """Create a film; the new URI is in ``Location``."""
    film = await read_body(request, FilmCreate)
    if isinstance(film, Response):
        return film
    result = await service.create(film)
    if is_error(result):
        return error_response(result, KIND_LABEL)
    location = f"{collection_uri(request, 'find_films')}/{result}"
    return Response(status_code=status.HTTP_201_CREATED, headers={"Location": location})


@router.put("/{film_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_film(
    film_id: str,
    request: Request,
    service: FilmService = Depends(get_film_service),
    current_user: Dict[str, Any] = Depends(require_roles("admin", "mitarbeiter")),
) -> Response:
    """Replace all fields of a film.

    ``If-Match`` must carry the version read before; the new version
    comes back in ``ETag``.
    """
    rejected = check_content_type(request)
    if rejected is not None:
        return rejected
    token = version_token(request)
    if isinstance(token, Response):
        return token
    film = await read_body(request, FilmUpdate)
    if isinstance(film, Response):
        return film
    result = await service.update(film, film_id, token)
    if is_error(result):
        return error_response(result, KIND_LABEL)
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers={"ETag": etag(result)})


@router.delete("/{film_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_film(
    film_id: str,
    service: FilmService = Depends(get_film_service),
    current_user: Dict[str, Any] = Depends(require_roles("admin")),
) -> Response:
    """Delete a film (admin only).  Unknown ids are not an error."""
    await service.delete(film_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
