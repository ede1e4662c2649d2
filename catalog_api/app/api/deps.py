"""FastAPI dependencies that hand out the services built by ``create_app``."""

from fastapi import Request

from ..services.film_service import FilmService
from ..services.song_service import SongService


def get_film_service(request: Request) -> FilmService:
    return request.app.state.film_service


def get_song_service(request: Request) -> SongService:
    return request.app.state.song_service
