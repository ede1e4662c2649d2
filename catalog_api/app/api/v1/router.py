"""
Top‑level router of the REST API.

Aggregates the routers of all record kinds.  ``create_app`` mounts it
under ``/api``.
"""

from fastapi import APIRouter

from .endpoints import auth, films, songs

router = APIRouter()

router.include_router(films.router, prefix="/filme", tags=["filme"])
router.include_router(songs.router, prefix="/songs", tags=["songs"])
# Defines its own "/login" path.
router.include_router(auth.router, tags=["auth"])
