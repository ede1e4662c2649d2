"""Film specific parts of the record workflows."""

import logging
from typing import Any, Dict, Mapping, Optional

from ..schemas.film import FilmBase
from .record_service import RecordService, to_bool
from .validation import validate_film

logger = logging.getLogger(__name__)

# Search flags that select films by genre.
GENRE_FLAGS = {
    "comedy": "COMEDY",
    "abenteuer": "ABENTEUER",
}


class FilmService(RecordService):
    """Films are unique by title and, if set, by ISAN."""

    collection = "filme"
    kind_label = "Film"
    secondary_key = "isan"
    field_types = {
        "rating": int,
        "preis": float,
        "rabatt": float,
        "lieferbar": to_bool,
    }

    def validate(self, candidate: FilmBase) -> Optional[Dict[str, str]]:
        return validate_film(candidate)

    def build_criteria(self, query: Mapping[str, Any]) -> Dict[str, Any]:
        """Add genre selection to the generic criteria.

        ``comedy=true`` and ``abenteuer=true`` require the respective
        genre; both together require both.  Other values of the flags
        are ignored, and so is a plain ``genre`` parameter.
        """
        remaining = dict(query)
        if remaining.pop("genre", None) is not None:
            logger.debug("FilmService.build_criteria(): ignoring genre, use the genre flags")
        genres = [
            genre
            for flag, genre in GENRE_FLAGS.items()
            if str(remaining.pop(flag, "")).lower() == "true"
        ]
        criteria = super().build_criteria(remaining)
        if genres:
            criteria["genre"] = {"$all": genres}
        return criteria
