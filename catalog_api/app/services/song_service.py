"""Song specific parts of the record workflows."""

from typing import Dict, Optional

from ..schemas.song import SongBase
from .record_service import RecordService
from .validation import validate_song


class SongService(RecordService):
    collection = "songs"
    kind_label = "Song"
    field_types = {"lauflaenge": float}

    def validate(self, candidate: SongBase) -> Optional[Dict[str, str]]:
        return validate_song(candidate)
