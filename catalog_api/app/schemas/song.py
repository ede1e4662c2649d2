"""
Pydantic models for song data.

Like the film schemas, all fields are optional at the wire level and
checked by ``validate_song``.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .common import Links


class Label(str, Enum):
    SONY_MUSIC = "SONY_MUSIC"
    ROADRUNNER_RECORDS = "ROADRUNNER_RECORDS"
    BETTERNOISE_MUSIC = "BETTERNOISE_MUSIC"
    UNIVERSAL_MUSIC = "UNIVERSAL_MUSIC"


class Interpret(str, Enum):
    TRIVIUM = "TRIVIUM"
    FIVEFINGERDEATHPUNCH = "FIVEFINGERDEATHPUNCH"
    ZUGEZOGENMASKULIN = "ZUGEZOGENMASKULIN"
    DENDEMANN = "DENDEMANN"


class SongBase(BaseModel):
    titel: Optional[str] = Field(None, examples=["Mood"])
    label: Optional[str] = Field(None, examples=["SONY_MUSIC"])
    produzent: Optional[str] = Field(None, examples=["John Williams"])
    interpret: Optional[str] = Field(None, examples=["ZUGEZOGENMASKULIN"])
    lauflaenge: Optional[float] = Field(None, examples=[2.3])
    erscheinungsdatum: Optional[str] = Field(None, examples=["2020-02-01"])


class SongCreate(SongBase):
    pass


class SongUpdate(SongBase):
    pass


class SongRead(SongBase):
    links: Links = Field(..., serialization_alias="_links")
