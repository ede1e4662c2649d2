"""
Pydantic models for film data.

``FilmBase`` holds the fields exchanged via the API.  Every field is
optional at the wire level: required fields and allowed values are
checked by ``validate_film`` so that all violations can be reported in
one response.  ``FilmCreate`` and ``FilmUpdate`` are the request
bodies, ``FilmRead`` the response body with HATEOAS links.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import Links

MAX_RATING = 5


class FilmArt(str, Enum):
    BLUERAY = "BlueRay"
    DOWNLOAD = "Download"
    DVD = "DVD"
    VHS = "VHS"


class Studio(str, Enum):
    PARAMOUNT_PICTURES = "ParamountPictures"
    PIXAR = "Pixar"
    SONY_PICTURES = "SonyPictures"
    UNIVERSAL_PICTURES = "UniversalPictures"
    WARNER_BROS = "WarnerBros"


class Darsteller(BaseModel):
    nachname: Optional[str] = None
    vorname: Optional[str] = None


class FilmBase(BaseModel):
    titel: Optional[str] = Field(None, examples=["Die nackte Kanone"])
    rating: Optional[int] = Field(None, examples=[5])
    art: Optional[str] = Field(None, examples=["DVD"])
    studio: Optional[str] = Field(None, examples=["ParamountPictures"])
    preis: Optional[float] = Field(None, examples=[10.95])
    rabatt: Optional[float] = Field(None, examples=[0.1])
    lieferbar: Optional[bool] = None
    # Kept as text; the validator checks for an ISO-8601 date.
    datum: Optional[str] = Field(None, examples=["1989-04-27"])
    isan: Optional[str] = Field(None, examples=["0-0070-0644-6"])
    regisseur: Optional[str] = None
    genre: List[str] = Field(default_factory=list, examples=[["COMEDY"]])
    darsteller: List[Darsteller] = Field(default_factory=list)


class FilmCreate(FilmBase):
    """Schema for creating a film."""
    pass


class FilmUpdate(FilmBase):
    """Schema for replacing a film.

    A PUT replaces all fields; fields left out are stored as empty.
    """
    pass


class FilmRead(FilmBase):
    """Schema for reading a film from the REST API.

    ``id`` and ``version`` are not part of the body: the id is in the
    links, the version in the ``ETag`` header.
    """

    links: Links = Field(..., serialization_alias="_links")
