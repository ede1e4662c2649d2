"""
Field validation for films and songs.

The validators collect every violation instead of stopping at the
first one.  They return ``None`` for a valid record or a mapping from
field name to a human readable message (German, as shown to the
catalog's users).
"""

import logging
import re
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Type

from ..schemas.film import MAX_RATING, FilmArt, FilmBase, Studio
from ..schemas.song import Interpret, Label, SongBase

logger = logging.getLogger(__name__)

ValidationErrorMsg = Dict[str, str]

_WORD_START = re.compile(r"^\w", re.UNICODE)
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}(T.+)?$")


def _blank(value: Optional[str]) -> bool:
    return value is None or value == ""


def _one_of(enum: Type[Enum]) -> str:
    values = [member.value for member in enum]
    return f"{', '.join(values[:-1])} oder {values[-1]}"


def is_iso_date(value: str) -> bool:
    """True for an ISO-8601 date such as ``2020-02-01``.

    A time part (``2020-02-01T12:00:00Z``) is accepted as well.
    """
    if not _ISO_DATE.match(value):
        return False
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_valid_isan(value: str) -> bool:
    """Check the ISBN style checksum used for the film number.

    Hyphens and spaces are ignored.  Ten digits (the last may be ``X``)
    use the modulo 11 checksum, thirteen digits the alternating 1/3
    weights modulo 10.
    """
    digits = value.replace("-", "").replace(" ", "").upper()
    if len(digits) == 10 and digits[:9].isdigit() and (digits[9].isdigit() or digits[9] == "X"):
        total = sum((10 - i) * int(d) for i, d in enumerate(digits[:9]))
        total += 10 if digits[9] == "X" else int(digits[9])
        return total % 11 == 0
    if len(digits) == 13 and digits.isdigit():
        total = sum(int(d) * (1 if i % 2 == 0 else 3) for i, d in enumerate(digits))
        return total % 10 == 0
    return False


def _check_titel(titel: Optional[str], err: ValidationErrorMsg, missing: str, bad_start: str) -> None:
    if _blank(titel):
        err["titel"] = missing
    elif not _WORD_START.match(titel):
        err["titel"] = bad_start


def validate_film(film: FilmBase) -> Optional[ValidationErrorMsg]:
    err: ValidationErrorMsg = {}

    _check_titel(
        film.titel,
        err,
        "Ein Film muss einen Titel haben.",
        "Ein Filmtitel muss mit einem Buchstaben, einer Ziffer oder _ beginnen.",
    )

    if film.rating is not None and not 0 <= film.rating <= MAX_RATING:
        err["rating"] = f"Eine Bewertung muss zwischen 0 und {MAX_RATING} liegen."

    if _blank(film.art):
        err["art"] = "Die Art eines Filmes muss gesetzt sein."
    elif film.art not in {member.value for member in FilmArt}:
        err["art"] = f"Die Art eines Filmes muss {_one_of(FilmArt)} sein."

    if _blank(film.studio):
        err["studio"] = "Das Studio eines Filmes muss gesetzt sein."
    elif film.studio not in {member.value for member in Studio}:
        err["studio"] = (
            "Der Studio eines Filmes muss ParamountPictures, Pixar, SonyPictures, "
            "UniversalPictures, WarnerBros sein."
        )

    if film.datum is not None and not is_iso_date(film.datum):
        err["datum"] = "Das Datum muss im Format yyyy-MM-dd sein."

    # A film without number is fine; an empty one is not.
    if film.isan is not None:
        if film.isan.strip() == "":
            err["isan"] = "Die ISAN-Nummer darf nicht leer sein."
        elif not is_valid_isan(film.isan):
            err["isan"] = "Die ISAN-Nummer ist nicht korrekt."

    logger.debug("validate_film: err=%s", err)
    return err or None


def validate_song(song: SongBase) -> Optional[ValidationErrorMsg]:
    err: ValidationErrorMsg = {}

    _check_titel(
        song.titel,
        err,
        "Ein Song muss einen Titel haben.",
        "Ein Songtitel muss mit einem Buchstaben, einer Ziffer oder _ beginnen.",
    )

    if _blank(song.label):
        err["label"] = "Das Label eines Songs muss gesetzt sein"
    elif song.label not in {member.value for member in Label}:
        err["label"] = (
            "Das Label eines Songs muss SONY_MUSIC, ROADRUNNER_RECORDS, "
            "BETTERNOISE_MUSIC oder UNIVERSAL_MUSIC sein."
        )

    if _blank(song.produzent):
        err["produzent"] = "Ein Song muss einen Produzenten haben."
    elif not _WORD_START.match(song.produzent):
        err["produzent"] = "Ein Produzent muss mit einem Buchstaben, einer Ziffer oder _ beginnen."

    if _blank(song.interpret):
        err["interpret"] = "Der Interpret eines Songs muss gesetzt sein"
    elif song.interpret not in {member.value for member in Interpret}:
        err["interpret"] = (
            "Der Interpret eines Songs muss TRIVIUM, FIVEFINGERDEATHPUNCH, "
            "ZUGEZOGENMASKULIN oder DENDEMANN sein."
        )

    if song.erscheinungsdatum is not None and not is_iso_date(song.erscheinungsdatum):
        err["erscheinungsdatum"] = (
            f"'{song.erscheinungsdatum}' ist kein gueltiges Datum (yyyy-MM-dd)."
        )

    logger.debug("validate_song: err=%s", err)
    return err or None
