import pytest

from catalog_api.app.core.db import DuplicateKeyError
from catalog_api.app.schemas.film import FilmCreate, FilmUpdate
from catalog_api.app.services.errors import (
    IsanExists,
    RecordInvalid,
    RecordNotFound,
    TitleExists,
    VersionInvalid,
    VersionOutdated,
)
from catalog_api.app.services.film_service import FilmService

FILM_1 = "00000000-0000-0000-0000-000000000001"
FILM_3 = "00000000-0000-0000-0000-000000000003"


def neu(**overrides):
    data = {
        "titel": "Neu",
        "rating": 2,
        "art": "DVD",
        "studio": "WarnerBros",
        "preis": 99.99,
        "rabatt": 0.099,
        "lieferbar": True,
        "datum": "2016-02-28",
        "isan": "0-0070-0644-6",
        "regisseur": "Max Mustermann",
        "genre": ["COMEDY"],
        "darsteller": [{"nachname": "Musterfrau", "vorname": "Erika"}],
    }
    data.update(overrides)
    return data


def kanone(**overrides):
    data = neu(titel="Die nackte Kanone", isan="978-3-897-22583-1", art="DVD", studio="ParamountPictures")
    data.update(overrides)
    return FilmUpdate(**data)


@pytest.fixture
def service(store, mailer):
    return FilmService(store, mailer)


def titles(records):
    return [record["titel"] for record in records]


# ---------------------------------------------------------------------------
# find
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_find_all(service):
    films = await service.find()
    assert len(films) == 5
    assert titles(films) == sorted(titles(films))
    assert all("created_at" not in film and "updated_at" not in film for film in films)


@pytest.mark.asyncio
async def test_find_titel_substring_ignores_case(service):
    assert titles(await service.find({"titel": "AN"})) == ["Die nackte Kanone", "Im einem Land vor unserer Zeit"]


@pytest.mark.asyncio
async def test_find_titel_is_literal(service):
    assert await service.find({"titel": "."}) == []
    assert await service.find({"titel": "D.*"}) == []


@pytest.mark.asyncio
async def test_find_long_titel_is_exact(service):
    assert titles(await service.find({"titel": "Die nackte Kanone"})) == ["Die nackte Kanone"]
    assert await service.find({"titel": "nackte Kanone"}) == []


@pytest.mark.asyncio
async def test_find_by_genre_flags(service):
    assert titles(await service.find({"comedy": "true"})) == ["Die nackte Kanone", "Inside Out"]
    assert titles(await service.find({"abenteuer": "true"})) == ["Blood Diamond", "Im einem Land vor unserer Zeit"]
    assert await service.find({"comedy": "true", "abenteuer": "true"}) == []
    assert len(await service.find({"comedy": "false"})) == 5


@pytest.mark.asyncio
async def test_find_coerces_numbers(service):
    assert titles(await service.find({"rating": "3"})) == ["Blood Diamond", "Der Pate"]
    assert titles(await service.find({"preis": "5.49"})) == ["Im einem Land vor unserer Zeit"]
    assert len(await service.find({"lieferbar": "true"})) == 5
    assert await service.find({"rating": "drei"}) == []


@pytest.mark.asyncio
async def test_find_by_id_and_version_parameters(service):
    assert titles(await service.find({"id": FILM_1})) == ["Die nackte Kanone"]
    assert len(await service.find({"version": "0"})) == 5
    assert await service.find({"version": "1"}) == []


@pytest.mark.asyncio
async def test_find_ignores_plain_genre_parameter(service):
    assert len(await service.find({"genre": "COMEDY"})) == 5
    assert titles(await service.find({"genre": "COMEDY", "comedy": "true"})) == ["Die nackte Kanone", "Inside Out"]


@pytest.mark.asyncio
async def test_find_by_id(service):
    film = await service.find_by_id(FILM_1)
    assert film["titel"] == "Die nackte Kanone"
    assert film["version"] == 0
    assert "created_at" not in film
    assert await service.find_by_id("kein-film") is None
    assert await service.find_by_id(None) is None


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create(service, mailer):
    record_id = await service.create(FilmCreate(**neu()))
    assert isinstance(record_id, str)
    film = await service.find_by_id(record_id)
    assert film["version"] == 0
    assert film["titel"] == "Neu"
    assert mailer.sent == [
        (f"Neuer Film {record_id}", "Der Film mit dem Titel <strong>Neu</strong> ist angelegt")
    ]


@pytest.mark.asyncio
async def test_create_invalid(service, mailer):
    result = await service.create(FilmCreate(**neu(rating=9, art="Kino")))
    assert isinstance(result, RecordInvalid)
    assert set(result.messages) == {"rating", "art"}
    assert mailer.sent == []


@pytest.mark.asyncio
async def test_create_existing_titel(service):
    result = await service.create(FilmCreate(**neu(titel="Die nackte Kanone")))
    assert result == TitleExists("Die nackte Kanone", FILM_1)


@pytest.mark.asyncio
async def test_create_existing_isan(service):
    result = await service.create(FilmCreate(**neu(isan="0-201-63361-2")))
    assert result == IsanExists("0-201-63361-2", FILM_3)


@pytest.mark.asyncio
async def test_create_race_on_titel(service, monkeypatch):
    # The pre-check misses the concurrent insert, the unique index catches it.
    monkeypatch.setattr(service, "_find_by_titel", lambda titel: None)
    result = await service.create(FilmCreate(**neu(titel="Der Pate")))
    assert result == TitleExists("Der Pate", FILM_3)


@pytest.mark.asyncio
async def test_create_ignores_mail_errors(store, failing_mailer):
    service = FilmService(store, failing_mailer)
    record_id = await service.create(FilmCreate(**neu()))
    assert await service.find_by_id(record_id) is not None


# ---------------------------------------------------------------------------
# update
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update(service):
    assert await service.update(kanone(rating=1), FILM_1, "0") == 1
    film = await service.find_by_id(FILM_1)
    assert film["rating"] == 1
    assert film["version"] == 1
    assert await service.update(kanone(rating=2), FILM_1, " 1 ") == 2


@pytest.mark.asyncio
async def test_update_with_newer_version_increments_by_one(service):
    assert await service.update(kanone(), FILM_1, "7") == 1


@pytest.mark.asyncio
async def test_update_outdated(service):
    assert await service.update(kanone(), FILM_1, "0") == 1
    assert await service.update(kanone(), FILM_1, "0") == VersionOutdated(FILM_1, 0)
    assert await service.update(kanone(), FILM_1, "-1") == VersionOutdated(FILM_1, -1)


@pytest.mark.asyncio
async def test_update_invalid_version(service):
    assert await service.update(kanone(), FILM_1, "abc") == VersionInvalid("abc")
    assert await service.update(kanone(), FILM_1, None) == VersionInvalid(None)


@pytest.mark.asyncio
async def test_update_invalid_fields(service):
    result = await service.update(kanone(studio="Ufa"), FILM_1, "0")
    assert isinstance(result, RecordInvalid)
    assert "studio" in result.messages


@pytest.mark.asyncio
async def test_update_not_found(service):
    assert await service.update(kanone(titel="Neu"), "kein-film", "0") == RecordNotFound("kein-film")
    assert await service.update(kanone(titel="Neu"), None, "0") == RecordNotFound(None)


@pytest.mark.asyncio
async def test_update_to_titel_of_other_film(service):
    result = await service.update(kanone(titel="Der Pate"), FILM_1, "0")
    assert result == TitleExists("Der Pate", FILM_3)


@pytest.mark.asyncio
async def test_update_to_isan_of_other_film(service):
    result = await service.update(kanone(isan="0-201-63361-2"), FILM_1, "0")
    assert result == IsanExists("0-201-63361-2", FILM_3)


@pytest.mark.asyncio
async def test_update_loses_race(service, monkeypatch):
    # Another update bumps the version between the check and the write.
    monkeypatch.setattr(service.store, "replace", lambda *args: None)
    assert await service.update(kanone(), FILM_1, "0") == VersionOutdated(FILM_1, 0)


@pytest.mark.asyncio
async def test_update_maps_duplicate_key(service, monkeypatch):
    def replace(*args):
        raise DuplicateKeyError("filme", "titel", "Der Pate")

    monkeypatch.setattr(service.store, "replace", replace)
    assert await service.update(kanone(), FILM_1, "0") == TitleExists("Der Pate", FILM_3)


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_delete(service):
    assert await service.delete(FILM_1) is True
    assert await service.find_by_id(FILM_1) is None
    assert await service.delete(FILM_1) is False
