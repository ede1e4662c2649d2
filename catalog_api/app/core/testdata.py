"""
Fixture films and songs.

Loaded on startup when ``DB_POPULATE`` is set and always used by the
in‑memory store.  The ids are fixed so that tests and demos can refer
to them.
"""

FILME = [
    {
        "id": "00000000-0000-0000-0000-000000000001",
        "version": 0,
        "titel": "Die nackte Kanone",
        "rating": 5,
        "art": "DVD",
        "studio": "ParamountPictures",
        "preis": 10.95,
        "rabatt": 0.7,
        "lieferbar": True,
        "datum": "1989-04-27",
        "isan": "978-3-897-22583-1",
        "regisseur": "David Zucker",
        "genre": ["COMEDY"],
        "darsteller": [
            {"nachname": "Nielsen", "vorname": "Leslie"},
            {"nachname": "Simpson", "vorname": "O.J."},
        ],
    },
    {
        "id": "00000000-0000-0000-0000-000000000002",
        "version": 0,
        "titel": "Im einem Land vor unserer Zeit",
        "rating": 4,
        "art": "VHS",
        "studio": "UniversalPictures",
        "preis": 5.49,
        "rabatt": 0.1,
        "lieferbar": True,
        "datum": "1989-06-22",
        "isan": "3-8273-7019-1",
        "regisseur": "Don Bluth",
        "genre": ["ABENTEUER"],
        "darsteller": [
            {"nachname": "Foot", "vorname": "Little"},
            {"nachname": "Zahn", "vorname": "Raff"},
        ],
    },
    {
        "id": "00000000-0000-0000-0000-000000000003",
        "version": 0,
        "titel": "Der Pate",
        "rating": 3,
        "art": "VHS",
        "studio": "ParamountPictures",
        "preis": 7.95,
        "rabatt": 0.5,
        "lieferbar": True,
        "datum": "1972-03-02",
        "isan": "0-201-63361-2",
        "regisseur": "Francis Ford Coppola",
        "genre": ["DRAMA"],
        "darsteller": [
            {"nachname": "Brando", "vorname": "Marlon"},
            {"nachname": "Pacino", "vorname": "Al"},
        ],
    },
    {
        "id": "00000000-0000-0000-0000-000000000004",
        "version": 0,
        "titel": "Blood Diamond",
        "rating": 3,
        "art": "DVD",
        "studio": "WarnerBros",
        "preis": 5.1,
        "rabatt": 0.1,
        "lieferbar": True,
        "datum": "2007-01-25",
        "isan": "978-0-13-468599-1",
        "regisseur": "Edward Zwick",
        "genre": ["ACTION", "ABENTEUER"],
        "darsteller": [
            {"nachname": "DiCaprio", "vorname": "Leonardo"},
            {"nachname": "Hounsou", "vorname": "Djimon"},
        ],
    },
    {
        "id": "00000000-0000-0000-0000-000000000005",
        "version": 0,
        "titel": "Inside Out",
        "rating": 2,
        "art": "BlueRay",
        "studio": "Pixar",
        "preis": 12.95,
        "rabatt": 0.08,
        "lieferbar": True,
        "datum": "2015-05-18",
        "isan": "0-596-52068-9",
        "regisseur": "Pete Docter",
        "genre": ["ANIMATION", "COMEDY"],
        "darsteller": [
            {"nachname": "Poehler", "vorname": "Amy"},
            {"nachname": "Smith", "vorname": "Phyllis"},
        ],
    },
]

SONGS = [
    {
        "id": "00000000-0000-0000-0000-000000000001",
        "version": 0,
        "titel": "Mood",
        "label": "SONY_MUSIC",
        "produzent": "John Williams",
        "interpret": "ZUGEZOGENMASKULIN",
        "lauflaenge": 2.3,
        "erscheinungsdatum": "2020-02-01",
    },
    {
        "id": "00000000-0000-0000-0000-000000000002",
        "version": 0,
        "titel": "Positions",
        "label": "ROADRUNNER_RECORDS",
        "produzent": "Quincy Jones",
        "interpret": "ZUGEZOGENMASKULIN",
        "lauflaenge": 3.02,
        "erscheinungsdatum": "2020-03-21",
    },
    {
        "id": "00000000-0000-0000-0000-000000000003",
        "version": 0,
        "titel": "Blinding Lights",
        "label": "SONY_MUSIC",
        "produzent": "George Martin",
        "interpret": "DENDEMANN",
        "lauflaenge": 2.45,
        "erscheinungsdatum": "2020-10-10",
    },
    {
        "id": "00000000-0000-0000-0000-000000000004",
        "version": 0,
        "titel": "Kings & Queens",
        "label": "UNIVERSAL_MUSIC",
        "produzent": "Berry Gordy",
        "interpret": "FIVEFINGERDEATHPUNCH",
        "lauflaenge": 3.15,
        "erscheinungsdatum": "2020-04-01",
    },
    {
        "id": "00000000-0000-0000-0000-000000000005",
        "version": 0,
        "titel": "Lonely",
        "label": "BETTERNOISE_MUSIC",
        "produzent": "Nile Rodgers",
        "interpret": "TRIVIUM",
        "lauflaenge": 2.56,
        "erscheinungsdatum": "2020-07-21",
    },
]

FIXTURES = {
    "filme": FILME,
    "songs": SONGS,
}
