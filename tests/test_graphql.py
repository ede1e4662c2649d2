SONG_1 = "00000000-0000-0000-0000-000000000001"

SONG_INPUT = (
    '{titel: "%s", label: "SONY_MUSIC", produzent: "Rick Rubin", '
    'interpret: "TRIVIUM", lauflaenge: 3.5, erscheinungsdatum: "2021-01-01"}'
)


def graphql(client, query):
    response = client.post("/graphql", json={"query": query})
    assert response.status_code == 200
    return response.json()


def test_songs(client):
    result = graphql(client, '{ songs(titel: "o") { titel version } }')
    assert [song["titel"] for song in result["data"]["songs"]] == ["Lonely", "Mood", "Positions"]


def test_all_songs(client):
    result = graphql(client, "{ songs { id } }")
    assert len(result["data"]["songs"]) == 5


def test_song(client):
    result = graphql(client, '{ song(id: "%s") { id titel interpret } }' % SONG_1)
    assert result["data"]["song"] == {"id": SONG_1, "titel": "Mood", "interpret": "ZUGEZOGENMASKULIN"}


def test_song_not_found(client):
    assert graphql(client, '{ song(id: "kein-song") { titel } }')["data"]["song"] is None


def test_create_song(client):
    result = graphql(client, "mutation { createSong(song: %s) }" % (SONG_INPUT % "Neu"))
    record_id = result["data"]["createSong"]
    assert graphql(client, '{ song(id: "%s") { titel version } }' % record_id)["data"]["song"] == {
        "titel": "Neu",
        "version": 0,
    }


def test_create_song_with_existing_titel(client):
    result = graphql(client, "mutation { createSong(song: %s) }" % (SONG_INPUT % "Mood"))
    assert result["data"]["createSong"] is None
    [error] = result["errors"]
    assert error["extensions"]["code"] == "TITLE_EXISTS"
    assert "Mood" in error["message"]


def test_create_invalid_song(client):
    result = graphql(client, 'mutation { createSong(song: {titel: "Neu"}) }')
    [error] = result["errors"]
    assert error["extensions"]["code"] == "RECORD_INVALID"
    assert set(error["extensions"]["messages"]) == {"label", "produzent", "interpret"}


def test_update_song(client):
    mutation = 'mutation { updateSong(id: "%s", version: %d, song: %s) }'
    result = graphql(client, mutation % (SONG_1, 0, SONG_INPUT % "Mood"))
    assert result["data"]["updateSong"] == 1

    result = graphql(client, mutation % (SONG_1, 0, SONG_INPUT % "Mood"))
    assert result["data"]["updateSong"] is None
    assert result["errors"][0]["extensions"]["code"] == "VERSION_OUTDATED"


def test_update_unknown_song(client):
    mutation = 'mutation { updateSong(id: "kein-song", version: 0, song: %s) }' % (SONG_INPUT % "Neu")
    result = graphql(client, mutation)
    assert result["errors"][0]["extensions"]["code"] == "RECORD_NOT_FOUND"


def test_delete_song(client):
    assert graphql(client, 'mutation { deleteSong(id: "%s") }' % SONG_1)["data"]["deleteSong"] is True
    assert graphql(client, 'mutation { deleteSong(id: "%s") }' % SONG_1)["data"]["deleteSong"] is False
