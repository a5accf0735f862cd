import pytest

from fastapi.testclient import TestClient

from muse.crud import genre_crud, movie_crud, pick_crud
from muse.database import get_db
from muse.main import app
from muse.model import Genre, UserPick
from muse.routers import pick_router

from tests.helpers import COMEDY, DRAMA, connection_reset, store_down


def test_health_ok(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["timestamp"]
    assert response.headers["X-Request-ID"]


def test_health_reports_unreachable_store(client):
    class BrokenSession:
        execute = staticmethod(store_down)

        def close(self):
            pass

    app.dependency_overrides[get_db] = lambda: BrokenSession()

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "error"


def test_genres_sorted_by_name(client):
    response = client.get("/genres")

    assert response.status_code == 200
    names = [g["name"] for g in response.json()["genres"]]
    assert len(names) == 19
    assert names == sorted(names)
    assert {"id": COMEDY, "name": "Comedy"} in response.json()["genres"]


def test_genres_are_cached_until_cleared(client, db):
    assert len(client.get("/genres").json()["genres"]) == 19
    db.add(Genre(id=1, name="Anime"))
    db.commit()

    assert len(client.get("/genres").json()["genres"]) == 19
    genre_crud.clear_genres_cache()
    assert len(client.get("/genres").json()["genres"]) == 20


def test_pick_returns_camel_case_movie(client, db, make_movie):
    movie = make_movie(title="Knives Out", year=2019, genre_ids=[COMEDY, DRAMA], poster_path="/knives.jpg")

    response = client.post("/pick", json={"sessionId": "abc", "filters": {"genreIds": [COMEDY]}})

    assert response.status_code == 200
    body = response.json()
    assert "message" not in body
    assert body["movie"] == {
        "id": movie.id,
        "title": "Knives Out",
        "year": 2019,
        "runtime": 110,
        "synopsis": "A film.",
        "posterUrl": "https://image.tmdb.org/t/p/w500/knives.jpg",
        "voteAverage": 7.0,
        "genres": ["Comedy", "Drama"],
    }
    assert db.query(UserPick).count() == 1


def test_pick_without_match(client, db, make_movie):
    make_movie(year=1999)

    response = client.post("/pick", json={"sessionId": "abc", "filters": {"era": "2020-now"}})

    assert response.status_code == 200
    assert response.json() == {
        "movie": None,
        "message": "No movies match your criteria. Try broader filters.",
    }
    assert db.query(UserPick).count() == 0


def test_pick_filters_are_optional(client, make_movie):
    make_movie()
    response = client.post("/pick", json={"sessionId": "abc"})
    assert response.status_code == 200
    assert response.json()["movie"]


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"filters": {}}, "Invalid session ID format."),
        ({"sessionId": "", "filters": {}}, "Invalid session ID format."),
        ({"sessionId": "x" * 256, "filters": {}}, "Invalid session ID format."),
        ({"sessionId": "abc", "filters": {"minDuration": 45}}, "minDuration must be at least 60 minutes."),
        ({"sessionId": "abc", "filters": {"maxDuration": 30}}, "maxDuration must be at least 60 minutes."),
        ({"sessionId": "abc", "filters": {"genreIds": 35}}, "genreIds must be an array."),
    ],
)
def test_pick_rejects_invalid_input(client, db, payload, message):
    response = client.post("/pick", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": message}
    assert db.query(UserPick).count() == 0


def test_pick_rejects_unknown_era(client):
    response = client.post("/pick", json={"sessionId": "abc", "filters": {"era": "1970-1979"}})

    assert response.status_code == 400
    assert "era" in response.json()["error"]


def test_pick_store_failure_is_a_server_error(client, monkeypatch):
    monkeypatch.setattr(pick_router, "pick_movie", store_down)

    response = client.post("/pick", json={"sessionId": "abc", "filters": {}})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to pick a movie. Please try again."}


def test_candidates_defaults(client, make_movie):
    for _ in range(35):
        make_movie()

    response = client.post("/candidates", json={"filters": {}})

    assert response.status_code == 200
    assert len(response.json()["movies"]) == 30


def test_candidates_exclusions(client, make_movie):
    movies = [make_movie() for _ in range(3)]
    picked = client.post("/pick", json={"sessionId": "abc", "filters": {}}).json()["movie"]["id"]

    response = client.post(
        "/candidates",
        json={"filters": {}, "limit": 10, "sessionId": "abc", "excludeMovieIds": [movies[0].id]},
    )

    assert response.status_code == 200
    expected = {m.id for m in movies} - {picked, movies[0].id}
    assert {m["id"] for m in response.json()["movies"]} == expected


def test_candidates_limit_is_bounded(client):
    response = client.post("/candidates", json={"filters": {}, "limit": 0})
    assert response.status_code == 400


def test_search_prefers_exact_title(client, make_movie):
    make_movie(title="Alien", vote_count=20_000, genre_ids=[DRAMA])
    exact = make_movie(title="Aliens", vote_count=10_000)
    make_movie(title="Aliens in the Attic", vote_count=30_000)

    response = client.get("/movies/search", params={"title": "  aliens "})

    assert response.status_code == 200
    assert response.json()["movie"]["id"] == exact.id


def test_search_falls_back_to_most_voted_partial_match(client, make_movie):
    make_movie(title="The Dark Knight Rises", vote_count=15_000)
    best = make_movie(title="The Dark Knight", vote_count=30_000, genre_ids=[DRAMA])

    response = client.get("/movies/search", params={"title": "dark kni"})

    assert response.json()["movie"]["id"] == best.id
    assert response.json()["movie"]["genres"] == ["Drama"]


def test_search_without_match(client):
    response = client.get("/movies/search", params={"title": "Nope"})
    assert response.status_code == 200
    assert response.json() == {"movie": None}


def test_search_requires_title(client):
    assert client.get("/movies/search", params={"title": "   "}).status_code == 400
    assert client.get("/movies/search").status_code == 400


def test_pick_driver_failure_keeps_error_envelope(client, db, make_movie, monkeypatch):
    make_movie()
    monkeypatch.setattr(pick_crud, "get_recent_pick_movie_ids", connection_reset)

    response = client.post("/pick", json={"sessionId": "s"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to pick a movie. Please try again."}
    assert db.query(UserPick).count() == 0


def test_candidates_driver_failure_keeps_error_envelope(client, monkeypatch):
    monkeypatch.setattr(movie_crud, "get_candidate_movies", connection_reset)

    response = client.post("/candidates", json={"filters": {}})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch candidates."}


def test_search_driver_failure_keeps_error_envelope(client, monkeypatch):
    monkeypatch.setattr(movie_crud, "search_by_title", connection_reset)

    response = client.get("/movies/search", params={"title": "Alien"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to search for movie."}


def test_unexpected_failure_is_json(client, monkeypatch):
    monkeypatch.setattr(genre_crud, "list_genres", connection_reset)

    response = TestClient(app, raise_server_exceptions=False).get("/genres")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error."}
