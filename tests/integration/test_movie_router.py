import pytest
from httpx import AsyncClient

MOVIES_URL = "/api/v1/movies"

NEW_MOVIE = {
    "title": "  Arrival ",
    "genres": ["Drama", "Sci-Fi", "Drama"],
    "release_year": 2016,
    "director": "Denis Villeneuve",
    "cast": ["Amy Adams", " ", "Jeremy Renner"],
    "synopsis": "A linguist works with the military to communicate with alien lifeforms.",
    "poster_url": "https://example.com/arrival.jpg",
    "runtime": 116,
}


@pytest.mark.asyncio
async def test_admin_creates_movie(client: AsyncClient, make_user, auth_headers):
    admin = make_user("admin", is_admin=True)

    response = await client.post(f"{MOVIES_URL}/", json=NEW_MOVIE, headers=auth_headers(admin))

    assert response.status_code == 201
    movie = response.json()["movie"]
    assert movie["title"] == "Arrival"
    assert movie["genres"] == ["Drama", "Sci-Fi"]
    assert movie["cast"] == ["Amy Adams", "Jeremy Renner"]
    assert movie["formatted_runtime"] == "1h 56m"
    assert movie["total_reviews"] == 0


@pytest.mark.asyncio
async def test_non_admin_cannot_create_movie(client: AsyncClient, make_user, auth_headers):
    alice = make_user("alice")

    response = await client.post(f"{MOVIES_URL}/", json=NEW_MOVIE, headers=auth_headers(alice))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_movie_validation(client: AsyncClient, make_user, auth_headers):
    admin = make_user("admin", is_admin=True)

    response = await client.post(
        f"{MOVIES_URL}/",
        json={**NEW_MOVIE, "genres": ["Noir"], "release_year": 1700},
        headers=auth_headers(admin),
    )

    assert response.status_code == 422
    assert response.json()["error"] == "Validation Error"


@pytest.mark.asyncio
async def test_update_movie_replaces_genres(client: AsyncClient, make_user, make_movie, auth_headers):
    admin = make_user("admin", is_admin=True)
    movie = make_movie()

    response = await client.put(
        f"{MOVIES_URL}/{movie.movie_id}",
        json={"genres": ["Thriller"], "trending": True},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    updated = response.json()["movie"]
    assert updated["genres"] == ["Thriller"]
    assert updated["trending"] is True
    assert updated["title"] == "Inception"


@pytest.mark.asyncio
async def test_list_movies_filters_and_pagination(client: AsyncClient, make_movie):
    make_movie("Inception", genres=("Action", "Sci-Fi"), release_year=2010)
    make_movie("Memento", genres=("Mystery", "Thriller"), release_year=2000)
    make_movie("Interstellar", genres=("Adventure", "Sci-Fi"), release_year=2014)

    response = await client.get(f"{MOVIES_URL}/", params={"genre": "Sci-Fi", "sort": "title", "order": "asc"})
    data = response.json()
    assert [movie["title"] for movie in data["movies"]] == ["Inception", "Interstellar"]
    assert data["pagination"]["total_items"] == 2

    response = await client.get(f"{MOVIES_URL}/", params={"year": 2000})
    assert [movie["title"] for movie in response.json()["movies"]] == ["Memento"]

    response = await client.get(f"{MOVIES_URL}/", params={"search": "inter"})
    assert [movie["title"] for movie in response.json()["movies"]] == ["Interstellar"]

    response = await client.get(f"{MOVIES_URL}/", params={"limit": 2, "page": 2})
    pagination = response.json()["pagination"]
    assert len(response.json()["movies"]) == 1
    assert pagination["total_pages"] == 2
    assert pagination["has_next_page"] is False
    assert pagination["has_prev_page"] is True


@pytest.mark.asyncio
async def test_list_movies_rejects_unknown_genre(client: AsyncClient):
    response = await client.get(f"{MOVIES_URL}/", params={"genre": "Action,Noir"})

    assert response.status_code == 422
    assert "Noir" in response.json()["message"]


@pytest.mark.asyncio
async def test_featured_and_trending(client: AsyncClient, make_movie):
    make_movie("Inception", featured=True)
    make_movie("Memento", trending=True)

    featured = await client.get(f"{MOVIES_URL}/featured")
    trending = await client.get(f"{MOVIES_URL}/trending")

    assert [movie["title"] for movie in featured.json()] == ["Inception"]
    assert [movie["title"] for movie in trending.json()] == ["Memento"]


@pytest.mark.asyncio
async def test_get_movie_not_found_and_bad_id(client: AsyncClient):
    response = await client.get(f"{MOVIES_URL}/{'d' * 24}")
    assert response.status_code == 404
    assert response.json()["error"] == "Not Found"
    assert "request_id" in response.json()

    response = await client.get(f"{MOVIES_URL}/not-an-id")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_delete_movie_recomputes_author_aggregates(
    client: AsyncClient, make_user, make_movie, auth_headers
):
    admin = make_user("admin", is_admin=True)
    alice = make_user("alice")
    inception = make_movie("Inception")
    memento = make_movie("Memento")
    for movie, rating in ((inception, 2), (memento, 5)):
        await client.post(
            "/api/v1/reviews/",
            json={"movie_id": movie.movie_id, "rating": rating, "review_text": "Solid film, good pacing."},
            headers=auth_headers(alice),
        )
    await client.post(
        "/api/v1/watchlist/", json={"movie_id": inception.movie_id}, headers=auth_headers(alice)
    )

    response = await client.delete(f"{MOVIES_URL}/{inception.movie_id}", headers=auth_headers(admin))
    assert response.status_code == 200

    assert (await client.get(f"{MOVIES_URL}/{inception.movie_id}")).status_code == 404
    profile = (await client.get(f"/api/v1/users/{alice.user_id}")).json()
    assert profile["total_reviews"] == 1
    assert float(profile["average_rating"]) == 5.0

    watchlist = (await client.get("/api/v1/watchlist/", headers=auth_headers(alice))).json()
    assert watchlist["watchlist"] == []
