import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "url",
    [
        "/api/v1/reviews/movie/123",
        "/api/v1/reviews/user/ZZZZZZZZZZZZZZZZZZZZZZZZ",
        "/api/v1/users/abc/stats",
        "/api/v1/movies/0123456789abcdef0123456",
    ],
)
async def test_malformed_ids_are_rejected(client: AsyncClient, url: str):
    response = await client.get(url)

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "Validation Error"
    assert body["details"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"rating": 0, "review_text": "Long enough review text."},
        {"rating": 6, "review_text": "Long enough review text."},
        {"rating": 3, "review_text": "short"},
        {"rating": 3, "review_text": "         padded         "},
    ],
)
async def test_review_payload_validation(client: AsyncClient, make_user, make_movie, auth_headers, payload):
    alice = make_user("alice")
    movie = make_movie()

    response = await client.post(
        "/api/v1/reviews/", json={"movie_id": movie.movie_id, **payload}, headers=auth_headers(alice)
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_query_bounds(client: AsyncClient):
    assert (await client.get("/api/v1/movies/", params={"limit": 51})).status_code == 422
    assert (await client.get("/api/v1/movies/", params={"page": 0})).status_code == 422
    assert (await client.get("/api/v1/movies/", params={"rating": 6})).status_code == 422
    assert (await client.get("/api/v1/movies/", params={"sort": "budget"})).status_code == 422
