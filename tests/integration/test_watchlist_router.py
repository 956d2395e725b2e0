import pytest
from httpx import AsyncClient

WATCHLIST_URL = "/api/v1/watchlist"


@pytest.mark.asyncio
async def test_watchlist_flow(client: AsyncClient, make_user, make_movie, auth_headers):
    alice = make_user("alice")
    headers = auth_headers(alice)
    inception = make_movie("Inception", genres=("Action", "Sci-Fi"))
    memento = make_movie("Memento", genres=("Mystery", "Thriller"))

    response = await client.post(
        f"{WATCHLIST_URL}/", json={"movie_id": inception.movie_id, "priority": "high"}, headers=headers
    )
    assert response.status_code == 201
    item_id = response.json()["item_id"]
    assert response.json()["movie"]["title"] == "Inception"

    await client.post(f"{WATCHLIST_URL}/", json={"movie_id": memento.movie_id}, headers=headers)

    duplicate = await client.post(
        f"{WATCHLIST_URL}/", json={"movie_id": inception.movie_id}, headers=headers
    )
    assert duplicate.status_code == 409

    listing = await client.get(f"{WATCHLIST_URL}/", params={"priority": "high"}, headers=headers)
    assert [item["movie_id"] for item in listing.json()["watchlist"]] == [inception.movie_id]

    updated = await client.put(
        f"{WATCHLIST_URL}/{item_id}", json={"priority": "low", "notes": "weekend"}, headers=headers
    )
    assert updated.status_code == 200
    assert updated.json()["priority"] == "low"
    assert updated.json()["notes"] == "weekend"

    stats = (await client.get(f"{WATCHLIST_URL}/stats", headers=headers)).json()
    assert stats["total_items"] == 2
    assert {entry["priority"]: entry["count"] for entry in stats["priority_distribution"]} == {
        "low": 1,
        "medium": 1,
    }
    assert len(stats["top_genres"]) == 4

    check = (await client.get(f"{WATCHLIST_URL}/check/{memento.movie_id}", headers=headers)).json()
    assert check["in_watchlist"] is True

    removed = await client.delete(f"{WATCHLIST_URL}/movie/{memento.movie_id}", headers=headers)
    assert removed.status_code == 200
    check = (await client.get(f"{WATCHLIST_URL}/check/{memento.movie_id}", headers=headers)).json()
    assert check["in_watchlist"] is False
    assert check["watchlist_item"] is None

    removed = await client.delete(f"{WATCHLIST_URL}/{item_id}", headers=headers)
    assert removed.status_code == 200
    assert (await client.get(f"{WATCHLIST_URL}/", headers=headers)).json()["watchlist"] == []


@pytest.mark.asyncio
async def test_watchlist_unknown_movie(client: AsyncClient, make_user, auth_headers):
    alice = make_user("alice")

    response = await client.post(
        f"{WATCHLIST_URL}/", json={"movie_id": "e" * 24}, headers=auth_headers(alice)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_cannot_modify_other_users_item(client: AsyncClient, make_user, make_movie, auth_headers):
    alice = make_user("alice")
    bob = make_user("bob")
    movie = make_movie()
    response = await client.post(
        f"{WATCHLIST_URL}/", json={"movie_id": movie.movie_id}, headers=auth_headers(alice)
    )
    item_id = response.json()["item_id"]

    response = await client.put(
        f"{WATCHLIST_URL}/{item_id}", json={"priority": "high"}, headers=auth_headers(bob)
    )
    assert response.status_code == 403

    response = await client.delete(f"{WATCHLIST_URL}/{item_id}", headers=auth_headers(bob))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_watchlist_requires_auth(client: AsyncClient):
    response = await client.get(f"{WATCHLIST_URL}/")

    assert response.status_code == 401
