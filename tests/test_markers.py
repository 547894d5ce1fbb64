from typing import Any

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from trek import schemas
from trek.errors import NotFoundError, ValidationError
from trek.models import Category, Map, Marker
from trek.services import markers as markers_service

ClientFixture = tuple[AsyncClient, async_sessionmaker[AsyncSession], int, int, int]


def _marker_payload(map_id: int, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "title": "Dam Square",
        "lat": 52.3731,
        "lng": 4.8936,
        "mapId": map_id,
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_marker_rounds_position_and_joins_color(
    test_client: ClientFixture,
) -> None:
    client, _, _, map_id, category_id = test_client

    response = await client.post(
        "/api/markers",
        json=_marker_payload(
            map_id, lat=52.372001234, lng=4.893601987, categoryId=category_id
        ),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["lat"] == 52.372001
    assert body["lng"] == 4.893602
    assert body["categoryId"] == category_id
    assert body["categoryColor"] == "#ff0000"
    assert body["notes"] == ""
    assert body["visitations"] == []
    assert body["rating"] is None


@pytest.mark.asyncio
async def test_create_marker_rounds_half_up(test_client: ClientFixture) -> None:
    client, _, _, map_id, _ = test_client

    response = await client.post(
        "/api/markers", json=_marker_payload(map_id, lat=52.3720005, lng=4.8936)
    )

    assert response.status_code == 201
    assert response.json()["lat"] == 52.372001


@pytest.mark.asyncio
async def test_list_markers_newest_first(test_client: ClientFixture) -> None:
    client, _, _, map_id, _ = test_client

    for title in ("First", "Second", "Third"):
        response = await client.post(
            "/api/markers", json=_marker_payload(map_id, title=title)
        )
        assert response.status_code == 201

    response = await client.get(f"/api/maps/{map_id}/markers")
    assert response.status_code == 200
    assert [m["title"] for m in response.json()] == ["Third", "Second", "First"]


@pytest.mark.asyncio
async def test_list_markers_only_for_requested_map(test_client: ClientFixture) -> None:
    client, session_factory, user_id, map_id, _ = test_client

    async with session_factory() as session:
        other = Map(title="Elsewhere", user_id=user_id)
        session.add(other)
        await session.commit()
        other_id = other.id

    await client.post("/api/markers", json=_marker_payload(map_id, title="Here"))
    await client.post("/api/markers", json=_marker_payload(other_id, title="There"))

    response = await client.get(f"/api/maps/{other_id}/markers")
    assert [m["title"] for m in response.json()] == ["There"]


@pytest.mark.asyncio
async def test_create_marker_rejects_out_of_range_rating(
    test_client: ClientFixture,
) -> None:
    client, session_factory, _, map_id, _ = test_client

    response = await client.post(
        "/api/markers", json=_marker_payload(map_id, rating=11)
    )
    assert response.status_code == 422

    async with session_factory() as session:
        result = await session.execute(select(Marker.id))
        assert result.first() is None


@pytest.mark.asyncio
async def test_create_marker_accepts_rating_bounds(test_client: ClientFixture) -> None:
    client, _, _, map_id, _ = test_client

    low = await client.post("/api/markers", json=_marker_payload(map_id, rating=1))
    high = await client.post("/api/markers", json=_marker_payload(map_id, rating=10))

    assert low.json()["rating"] == 1
    assert high.json()["rating"] == 10


@pytest.mark.asyncio
async def test_create_marker_unknown_map(test_client: ClientFixture) -> None:
    client, _, _, _, _ = test_client

    response = await client.post("/api/markers", json=_marker_payload(9999))
    assert response.status_code == 404
    assert response.json()["detail"] == "Map 9999 not found"


@pytest.mark.asyncio
async def test_create_marker_rejects_category_from_other_map(
    test_client: ClientFixture,
) -> None:
    client, session_factory, user_id, map_id, _ = test_client

    async with session_factory() as session:
        other = Map(title="Elsewhere", user_id=user_id)
        session.add(other)
        await session.commit()
        foreign = Category(title="Elsewhere", color="#00ff00", map_id=other.id)
        session.add(foreign)
        await session.commit()
        foreign_id = foreign.id

    response = await client.post(
        "/api/markers", json=_marker_payload(map_id, categoryId=foreign_id)
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_patch_marker_is_sparse(test_client: ClientFixture) -> None:
    client, _, _, map_id, category_id = test_client

    created = await client.post(
        "/api/markers",
        json=_marker_payload(
            map_id,
            categoryId=category_id,
            description="Central square",
            city="Amsterdam",
            rating=7,
        ),
    )
    marker_id = created.json()["id"]

    response = await client.patch(
        f"/api/markers/{marker_id}", json={"notes": "Busy on weekends"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["notes"] == "Busy on weekends"
    assert body["title"] == "Dam Square"
    assert body["description"] == "Central square"
    assert body["city"] == "Amsterdam"
    assert body["rating"] == 7
    assert body["categoryId"] == category_id
    assert body["lat"] == 52.3731
    assert body["lng"] == 4.8936


@pytest.mark.asyncio
async def test_patch_marker_null_clears_field(test_client: ClientFixture) -> None:
    client, _, _, map_id, category_id = test_client

    created = await client.post(
        "/api/markers",
        json=_marker_payload(
            map_id, categoryId=category_id, description="Gone soon", notes="Keep?"
        ),
    )
    marker_id = created.json()["id"]

    response = await client.patch(
        f"/api/markers/{marker_id}",
        json={"description": None, "categoryId": None, "notes": None},
    )

    body = response.json()
    assert body["description"] is None
    assert body["categoryId"] is None
    assert body["categoryColor"] is None
    assert body["notes"] == ""


@pytest.mark.asyncio
async def test_patch_marker_rejects_null_title(test_client: ClientFixture) -> None:
    client, _, _, map_id, _ = test_client

    created = await client.post("/api/markers", json=_marker_payload(map_id))
    marker_id = created.json()["id"]

    response = await client.patch(f"/api/markers/{marker_id}", json={"title": None})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_patch_marker_moves_position(test_client: ClientFixture) -> None:
    client, _, _, map_id, _ = test_client

    created = await client.post("/api/markers", json=_marker_payload(map_id))
    marker_id = created.json()["id"]

    response = await client.patch(
        f"/api/markers/{marker_id}", json={"lat": -33.85681234, "lng": 151.21529876}
    )

    body = response.json()
    assert body["lat"] == -33.856812
    assert body["lng"] == 151.215299


@pytest.mark.asyncio
async def test_patch_marker_requires_both_coordinates(
    test_client: ClientFixture,
) -> None:
    client, _, _, map_id, _ = test_client

    created = await client.post("/api/markers", json=_marker_payload(map_id))
    marker_id = created.json()["id"]

    response = await client.patch(f"/api/markers/{marker_id}", json={"lat": 1.0})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_patch_marker_visitations(test_client: ClientFixture) -> None:
    client, _, _, map_id, _ = test_client

    created = await client.post("/api/markers", json=_marker_payload(map_id))
    marker_id = created.json()["id"]

    visits = [{"date": "2024-05-04", "text": "King's Day"}]
    response = await client.patch(
        f"/api/markers/{marker_id}", json={"visitations": visits}
    )
    assert response.json()["visitations"] == visits

    response = await client.patch(
        f"/api/markers/{marker_id}", json={"visitations": None}
    )
    assert response.json()["visitations"] == []


@pytest.mark.asyncio
async def test_patch_unknown_marker(test_client: ClientFixture) -> None:
    client, _, _, _, _ = test_client

    response = await client.patch("/api/markers/4242", json={"notes": "x"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_marker(test_client: ClientFixture) -> None:
    client, _, _, map_id, _ = test_client

    created = await client.post("/api/markers", json=_marker_payload(map_id))
    marker_id = created.json()["id"]

    response = await client.delete(f"/api/markers/{marker_id}")
    assert response.status_code == 204

    response = await client.get(f"/api/markers/{marker_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_rating_constraint_enforced_by_database(
    db_session: AsyncSession, seeded: tuple[int, int, int]
) -> None:
    _, map_id, _ = seeded
    marker = await markers_service.create_marker(
        db_session,
        schemas.NewMarker(title="Rated", lat=1.0, lng=2.0, map_id=map_id, rating=5),
    )

    # Skip model validation so only the CHECK constraint stands in the way.
    patch = schemas.MarkerPatch.model_construct(rating=11)
    with pytest.raises(ValidationError):
        await markers_service.update_marker(db_session, marker.id, patch)

    unchanged = await markers_service.get_marker(db_session, marker.id)
    assert unchanged.rating == 5


@pytest.mark.asyncio
async def test_update_marker_moving_map_checks_category(
    db_session: AsyncSession, seeded: tuple[int, int, int]
) -> None:
    user_id, map_id, category_id = seeded
    other = Map(title="Other", user_id=user_id)
    db_session.add(other)
    await db_session.commit()
    other_id = other.id

    marker = await markers_service.create_marker(
        db_session,
        schemas.NewMarker(
            title="Moving", lat=1.0, lng=2.0, map_id=map_id, category_id=category_id
        ),
    )

    with pytest.raises(ValidationError):
        await markers_service.update_marker(
            db_session, marker.id, schemas.MarkerPatch(map_id=other_id)
        )

    moved = await markers_service.update_marker(
        db_session,
        marker.id,
        schemas.MarkerPatch(map_id=other_id, category_id=None),
    )
    assert moved.map_id == other_id
    assert moved.category_id is None


@pytest.mark.asyncio
async def test_get_marker_missing(db_session: AsyncSession) -> None:
    with pytest.raises(NotFoundError):
        await markers_service.get_marker(db_session, 1)
