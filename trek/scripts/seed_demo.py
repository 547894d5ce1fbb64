"""Seed demo data for development."""

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from trek import schemas
from trek.database import AsyncSessionLocal, init_db
from trek.services import categories as categories_service
from trek.services import maps as maps_service
from trek.services import markers as markers_service
from trek.services import users as users_service

DEMO_EMAIL = "demo@example.com"

DEMO_MAPS = [
    {
        "title": "My First Map",
        "description": "Getting started map",
        "categories": [
            {"title": "Default", "description": "General markers", "color": "#888888"},
            {"title": "Hiking", "description": "Trails and hikes", "color": "#2e8b57"},
            {"title": "Food", "description": "Restaurants and cafes", "color": "#ff6347"},
        ],
        "markers": [
            {
                "title": "Golden Gate Bridge",
                "lat": 37.8199,
                "lng": -122.4783,
                "city": "San Francisco",
                "country": "United States",
                "category": "Default",
            },
            {
                "title": "Central Park",
                "lat": 40.785091,
                "lng": -73.968285,
                "city": "New York",
                "country": "United States",
                "category": "Hiking",
            },
            {
                "title": "Eiffel Tower",
                "lat": 48.8584,
                "lng": 2.2945,
                "city": "Paris",
                "country": "France",
                "rating": 9,
            },
            {
                "title": "Sydney Opera House",
                "lat": -33.8568,
                "lng": 151.2153,
                "city": "Sydney",
                "country": "Australia",
            },
        ],
    },
    {
        "title": "City Walks",
        "description": "Urban exploration routes",
        "categories": [
            {"title": "Food", "description": "Restaurants and cafes", "color": "#ff6347"},
        ],
        "markers": [
            {
                "title": "Dam Square",
                "lat": 52.3731,
                "lng": 4.8936,
                "city": "Amsterdam",
                "country": "Netherlands",
                "category": "Food",
                "visitations": [{"date": "2024-05-04", "text": "King's Day crowds"}],
            },
        ],
    },
]


async def seed_demo_data(db: AsyncSession) -> schemas.User:
    """Seed demo data into the database."""
    demo_user = await users_service.get_user_by_email(db, DEMO_EMAIL)
    if demo_user:
        print("Demo user already exists")
        return demo_user

    print(f"Creating demo user: Demo User <{DEMO_EMAIL}>")
    demo_user = await users_service.create_user(
        db, schemas.NewUser(name="Demo User", email=DEMO_EMAIL)
    )

    for map_data in DEMO_MAPS:
        created_map = await maps_service.create_map(
            db,
            schemas.NewMap(
                title=map_data["title"],
                description=map_data["description"],
                user_id=demo_user.id,
            ),
        )
        category_ids: dict[str, int] = {}
        for category_data in map_data["categories"]:
            category = await categories_service.create_category(
                db, schemas.NewCategory(map_id=created_map.id, **category_data)
            )
            category_ids[category.title] = category.id

        for marker_data in map_data["markers"]:
            fields = dict(marker_data)
            category_title = fields.pop("category", None)
            await markers_service.create_marker(
                db,
                schemas.NewMarker(
                    map_id=created_map.id,
                    category_id=category_ids.get(category_title) if category_title else None,
                    **fields,
                ),
            )
        print(f"Created map {created_map.title!r}")

    return demo_user


async def _run() -> None:
    await init_db()
    async with AsyncSessionLocal() as db:
        await seed_demo_data(db)


def main() -> None:
    asyncio.run(_run())


if __name__ == "__main__":
    main()
