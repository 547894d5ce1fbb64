"""CLI tool for Trek."""

from __future__ import annotations

import argparse
import asyncio
import sys

from trek import schemas
from trek.database import AsyncSessionLocal, init_db
from trek.errors import TrekError
from trek.services import maps as maps_service
from trek.services import users as users_service


async def add_user(name: str, email: str) -> None:
    """Create a user."""
    await init_db()
    async with AsyncSessionLocal() as session:
        try:
            user = await users_service.create_user(
                session, schemas.NewUser(name=name, email=email)
            )
        except TrekError as exc:
            print(exc.message, file=sys.stderr)
            sys.exit(1)
        print(f"Created user {user.name} <{user.email}> (ID: {user.id})")


async def list_users() -> None:
    """List all users."""
    await init_db()
    async with AsyncSessionLocal() as session:
        for user in await users_service.list_users(session):
            print(f"ID: {user.id}, Name: {user.name}, Email: {user.email}")


async def delete_user(email: str) -> None:
    """Delete a user and, through cascades, their maps."""
    await init_db()
    async with AsyncSessionLocal() as session:
        user = await users_service.get_user_by_email(session, email)
        if not user:
            print(f"User {email} not found.", file=sys.stderr)
            return
        await users_service.delete_user(session, user.id)
        print(f"Deleted user {email}")


async def list_maps(email: str | None) -> None:
    """List maps, optionally only those of one user."""
    await init_db()
    async with AsyncSessionLocal() as session:
        user_id = None
        if email:
            user = await users_service.get_user_by_email(session, email)
            if not user:
                print(f"User {email} not found.", file=sys.stderr)
                return
            user_id = user.id
        for item in await maps_service.list_maps(session, user_id):
            print(f"ID: {item.id}, Title: {item.title}, Owner: {item.user_id}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Trek CLI tool.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # User management
    user_parser = subparsers.add_parser("user", help="Manage users")
    user_subparsers = user_parser.add_subparsers(dest="user_command", required=True)

    add_parser = user_subparsers.add_parser("add", help="Create a user")
    add_parser.add_argument("--name", required=True, help="Display name / username")
    add_parser.add_argument("--email", required=True, help="User email")

    user_subparsers.add_parser("list", help="List all users")

    delete_parser = user_subparsers.add_parser("delete", help="Delete a user")
    delete_parser.add_argument("--email", required=True, help="User email")

    # Maps
    map_parser = subparsers.add_parser("map", help="Inspect maps")
    map_subparsers = map_parser.add_subparsers(dest="map_command", required=True)
    map_list_parser = map_subparsers.add_parser("list", help="List maps")
    map_list_parser.add_argument("--email", help="Only maps of this user")

    # Demo data
    subparsers.add_parser("seed", help="Load demo user, maps, categories and markers")

    args = parser.parse_args()

    if args.command == "user":
        if args.user_command == "add":
            asyncio.run(add_user(args.name, args.email))
        elif args.user_command == "list":
            asyncio.run(list_users())
        elif args.user_command == "delete":
            asyncio.run(delete_user(args.email))

    elif args.command == "map":
        if args.map_command == "list":
            asyncio.run(list_maps(args.email))

    elif args.command == "seed":
        from trek.scripts.seed_demo import main as seed_main

        seed_main()


if __name__ == "__main__":
    main()
