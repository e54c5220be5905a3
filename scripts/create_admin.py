#!/usr/bin/env python3
"""
Create an approved admin directly in the database, or promote an existing user.
Registrations start unapproved, so the first admin has to come from here.
  python scripts/create_admin.py admin@example.com --name Admin --password s3cret
"""

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from wishshare.core.security import hash_password
from wishshare.db.models import User
from wishshare.db.repositories import UserRepository
from wishshare.db.session import async_session_maker, engine


async def create_admin(email: str, name: str, password: str | None) -> None:
    async with async_session_maker() as session:
        users = UserRepository(session)
        user = await users.get_by_email(email)
        if user:
            user.is_admin = True
            user.is_approved = True
            user.is_active = True
            if password:
                user.hashed_password = hash_password(password)
            await users.save(user)
            print(f"Promoted existing user id={user.id} ({email}) to admin")
        else:
            if not password:
                password = getpass.getpass("Password for new admin: ")
            user = await users.add(
                User(
                    email=email,
                    name=name,
                    hashed_password=hash_password(password),
                    is_admin=True,
                    is_approved=True,
                    is_active=True,
                )
            )
            print(f"Created admin id={user.id} ({email})")
        await session.commit()
    await engine.dispose()


def main():
    ap = argparse.ArgumentParser(description="Create or promote an approved admin")
    ap.add_argument("email")
    ap.add_argument("--name", default="Admin", help="Display name for a new admin")
    ap.add_argument("--password", help="Password (prompted when creating and omitted)")
    args = ap.parse_args()
    asyncio.run(create_admin(args.email, args.name, args.password))


if __name__ == "__main__":
    main()
