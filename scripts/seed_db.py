#!/usr/bin/env python3
"""
Seed the database with demo users and a few friendships.

Usage:
    python scripts/seed_db.py
"""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import logging
logging.basicConfig(level=logging.INFO)

from sqlalchemy import select
from database import AsyncSessionLocal, engine, Base
from errors import FriendshipError
from models import User
from api.auth import hash_password
from services import friendships, friend_info

TEST_USERS = [
    {"email": "alice@friends.dev", "full_name": "Alice Nguyen", "phone_number": "+84901000001"},
    {"email": "bob@friends.dev", "full_name": "Bob Tran", "phone_number": "+84901000002"},
    {"email": "carol@friends.dev", "full_name": "Carol Le", "phone_number": "+84901000003"},
    {"email": "dave@friends.dev", "full_name": "Dave Pham", "phone_number": "+84901000004"},
]

# (requester, addressee, answer)
FRIENDSHIPS = [
    ("alice", "bob", "accept"),
    ("alice", "carol", "accept"),
    ("dave", "bob", "accept"),
    ("dave", "carol", "accept"),
    ("bob", "carol", "decline"),
    ("carol", "dave", None),
]


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        ids = {}
        for u in TEST_USERS:
            result = await db.execute(select(User).where(User.email == u["email"]))
            user = result.scalar_one_or_none()
            if user:
                print(f"  [skip] {u['email']} already exists")
            else:
                user = User(password_hash=hash_password("friends123"), **u)
                db.add(user)
                await db.commit()
                print(f"  [ok] Created {u['full_name']}")
            ids[u["email"].split("@")[0]] = user.id

        for requester, addressee, answer in FRIENDSHIPS:
            try:
                await friendships.send_request(db, ids[requester], ids[addressee])
                if answer == "accept":
                    await friendships.accept_request(db, ids[addressee], ids[requester])
                elif answer == "decline":
                    await friendships.decline_request(db, ids[addressee], ids[requester])
            except FriendshipError as e:
                print(f"  [skip] {requester} -> {addressee}: {e.detail}")
                continue
            print(f"  [ok] {requester} -> {addressee}: {answer or 'pending'}")

        info = await friend_info.get_friend_info(db, ids["bob"], ids["alice"])
        print(f"Bob's view of Alice: {info}")


if __name__ == "__main__":
    asyncio.run(seed())
