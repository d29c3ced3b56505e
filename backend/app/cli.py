"""Management CLI.

Usage:
    python -m app.cli create-user <username> <password>   # Add an admin login
    python -m app.cli reclassify                          # Re-derive every harvest record's category
"""

import asyncio
import sys

from sqlalchemy import select

from app.auth.password import hash_password
from app.database import async_session, engine
from app.models.user import User
from app.services.classification import reclassify_all_harvest_records


async def create_user(username: str, password: str) -> bool:
    username = username.strip()
    async with async_session() as db:
        existing = await db.scalar(select(User).where(User.username == username))
        if existing:
            print(f"  User {username} already exists")
            return False
        db.add(User(username=username, password_hash=hash_password(password)))
        await db.commit()
    print(f"  Created user {username}")
    return True


async def reclassify() -> int:
    async with async_session() as db:
        changed = await reclassify_all_harvest_records(db)
        await db.commit()
    print(f"  Reclassified {changed} harvest record(s)")
    return changed


async def _run(coro):
    try:
        return await coro
    finally:
        await engine.dispose()


if __name__ == "__main__":
    cmd = sys.argv[1] if len(sys.argv) > 1 else ""
    if cmd == "create-user" and len(sys.argv) == 4:
        ok = asyncio.run(_run(create_user(sys.argv[2], sys.argv[3])))
        sys.exit(0 if ok else 1)
    elif cmd == "reclassify":
        asyncio.run(_run(reclassify()))
    else:
        print("Usage: python -m app.cli [create-user <username> <password>|reclassify]")
        sys.exit(2)
