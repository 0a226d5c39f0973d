"""Sample data for development databases.

Run directly with ``python -m src.notevault.core.seed`` or enable
``SEED_DATABASE`` to seed on startup. Nothing is written when users exist.
"""

import asyncio
import logging
import random
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..security import hash_password
from .repositories.note_repository import NoteRepository
from .repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

SEED_USER_COUNT = 5
SEED_USER_PASSWORD = "Password123!"
SEED_NOTE_PASSWORD = "notePassword"


async def seed_database(session: AsyncSession, rng: Optional[random.Random] = None) -> Dict[str, int]:
    """Create sample users and notes in an empty database.

    Returns the user and note counts plus ``skipped`` (1 if the users table
    already had rows).
    """
    rng = rng or random.Random()
    user_repo = UserRepository(session)
    note_repo = NoteRepository(session)

    existing = await user_repo.count()
    if existing > 0:
        logger.info("Database already has data, skipping seed")
        return {"users": existing, "notes": 0, "skipped": 1}

    # one hash each, every seeded account and protected note shares it
    user_hash = hash_password(SEED_USER_PASSWORD)
    note_hash = hash_password(SEED_NOTE_PASSWORD)

    notes_created = 0
    try:
        for i in range(1, SEED_USER_COUNT + 1):
            user = await user_repo.create_user(
                {"name": f"User {i}", "email": f"user{i}@example.com", "password_hash": user_hash}
            )

            for j in range(1, rng.randint(4, 6) + 1):
                is_protected = j % 4 == 0
                note = await note_repo.create_note(
                    {
                        "title": f"Note {j} by User {i}",
                        "description": (
                            f"Content for note {j}\nCreated by User {i}\n"
                            "This is a sample note with some content."
                        ),
                        "is_protected": is_protected,
                        "password_hash": note_hash if is_protected else None,
                        "owner_id": user.id,
                    }
                )
                await note_repo.add_version(note)
                notes_created += 1

        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(f"Seeded {SEED_USER_COUNT} users and {notes_created} notes")
    return {"users": SEED_USER_COUNT, "notes": notes_created, "skipped": 0}


async def _main() -> None:
    from ..database import AsyncSessionLocal, create_tables, dispose_engine
    from .logging import setup_logging

    setup_logging()
    await create_tables()
    try:
        async with AsyncSessionLocal() as session:
            await seed_database(session)
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(_main())
