"""
DogAdopt Backend — Sample Data Seeder
=======================================

What:  Creates three sample users, eight dogs spread across them, and two
       adoptions so a fresh environment has something to browse.
How:   Goes through AuthService and AdoptionService, so seeded rows obey
       exactly the same rules as API-created ones.

Usage (from backend/):
    python -m scripts.seed           # skip if sample users already exist
    python -m scripts.seed --reset   # drop and recreate all tables first
"""

import argparse
import asyncio
import logging
import math
import sys
from typing import List

from app.config import settings
from app.database import Base, Database
from app.domain.identity import CallerIdentity
from app.repositories.dog_repository import DogRepository
from app.repositories.user_repository import UserRepository
from app.services.adoption_service import AdoptionService
from app.services.auth_service import AuthService
from app.services.token_service import TokenService

logger = logging.getLogger("dogadopt.seed")

SAMPLE_PASSWORD = "password123"

SAMPLE_USERS = [
    "sarah_loves_dogs",
    "mike_adoption_center",
    "emma_rescue_volunteer",
]

SAMPLE_DOGS = [
    ("Buddy", "A friendly Golden Retriever who loves playing fetch and long walks. Perfect family companion."),
    ("Luna", "Beautiful Husky with striking blue eyes. Energetic and loves outdoor adventures."),
    ("Charlie", "Gentle Labrador mix who's great with kids. Well-trained and house-broken."),
    ("Bella", "Sweet Border Collie who's incredibly smart and loves learning new tricks."),
    ("Max", "Playful German Shepherd puppy looking for an active family. Very loyal and protective."),
    ("Daisy", "Calm and loving Beagle who enjoys quiet evenings and gentle walks in the park."),
    ("Rocky", "Strong and brave Rottweiler mix. Great guard dog but also very affectionate with family."),
    ("Molly", "Adorable Cocker Spaniel who loves attention and belly rubs. Very social and friendly."),
]

# (dog index, adopter index, thank-you message)
SAMPLE_ADOPTIONS = [
    (0, 1, "Thank you so much for taking care of this wonderful dog!"),
    (1, 2, "I promise to give them the best home possible!"),
]


async def seed(database: Database, reset: bool = False) -> bool:
    """Populate the database. Returns False when sample data already exists."""
    if reset:
        from app import models  # noqa: F401

        async with database.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Dropped all tables")
    await database.create_all()

    tokens = TokenService.from_settings(settings)

    async with database.session() as session:
        users_repo = UserRepository(session)
        if await users_repo.get_by_username(SAMPLE_USERS[0]) is not None:
            logger.info("Sample users already present, nothing to do (use --reset)")
            return False

        auth = AuthService.from_settings(users_repo, tokens, settings)
        adoption = AdoptionService.from_settings(DogRepository(session), settings)

        callers: List[CallerIdentity] = []
        for username in SAMPLE_USERS:
            result = await auth.register(username, SAMPLE_PASSWORD)
            callers.append(CallerIdentity(id=result.user.id, username=result.user.username))
        logger.info("Created %d users", len(callers))

        per_user = math.ceil(len(SAMPLE_DOGS) / len(callers))
        dog_ids = []
        for i, (name, description) in enumerate(SAMPLE_DOGS):
            owner = callers[min(i // per_user, len(callers) - 1)]
            dog = await adoption.register_dog(owner, name, description)
            dog_ids.append(str(dog.id))
        logger.info("Created %d dogs", len(dog_ids))

        for dog_index, adopter_index, message in SAMPLE_ADOPTIONS:
            await adoption.adopt_dog(callers[adopter_index], dog_ids[dog_index], message)
        logger.info("Created %d adoptions", len(SAMPLE_ADOPTIONS))

    return True


async def main(reset: bool) -> int:
    database = Database.from_settings(settings)
    try:
        created = await seed(database, reset=reset)
    finally:
        await database.dispose()

    if created:
        logger.info("Sample login credentials:")
        for username in SAMPLE_USERS:
            logger.info("   Username: %s, Password: %s", username, SAMPLE_PASSWORD)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the DogAdopt database with sample data")
    parser.add_argument("--reset", action="store_true", help="drop and recreate all tables first")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    sys.exit(asyncio.run(main(args.reset)))
