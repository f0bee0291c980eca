# Repositories package init
"""
DogAdopt Backend — Record Store
=================================

Repositories are the only code that issues SQL. Each one wraps the
per-request AsyncSession it is constructed with:
    - user_repository.py: lookup by id/username, create
    - dog_repository.py:  create, fetch with owner/adopter joins,
                          conditional adopt/remove writes, paginated scans
"""

from app.repositories.dog_repository import DogRepository
from app.repositories.user_repository import UserRepository

__all__ = ["DogRepository", "UserRepository"]
