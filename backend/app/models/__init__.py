# Models package init
"""
DogAdopt Backend — ORM Models
===============================

Importing this package registers every table on `Base.metadata`
(used by `Database.create_all` and Alembic autogenerate).
"""

from app.models.user import User
from app.models.dog import Dog

__all__ = ["User", "Dog"]
