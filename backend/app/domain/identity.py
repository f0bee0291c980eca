"""Who is making the call, as established by the access guard."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class CallerIdentity:
    id: UUID
    username: str
