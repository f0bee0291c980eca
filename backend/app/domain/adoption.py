"""
DogAdopt Backend — Adoption State Machine
===========================================

What:  Pure validation and transition rules for dog listings.
How:   Operates on the plain `DogRecord` dataclass. Nothing here touches the
       database or HTTP, so every rule is unit-testable on its own.
Who:   AdoptionService runs these checks before (and, for races, after) the
       repository's conditional writes.

State machine:
    ┌───────────┐   adopt (non-owner)   ┌──────────┐
    │ available │ ────────────────────▶ │ adopted  │  (terminal)
    └───────────┘                       └──────────┘
          │ remove (owner only)
          ▼
       deleted

Invariants:
    status == adopted  ⇔  adopter_id is set  ⇔  adopted_at is set
    owner_id never equals adopter_id
    an adopted dog is never removed and never re-adopted
    owner_id never changes after creation
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple
from uuid import UUID

from app.exceptions import ConflictError, ForbiddenError, ValidationError

NAME_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 500
THANK_YOU_MAX_LENGTH = 200


class DogStatus(str, Enum):
    AVAILABLE = "available"
    ADOPTED = "adopted"


# Words accepted by list filters. "registered" is the public listing's
# historical name for dogs still waiting for a home.
_STATUS_ALIASES = {
    "available": DogStatus.AVAILABLE,
    "registered": DogStatus.AVAILABLE,
    "adopted": DogStatus.ADOPTED,
}

ALREADY_ADOPTED_MESSAGE = "This dog has already been adopted."
SELF_ADOPTION_MESSAGE = "You cannot adopt your own dog."
NOT_REGISTRANT_MESSAGE = "You can only remove dogs you registered."
ADOPTED_REMOVAL_MESSAGE = "Cannot remove an adopted dog. Adopted listings cannot be removed."


@dataclass(frozen=True)
class DogRecord:
    """Plain snapshot of a stored dog, decoupled from the ORM mapping."""

    id: UUID
    name: str
    description: str
    owner_id: UUID
    status: DogStatus = DogStatus.AVAILABLE
    adopter_id: Optional[UUID] = None
    adopted_at: Optional[datetime] = None
    thank_you_message: str = ""

    @property
    def is_adopted(self) -> bool:
        return self.status == DogStatus.ADOPTED


def parse_status_filter(value: Optional[str]) -> Optional[DogStatus]:
    """Map a `status` query value to a DogStatus; empty means no filter."""
    if value is None or not value.strip():
        return None
    status = _STATUS_ALIASES.get(value.strip().lower())
    if status is None:
        raise ValidationError(
            f"Invalid status '{value}'. Must be one of: available, adopted",
            field="status",
        )
    return status


def _require_text(value: Optional[str], field: str, label: str, max_length: int) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{label} is required", field=field)
    if len(cleaned) > max_length:
        raise ValidationError(
            f"{label} cannot exceed {max_length} characters",
            field=field,
        )
    return cleaned


def validate_new_dog(name: Optional[str], description: Optional[str]) -> Tuple[str, str]:
    """
    Validate and normalize the fields of a new listing.

    Returns the trimmed (name, description). Both are required and bounded
    at 50 and 500 characters after trimming.
    """
    missing = [label for label, value in (("name", name), ("description", description))
               if not (value or "").strip()]
    if len(missing) == 2:
        raise ValidationError(
            "Dog name and description are required",
            errors=[{"field": f, "message": f"{f} is required"} for f in missing],
        )
    clean_name = _require_text(name, "name", "Dog name", NAME_MAX_LENGTH)
    clean_description = _require_text(
        description, "description", "Dog description", DESCRIPTION_MAX_LENGTH
    )
    return clean_name, clean_description


def normalize_thank_you(message: Optional[str]) -> str:
    """Trim the optional adoption message; absent becomes the empty string."""
    cleaned = (message or "").strip()
    if len(cleaned) > THANK_YOU_MAX_LENGTH:
        raise ValidationError(
            f"Thank you message cannot exceed {THANK_YOU_MAX_LENGTH} characters",
            field="message",
        )
    return cleaned


def check_adoption(dog: DogRecord, adopter_id: UUID) -> None:
    """
    Raise if `adopter_id` may not adopt `dog`.

    The adopted check runs before the ownership check, so a second attempt
    on an adopted dog always reports a conflict, even from the owner.
    """
    if dog.is_adopted:
        raise ConflictError(ALREADY_ADOPTED_MESSAGE, context={"dog_id": str(dog.id)})
    if dog.owner_id == adopter_id:
        raise ForbiddenError(SELF_ADOPTION_MESSAGE, context={"dog_id": str(dog.id)})


def adopt(dog: DogRecord, adopter_id: UUID, message: Optional[str], now: datetime) -> DogRecord:
    """Return the adopted version of `dog`; raises if the transition is illegal."""
    check_adoption(dog, adopter_id)
    return replace(
        dog,
        status=DogStatus.ADOPTED,
        adopter_id=adopter_id,
        adopted_at=now,
        thank_you_message=normalize_thank_you(message),
    )


def check_removal(dog: DogRecord, caller_id: UUID) -> None:
    """
    Raise unless `caller_id` owns `dog` and it is still available.

    Ownership is checked first; being the owner never overrides the
    adopted-dogs-stay rule.
    """
    if dog.owner_id != caller_id:
        raise ForbiddenError(NOT_REGISTRANT_MESSAGE, context={"dog_id": str(dog.id)})
    if dog.is_adopted:
        raise ForbiddenError(ADOPTED_REMOVAL_MESSAGE, context={"dog_id": str(dog.id)})
