"""Ownership Enforcement: not-found first, then owner check.

Invariants:
    - A missing record raises ResourceNotFoundError before any ownership check
    - A record owned by someone else raises OwnershipError
    - Pure: callers load the record, this only decides
"""

from typing import TypeVar

from bookcircle.core.domain_types import (
    MutationAction, OwnedEntity, OwnedRecord, UserId,
)
from bookcircle.core.errors import (
    ErrorContext, OwnershipError, ResourceNotFoundError,
)

R = TypeVar("R", bound=OwnedRecord)


def require_owned(
    record: R | None,
    user_id: UserId,
    entity: OwnedEntity,
    record_id: str,
    action: MutationAction,
) -> R:
    """Return the record if it exists and belongs to user_id."""
    if record is None:
        raise ResourceNotFoundError(entity.value, record_id)
    if record.user_id != user_id:
        raise OwnershipError(
            entity.value, record_id, action.value,
            context=ErrorContext(user_id=user_id),
        )
    return record
