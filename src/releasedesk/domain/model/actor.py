"""The authenticated caller of a domain operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from releasedesk.domain.model.enums import UserRole

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class Actor:
    user_id: UUID
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def artist(cls, user_id: UUID) -> Actor:
        return cls(user_id=user_id, role=UserRole.ARTIST)

    @classmethod
    def admin(cls, user_id: UUID) -> Actor:
        return cls(user_id=user_id, role=UserRole.ADMIN)
