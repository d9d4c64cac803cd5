"""
Authenticated principal types shared by the token codec and the guards.
"""
import enum
from dataclasses import dataclass


class EntityKind(str, enum.Enum):
    """The two authenticable principal kinds."""
    USER = "User"
    COMPANY = "Company"


@dataclass(frozen=True)
class Principal:
    """Identity carried by a verified token and bound to the request."""
    entity_id: int
    entity_kind: EntityKind

    @property
    def is_user(self) -> bool:
        return self.entity_kind is EntityKind.USER

    @property
    def is_company(self) -> bool:
        return self.entity_kind is EntityKind.COMPANY
