"""
Entity store: one adapter per authenticable entity kind.

Users and Companies share the same authorization semantics but live in
separate tables with separate subscription tables. Callers resolve an adapter
with adapter_for(kind) instead of branching on the kind themselves.
"""
import logging
from typing import Dict, Optional

from sqlalchemy.orm import Session

from jobboard.core.principals import EntityKind
from jobboard.db.models import (
    Company,
    CompanyRole,
    CompanySubscription,
    Payment,
    Role,
    User,
    UserRole,
    UserSubscription,
)

logger = logging.getLogger(__name__)


class EntityAdapter:
    kind: EntityKind
    model = None
    subscription_model = None
    role_link_model = None
    role_owner_column: str = ""
    payment_column: str = ""

    def find_by_id(self, db: Session, entity_id: int):
        return db.query(self.model).filter(self.model.id == entity_id).first()

    def find_by_email(self, db: Session, email: str):
        return db.query(self.model).filter(self.model.email == email.lower()).first()

    def is_banned(self, db: Session, entity_id: int) -> Optional[bool]:
        """Ban flag for the entity, or None when the entity no longer exists."""
        row = db.query(self.model.is_banned).filter(self.model.id == entity_id).first()
        return None if row is None else bool(row[0])

    def subscription_owner_column(self):
        return getattr(self.subscription_model, self.subscription_model.owner_column)

    def get_subscription(self, db: Session, owner_id: int):
        return (
            db.query(self.subscription_model)
            .filter(self.subscription_owner_column() == owner_id)
            .first()
        )

    def new_subscription(self, owner_id: int, **fields):
        return self.subscription_model(**{self.subscription_model.owner_column: owner_id}, **fields)

    def payment_link(self, subscription) -> Dict[str, int]:
        """Foreign-key kwargs that attach a Payment to this kind's subscription."""
        return {self.payment_column: subscription.id}

    def payment_filter(self, subscription):
        return getattr(Payment, self.payment_column) == subscription.id

    def assign_role(self, db: Session, entity) -> None:
        role = db.query(Role).filter(Role.name == self.kind.value).first()
        if role is None:
            logger.warning(f"Role '{self.kind.value}' missing; seed reference data")
            return
        db.add(self.role_link_model(**{self.role_owner_column: entity.id, "role_id": role.id}))


class UserAdapter(EntityAdapter):
    kind = EntityKind.USER
    model = User
    subscription_model = UserSubscription
    role_link_model = UserRole
    role_owner_column = "user_id"
    payment_column = "user_subscription_id"


class CompanyAdapter(EntityAdapter):
    kind = EntityKind.COMPANY
    model = Company
    subscription_model = CompanySubscription
    role_link_model = CompanyRole
    role_owner_column = "company_id"
    payment_column = "company_subscription_id"


ADAPTERS: Dict[EntityKind, EntityAdapter] = {
    EntityKind.USER: UserAdapter(),
    EntityKind.COMPANY: CompanyAdapter(),
}


def adapter_for(kind: EntityKind) -> EntityAdapter:
    return ADAPTERS[EntityKind(kind)]
