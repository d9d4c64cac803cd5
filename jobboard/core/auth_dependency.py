"""
Authorization gate: FastAPI dependencies that turn a bearer token into a
Principal and gate handlers by entity kind and ban status.
"""
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from jobboard.core.errors import Forbidden, Unauthorized
from jobboard.core.principals import EntityKind, Principal
from jobboard.core.security import TokenCodec
from jobboard.db.session import get_db
from jobboard.services.entity_service import adapter_for
from jobboard.services.payment_provider import PaymentProvider

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_payment_provider(request: Request) -> PaymentProvider:
    return request.app.state.payment_provider


def require_authenticated(
    token: Optional[str] = Depends(oauth2_scheme),
    codec: TokenCodec = Depends(get_token_codec),
) -> Principal:
    """Principal for the bearer token on the request."""
    if not token:
        raise Unauthorized("Missing token")
    return codec.verify(token)


def _require_kind(principal: Principal, kind: EntityKind, db: Session, denial: str) -> Principal:
    # Kind is checked before the ban flag
    if principal.entity_kind != kind:
        raise Forbidden(denial)

    banned = adapter_for(kind).is_banned(db, principal.entity_id)
    if banned is None:
        logger.warning(f"Token for missing {kind.value}: id={principal.entity_id}")
        raise Unauthorized(f"{kind.value} not found")
    if banned:
        logger.warning(f"Banned {kind.value} denied: id={principal.entity_id}")
        raise Forbidden("Account is banned")
    return principal


def require_user(
    principal: Principal = Depends(require_authenticated),
    db: Session = Depends(get_db),
) -> Principal:
    return _require_kind(principal, EntityKind.USER, db, "Only users can perform this action")


def require_company(
    principal: Principal = Depends(require_authenticated),
    db: Session = Depends(get_db),
) -> Principal:
    return _require_kind(principal, EntityKind.COMPANY, db, "Only companies can perform this action")


def require_entity(
    principal: Principal = Depends(require_authenticated),
    db: Session = Depends(get_db),
) -> Principal:
    """Either kind, as long as the account exists and is not banned."""
    return _require_kind(principal, principal.entity_kind, db, "")
