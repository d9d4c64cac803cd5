"""
Registration, login and identity endpoints for users and companies.
"""
import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.core.auth_dependency import get_token_codec, require_authenticated
from jobboard.core.errors import AppError, Conflict, Forbidden, InternalError, Unauthorized
from jobboard.core.principals import EntityKind, Principal
from jobboard.core.rate_limit import check_rate_limit
from jobboard.core.security import TokenCodec, hash_password, verify_password
from jobboard.db.session import get_db
from jobboard.schemas.auth import (
    AuthResponse,
    CompanyProfile,
    EntityResponse,
    LoginRequest,
    RegisterCompanyRequest,
    RegisterUserRequest,
    UserProfile,
)
from jobboard.schemas.common import MessageResponse
from jobboard.schemas.subscription import SubscriptionResponse
from jobboard.services import subscription_service
from jobboard.services.entity_service import adapter_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

PROFILE_SCHEMAS = {
    EntityKind.USER: UserProfile,
    EntityKind.COMPANY: CompanyProfile,
}


def _entity_response(db: Session, entity, kind: EntityKind) -> dict:
    subscription = adapter_for(kind).get_subscription(db, entity.id)
    return {
        "entity_type": kind,
        "roles": [role.name for role in entity.roles],
        "profile": PROFILE_SCHEMAS[kind].model_validate(entity),
        "subscription": SubscriptionResponse.model_validate(subscription) if subscription else None,
    }


def _register(db: Session, codec: TokenCodec, kind: EntityKind, fields: dict) -> AuthResponse:
    adapter = adapter_for(kind)
    try:
        if adapter.find_by_email(db, fields["email"]):
            raise Conflict("Email already registered")

        fields["email"] = fields["email"].lower()
        fields["password_hash"] = hash_password(fields.pop("password"))
        entity = adapter.model(**fields)
        db.add(entity)
        db.flush()

        adapter.assign_role(db, entity)
        free_plan = subscription_service.get_free_plan(db)
        subscription_service.attach_initial_subscription(db, adapter, entity.id, free_plan)
        db.commit()
        db.refresh(entity)
    except IntegrityError:
        db.rollback()
        raise Conflict("Email already registered")
    except AppError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to register {kind.value}: {e}", exc_info=True)
        raise InternalError(f"Failed to register {kind.value.lower()}")

    logger.info(f"{kind.value} registered: id={entity.id}")
    return AuthResponse(
        access_token=codec.issue(entity.id, kind),
        **_entity_response(db, entity, kind),
    )


# ✅ REGISTRATION
@router.post("/register/user", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def register_user(
    request: Request,
    payload: RegisterUserRequest,
    codec: TokenCodec = Depends(get_token_codec),
    db: Session = Depends(get_db),
):
    """Create a job seeker account on the free plan and return a token."""
    check_rate_limit(request, "register")
    return _register(db, codec, EntityKind.USER, payload.model_dump())


@router.post("/register/company", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def register_company(
    request: Request,
    payload: RegisterCompanyRequest,
    codec: TokenCodec = Depends(get_token_codec),
    db: Session = Depends(get_db),
):
    """Create an employer account on the free plan and return a token."""
    check_rate_limit(request, "register")
    return _register(db, codec, EntityKind.COMPANY, payload.model_dump())


# ✅ LOGIN
@router.post("/login", response_model=AuthResponse)
def login(
    request: Request,
    payload: LoginRequest,
    codec: TokenCodec = Depends(get_token_codec),
    db: Session = Depends(get_db),
):
    check_rate_limit(request, "login")

    kind = payload.entity_type
    entity = adapter_for(kind).find_by_email(db, payload.email)
    if not entity or not verify_password(payload.password, entity.password_hash):
        logger.warning(f"Failed login for {kind.value}: {payload.email}")
        raise Unauthorized("Invalid credentials")
    if entity.is_banned:
        raise Forbidden("Account is banned")

    logger.info(f"{kind.value} logged in: id={entity.id}")
    return AuthResponse(
        access_token=codec.issue(entity.id, kind),
        **_entity_response(db, entity, kind),
    )


@router.get("/me", response_model=EntityResponse)
def me(
    principal: Principal = Depends(require_authenticated),
    db: Session = Depends(get_db),
):
    entity = adapter_for(principal.entity_kind).find_by_id(db, principal.entity_id)
    if entity is None:
        raise Unauthorized(f"{principal.entity_kind.value} not found")
    if entity.is_banned:
        raise Forbidden("Account is banned")
    return EntityResponse(**_entity_response(db, entity, principal.entity_kind))


@router.post("/logout", response_model=MessageResponse)
def logout(principal: Principal = Depends(require_authenticated)):
    """
    Tokens are stateless; logging out means the client discards its token.
    """
    logger.info(f"{principal.entity_kind.value} logged out: id={principal.entity_id}")
    return MessageResponse(message="Logged out successfully")
