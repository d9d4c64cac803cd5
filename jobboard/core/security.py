import logging
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext

from jobboard.core.errors import Unauthorized
from jobboard.core.principals import EntityKind, Principal

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72

# passlib only verifies legacy hashes; new hashes go through bcrypt directly
try:
    pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
except Exception as e:
    logger.warning(f"Failed to initialize passlib context: {e}, using bcrypt directly")
    pwd_context = None


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Passwords longer than 72 bytes are rejected by schema validation before
    they reach this function; the slice here only guards direct callers.
    """
    password_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")
    except ValueError as e:
        logger.error(f"Password hashing failed: {e}")
        raise ValueError("Invalid password") from e


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """Verify a password against its bcrypt hash."""
    if not hashed:
        return False
    password_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        if pwd_context:
            try:
                return pwd_context.verify(password, hashed)
            except ValueError:
                return False
        return False


class TokenCodec:
    """
    Issues and verifies signed identity tokens.

    A token encodes the entity id and entity kind of a User or Company and
    expires after a fixed validity window. Tokens are stateless: there is no
    server-side revocation, a leaked token stays valid until it expires.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        validity: timedelta = timedelta(days=7),
    ):
        if not secret_key:
            raise ValueError("Token secret key must be configured")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.validity = validity

    def issue(self, entity_id: int, entity_kind: EntityKind, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.utcnow()
        claims = {
            "entity_id": int(entity_id),
            "entity_kind": EntityKind(entity_kind).value,
            "iat": issued_at,
            "exp": issued_at + self.validity,
        }
        return jwt.encode(claims, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Principal:
        """
        Decode a token back into the principal it was issued for.

        Raises:
            Unauthorized: signature invalid, token expired, or claims missing
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise Unauthorized("Token expired")
        except JWTError:
            raise Unauthorized("Invalid token")

        entity_id = payload.get("entity_id")
        entity_kind = payload.get("entity_kind")
        if entity_id is None or entity_kind is None:
            raise Unauthorized("Invalid token payload")

        try:
            return Principal(entity_id=int(entity_id), entity_kind=EntityKind(entity_kind))
        except (TypeError, ValueError):
            raise Unauthorized("Invalid token payload")
