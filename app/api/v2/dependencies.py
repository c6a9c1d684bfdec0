import logging
import re
from typing import Generator, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core import security
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.security import ADMIN_ROLE, Identity
from app.db import session as db_session

log = logging.getLogger(__name__)

_BEARER_PATTERN = re.compile(r"^bearer\s+(\S+)$", flags=re.IGNORECASE)


def get_db() -> Generator[Session, None, None]:
    """Session SQLAlchemy synchrone, fermée en fin de requête."""
    db = db_session.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def extract_bearer_token(authorization: str | None) -> Optional[str]:
    """Return the token of a well-formed ``Bearer <token>`` header, else ``None``."""

    if not authorization:
        return None
    match = _BEARER_PATTERN.match(authorization.strip())
    if not match:
        return None
    return match.group(1)


def authenticate(credential: str | None) -> Optional[Identity]:
    """Resolve an ``Authorization`` header value to an identity.

    Missing, malformed, badly signed and expired credentials all resolve to
    ``None``; the caller decides how to reject.
    """

    token = extract_bearer_token(credential)
    if token is None:
        return None
    return security.decode_access_token(token)


def authorize(identity: Optional[Identity], required_role: str) -> bool:
    return identity is not None and required_role in identity.roles


def get_current_identity(request: Request) -> Identity:
    identity = authenticate(request.headers.get("Authorization"))
    if identity is None:
        log.warning("Validation échouée: credential absent ou invalide.")
        raise AuthenticationError()
    return identity


def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if not authorize(identity, ADMIN_ROLE):
        log.warning("Accès administrateur refusé pour l'utilisateur %s.", identity.user_id)
        raise AuthorizationError(message="Unauthorized - Admin only")
    return identity
