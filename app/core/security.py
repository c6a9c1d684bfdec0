# Fichier: wortschatz/backend/app/core/security.py

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib import exc as passlib_exc
from passlib.context import CryptContext

from app.core.config import settings

# --- Configuration de la Sécurité ---
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = settings.ACCESS_TOKEN_EXPIRE_DAYS

ADMIN_ROLE = "admin"
USER_ROLE = "user"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Identity asserted by a verified access token."""

    user_id: int
    email: str
    is_admin: bool = False

    @property
    def roles(self) -> frozenset[str]:
        return frozenset({USER_ROLE, ADMIN_ROLE}) if self.is_admin else frozenset({USER_ROLE})


# --- Fonctions Utilitaires ---
def create_access_token(
    user_id: int,
    email: str,
    is_admin: bool = False,
    expires_delta: timedelta | None = None,
    now: datetime | None = None,
) -> str:
    """Crée un token d'accès JWT valable 7 jours par défaut."""
    issued_at = now or datetime.now(timezone.utc)
    expire = issued_at + (expires_delta or timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS))

    to_encode = {
        "sub": str(user_id),
        "email": email,
        "is_admin": bool(is_admin),
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str | None) -> Optional[Identity]:
    """Return the identity carried by ``token`` or ``None`` when it does not verify."""

    if not token:
        return None

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        logger.warning("Validation échouée: Le token a expiré.")
        return None
    except JWTError:
        logger.warning("Validation échouée: Le token est invalide ou mal formé.")
        return None

    try:
        user_id = int(payload["sub"])
        email = str(payload.get("email") or "")
    except (KeyError, TypeError, ValueError):
        logger.warning("Validation échouée: Le token ne contient pas de 'sub' exploitable.")
        return None

    return Identity(user_id=user_id, email=email, is_admin=bool(payload.get("is_admin", False)))


def verify_password(plain_password: str | None, hashed_password: str | None) -> bool:
    """Vérifie si un mot de passe en clair correspond à un mot de passe haché."""

    if not plain_password or not hashed_password:
        return False

    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError, passlib_exc.PasslibError) as exc:
        logger.warning("Password verification failed: %s", exc)
        return False


def get_password_hash(password: str) -> str:
    """Hache un mot de passe."""
    return pwd_context.hash(password)


def generate_reset_code() -> str:
    """Code numérique à 6 chiffres envoyé pour la réinitialisation du mot de passe."""
    return str(100000 + secrets.randbelow(900000))
