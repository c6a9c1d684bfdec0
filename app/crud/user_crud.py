# Fichier: wortschatz/backend/app/crud/user_crud.py

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.core.security import generate_reset_code, get_password_hash
from app.models.progress.user_progress_model import UserProgress
from app.models.user.user_model import User
from app.schemas.user.user_schema import UserCreate


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """
    Récupère un utilisateur par son adresse email.

    Args:
        db: La session de base de données.
        email: L'email de l'utilisateur à rechercher.

    Returns:
        L'objet User s'il est trouvé, sinon None.
    """
    return db.query(User).filter(User.email == email.strip().lower()).first()


def create_user(db: Session, user: UserCreate, *, is_admin: bool = False, today: date | None = None) -> User:
    """
    Crée un nouvel utilisateur et son enregistrement de progression initial.

    La progression démarre à zéro avec ``last_active_date`` = date d'inscription (UTC,
    comme le calcul de la série).
    """
    db_user = User(
        email=user.email.strip().lower(),
        name=user.name.strip(),
        hashed_password=get_password_hash(user.password),
        is_admin=is_admin,
    )
    db_user.progress = UserProgress(
        words_learned=0,
        total_xp=0,
        current_streak_days=0,
        last_active_date=today or datetime.now(timezone.utc).date(),
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def issue_reset_code(db: Session, user: User, ttl: timedelta, *, now: datetime | None = None) -> str:
    """Génère un code à 6 chiffres, remplace le précédent et le persiste."""
    now = now or datetime.now(timezone.utc)
    code = generate_reset_code()
    user.reset_code = code
    user.reset_code_expires_at = now + ttl
    db.add(user)
    db.commit()
    return code


def update_password(db: Session, user: User, new_password: str) -> User:
    """Change le mot de passe et invalide le code de réinitialisation."""
    user.hashed_password = get_password_hash(new_password)
    user.reset_code = None
    user.reset_code_expires_at = None
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
