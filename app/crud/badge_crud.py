import logging
from datetime import datetime, timezone
from typing import List, Optional, Set

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import ConflictError, NotFoundError
from app.gamification.badge_rules import is_eligible
from app.models.progress.user_progress_model import UserProgress
from app.models.user.badge_model import Badge, UserBadge
from app.schemas.user.badge_schema import BadgeCreate, BadgeRead, BadgeUpdate, BadgeWithStatus

logger = logging.getLogger(__name__)


def get_badges_with_status(db: Session, user_id: int) -> List[BadgeWithStatus]:
    badges = db.query(Badge).order_by(Badge.criteria_type, Badge.criteria_value, Badge.id).all()
    user_badges = (
        db.query(UserBadge)
        .filter(UserBadge.user_id == user_id)
        .all()
    )
    awarded_map = {ub.badge_id: ub.awarded_at for ub in user_badges}

    result: List[BadgeWithStatus] = []
    for badge in badges:
        result.append(
            BadgeWithStatus(
                badge=BadgeRead.model_validate(badge),
                is_unlocked=badge.id in awarded_map,
                awarded_at=awarded_map.get(badge.id),
            )
        )
    return result


def get_user_badges(db: Session, user_id: int) -> List[UserBadge]:
    """Badges obtenus par l'utilisateur, avec le détail du badge."""
    return (
        db.query(UserBadge)
        .options(joinedload(UserBadge.badge))
        .filter(UserBadge.user_id == user_id)
        .order_by(UserBadge.awarded_at.asc(), UserBadge.id.asc())
        .all()
    )


def award_badge(db: Session, user_id: int, badge_id: int, *, now: datetime | None = None) -> Optional[UserBadge]:
    """Insère l'attribution dans un savepoint.

    Une violation de la contrainte (user, badge) signifie qu'une évaluation
    concurrente a déjà attribué le badge : on renvoie ``None`` sans erreur.
    """
    user_badge = UserBadge(
        user_id=user_id,
        badge_id=badge_id,
        awarded_at=now or datetime.now(timezone.utc),
    )
    try:
        with db.begin_nested():
            db.add(user_badge)
    except IntegrityError:
        logger.info("Badge %s déjà attribué à l'utilisateur %s.", badge_id, user_id)
        return None
    return user_badge


def evaluate_badges(db: Session, user_id: int) -> Set[int]:
    """Attribue les badges nouvellement éligibles et renvoie leurs identifiants.

    Chaque attribution est indépendante : un échec est journalisé et les
    autres badges sont tout de même évalués.
    """
    progress = db.query(UserProgress).filter(UserProgress.user_id == user_id).first()
    if progress is None:
        return set()

    already_awarded = {
        badge_id
        for (badge_id,) in db.query(UserBadge.badge_id).filter(UserBadge.user_id == user_id).all()
    }

    awarded: Set[int] = set()
    for badge in db.query(Badge).all():
        if badge.id in already_awarded:
            continue
        if not is_eligible(badge.criteria_type, badge.criteria_value, progress):
            continue
        try:
            if award_badge(db, user_id, badge.id) is not None:
                awarded.add(badge.id)
        except SQLAlchemyError as exc:
            logger.warning("Attribution du badge %s à l'utilisateur %s échouée: %s", badge.id, user_id, exc)

    if awarded:
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("Enregistrement des badges de l'utilisateur %s échoué: %s", user_id, exc)
            return set()
        logger.info("Badges attribués à l'utilisateur %s: %s", user_id, sorted(awarded))
    return awarded


# --- Catalogue (administration) ---
def list_badges(db: Session) -> List[Badge]:
    return db.query(Badge).order_by(Badge.id).all()


def create_badge(db: Session, payload: BadgeCreate) -> Badge:
    badge = Badge(**payload.model_dump())
    db.add(badge)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("badge_exists", "A badge with this name already exists") from exc
    db.refresh(badge)
    return badge


def update_badge(db: Session, badge_id: int, payload: BadgeUpdate) -> Badge:
    badge = db.get(Badge, badge_id)
    if badge is None:
        raise NotFoundError("badge_not_found", "Badge not found")
    for field_name, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(badge, field_name, value)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("badge_exists", "A badge with this name already exists") from exc
    db.refresh(badge)
    return badge


def delete_badge(db: Session, badge_id: int) -> None:
    badge = db.get(Badge, badge_id)
    if badge is None:
        raise NotFoundError("badge_not_found", "Badge not found")
    db.delete(badge)
    db.commit()
