from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v2.dependencies import get_current_identity, get_db, require_admin
from app.core.security import Identity
from app.crud import badge_crud
from app.schemas.user.badge_schema import BadgeCreate, BadgeRead, BadgeUpdate, BadgeWithStatus

router = APIRouter()


@router.get("", response_model=list[BadgeWithStatus], summary="Liste des badges et progression")
def list_badges(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return badge_crud.get_badges_with_status(db, identity.user_id)


@router.post("", response_model=BadgeRead, status_code=status.HTTP_201_CREATED)
def create_badge(
    payload: BadgeCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    return badge_crud.create_badge(db, payload)


@router.put("/{badge_id}", response_model=BadgeRead)
def update_badge(
    badge_id: int,
    payload: BadgeUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    return badge_crud.update_badge(db, badge_id, payload)


@router.delete("/{badge_id}")
def delete_badge(
    badge_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    badge_crud.delete_badge(db, badge_id)
    return {"success": True}
