"""Flashcards : catalogue enrichi du statut de l'utilisateur et évènements de révision."""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v2.dependencies import get_current_identity, get_db
from app.core.exceptions import NotFoundError
from app.core.security import Identity
from app.schemas.progress.progress_schema import ReviewIn, ReviewOut
from app.schemas.vocabulary_schema import Flashcard
from app.services.progress_service import ProgressService

router = APIRouter()


@router.get("", response_model=List[Flashcard], summary="Flashcards de l'utilisateur")
def list_flashcards(
    category: Optional[str] = None,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    service = ProgressService(db=db, user_id=identity.user_id)
    return service.list_flashcards(category=category)


@router.post("/progress", response_model=ReviewOut, summary="Enregistrer une révision")
def record_review(
    payload: ReviewIn,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    service = ProgressService(db=db, user_id=identity.user_id)
    result = service.record_review(payload.vocabulary_id, payload.status)
    if result.word_progress is None:
        raise NotFoundError("vocabulary_not_found", "Vocabulary entry not found")
    return ReviewOut(
        status=result.word_progress.status,
        times_reviewed=result.word_progress.times_reviewed,
        awarded_badge_ids=sorted(result.awarded_badge_ids),
    )
