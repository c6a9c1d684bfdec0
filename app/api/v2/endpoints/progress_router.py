"""Endpoint de progression : agrégat et badges obtenus."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v2.dependencies import get_current_identity, get_db
from app.core.security import Identity
from app.schemas.progress.progress_schema import ProgressResponse
from app.services.progress_service import ProgressService

router = APIRouter()


@router.get("", response_model=ProgressResponse, summary="Récupérer la progression")
def get_progress(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> dict:
    """Renvoie l'agrégat (état zéro si absent) et les badges obtenus avec leur détail."""
    service = ProgressService(db=db, user_id=identity.user_id)
    return service.get_progress()
