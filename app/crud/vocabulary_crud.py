# Fichier: wortschatz/backend/app/crud/vocabulary_crud.py

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, TransientStoreError, ValidationError
from app.models.vocabulary.vocabulary_model import Vocabulary
from app.schemas.vocabulary_schema import VocabularyCreate, VocabularyUpdate

logger = logging.getLogger(__name__)


def list_vocabulary(db: Session, category: Optional[str] = None) -> List[Vocabulary]:
    """Catalogue complet (ou filtré par catégorie), du plus récent au plus ancien."""
    query = db.query(Vocabulary)
    if category:
        query = query.filter(Vocabulary.category == category)
    return query.order_by(Vocabulary.created_at.desc(), Vocabulary.id.desc()).all()


def get_vocabulary(db: Session, vocabulary_id: int) -> Optional[Vocabulary]:
    return db.get(Vocabulary, vocabulary_id)


def create_vocabulary(db: Session, payload: VocabularyCreate) -> Vocabulary:
    entry = Vocabulary(
        word=payload.word,
        meaning=payload.meaning,
        example_sentence=(payload.example_sentence or "").strip(),
        category=payload.category,
    )
    db.add(entry)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Création du vocabulaire '%s' échouée: %s", payload.word, exc)
        raise TransientStoreError() from exc
    db.refresh(entry)
    return entry


def update_vocabulary(db: Session, vocabulary_id: int, payload: VocabularyUpdate) -> Vocabulary:
    entry = get_vocabulary(db, vocabulary_id)
    if entry is None:
        raise NotFoundError("vocabulary_not_found", "Vocabulary entry not found")

    changes = payload.model_dump(exclude_unset=True)
    for field_name in ("word", "meaning"):
        if field_name in changes:
            value = (changes[field_name] or "").strip()
            if not value:
                raise ValidationError("missing_required_fields", f"{field_name} must not be blank")
            changes[field_name] = value
    if "category" in changes and changes["category"] is None:
        raise ValidationError("missing_required_fields", "category must not be blank")
    if "example_sentence" in changes:
        changes["example_sentence"] = (changes["example_sentence"] or "").strip()

    for field_name, value in changes.items():
        setattr(entry, field_name, value)

    db.commit()
    db.refresh(entry)
    return entry


def delete_vocabulary(db: Session, vocabulary_id: int) -> None:
    entry = get_vocabulary(db, vocabulary_id)
    if entry is None:
        raise NotFoundError("vocabulary_not_found", "Vocabulary entry not found")
    db.delete(entry)
    db.commit()
