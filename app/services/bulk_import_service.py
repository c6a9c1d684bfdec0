"""Import en masse du vocabulaire.

Deux formats d'entrée :

* texte collé, une entrée par ligne, champs séparés par ``|`` ;
* CSV, en-tête optionnel (détecté si la première ligne contient ``word``),
  champs éventuellement entre guillemets.

Dans les deux cas une ligne à 3 champs est ``mot | sens | catégorie`` et une
ligne à 4 champs ``mot | sens | exemple | catégorie``. Les fonctions
d'analyse sont pures ; seule :func:`import_drafts` touche la base.
"""
from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from io import StringIO
from typing import Iterable, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AppError
from app.crud import vocabulary_crud
from app.models.vocabulary.vocabulary_model import VOCABULARY_CATEGORIES
from app.schemas.vocabulary_schema import VocabularyCreate

logger = logging.getLogger(__name__)

PIPE_DELIMITER = "|"


@dataclass(frozen=True)
class VocabularyDraft:
    word: str
    meaning: str
    example_sentence: str
    category: str

    def to_create_schema(self) -> VocabularyCreate:
        return VocabularyCreate(
            word=self.word,
            meaning=self.meaning,
            example_sentence=self.example_sentence,
            category=self.category,
        )


@dataclass
class ImportParseResult:
    drafts: List[VocabularyDraft] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass
class ImportReport:
    created: int
    attempted: int
    errors: List[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        return f"Imported {self.created} of {self.attempted} entries"


def _draft_from_fields(fields: Sequence[str], line_number: int) -> tuple[Optional[VocabularyDraft], Optional[str]]:
    fields = [value.strip() for value in fields]
    if len(fields) < 3:
        return None, f"Line {line_number}: invalid format"

    if len(fields) == 3:
        word, meaning, category = fields
        example = ""
    else:
        word, meaning, example, category = fields[:4]

    if not word or not meaning:
        return None, f"Line {line_number}: word and meaning are required"
    if category not in VOCABULARY_CATEGORIES:
        return None, f"Line {line_number}: invalid category '{category}'"

    return VocabularyDraft(word=word, meaning=meaning, example_sentence=example, category=category), None


def _collect(rows: Iterable[tuple[int, Sequence[str]]], *, strict: bool) -> ImportParseResult:
    result = ImportParseResult()
    for line_number, fields in rows:
        draft, error = _draft_from_fields(fields, line_number)
        if error:
            result.errors.append(error)
        else:
            result.drafts.append(draft)

    if strict and result.errors:
        # Tout ou rien : une seule ligne invalide rejette le lot.
        result.drafts = []
    return result


def parse_bulk_text(raw_text: str, *, strict: bool | None = None) -> ImportParseResult:
    """Analyse le format texte ``mot | sens | [exemple |] catégorie``."""
    if strict is None:
        strict = settings.BULK_IMPORT_STRICT_TEXT

    rows = [
        (line_number, line.split(PIPE_DELIMITER))
        for line_number, line in enumerate((raw_text or "").splitlines(), start=1)
        if line.strip()
    ]
    return _collect(rows, strict=strict)


def parse_csv(raw_text: str, *, strict: bool | None = None) -> ImportParseResult:
    """Analyse un CSV ; la première ligne est ignorée si elle contient ``word``."""
    if strict is None:
        strict = settings.BULK_IMPORT_STRICT_CSV

    lines = (raw_text or "").splitlines()
    start = 0
    if lines and "word" in lines[0].lower():
        start = 1

    reader = csv.reader(StringIO("\n".join(lines[start:])), skipinitialspace=True)
    rows = []
    for offset, fields in enumerate(reader):
        if not any(value.strip() for value in fields):
            continue
        rows.append((start + offset + 1, [value.strip() for value in fields]))
    return _collect(rows, strict=strict)


def parse_upload(filename: str | None, content: str) -> ImportParseResult:
    """Choisit l'analyseur selon l'extension du fichier téléversé."""
    if (filename or "").lower().endswith(".csv"):
        return parse_csv(content)
    return parse_bulk_text(content)


def import_drafts(db: Session, drafts: Sequence[VocabularyDraft]) -> ImportReport:
    """Crée chaque brouillon individuellement ; un échec n'interrompt pas le lot."""
    report = ImportReport(created=0, attempted=len(drafts))
    for draft in drafts:
        try:
            vocabulary_crud.create_vocabulary(db, draft.to_create_schema())
        except (AppError, PydanticValidationError, SQLAlchemyError) as exc:
            db.rollback()
            logger.warning("Import de '%s' échoué: %s", draft.word, exc)
            report.errors.append(f"{draft.word}: {exc}")
            continue
        report.created += 1

    logger.info("Import en masse: %s", report.summary)
    return report
