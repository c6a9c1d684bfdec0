from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from app.api.v2.dependencies import get_db, require_admin
from app.core.exceptions import ValidationError
from app.core.security import Identity
from app.crud import vocabulary_crud
from app.schemas import vocabulary_schema
from app.services import bulk_import_service
from app.services.bulk_import_service import ImportParseResult

router = APIRouter()


@router.get("", response_model=List[vocabulary_schema.VocabularyItem], summary="Catalogue de vocabulaire")
def list_vocabulary(category: Optional[str] = None, db: Session = Depends(get_db)):
    return vocabulary_crud.list_vocabulary(db, category=category)


@router.post("", response_model=vocabulary_schema.VocabularyItem, status_code=status.HTTP_201_CREATED)
def create_vocabulary(
    payload: vocabulary_schema.VocabularyCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    return vocabulary_crud.create_vocabulary(db, payload)


@router.put("/{vocabulary_id}", response_model=vocabulary_schema.VocabularyItem)
def update_vocabulary(
    vocabulary_id: int,
    payload: vocabulary_schema.VocabularyUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    return vocabulary_crud.update_vocabulary(db, vocabulary_id, payload)


@router.delete("/{vocabulary_id}")
def delete_vocabulary(
    vocabulary_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    vocabulary_crud.delete_vocabulary(db, vocabulary_id)
    return {"success": True}


def _run_import(db: Session, parsed: ImportParseResult) -> vocabulary_schema.ImportReportOut:
    if not parsed.drafts:
        raise ValidationError(
            "import_failed",
            "No valid entries to import",
            details={"errors": parsed.errors},
        )
    report = bulk_import_service.import_drafts(db, parsed.drafts)
    return vocabulary_schema.ImportReportOut(
        message=report.summary,
        created=report.created,
        attempted=report.attempted,
        errors=parsed.errors + report.errors,
    )


@router.post("/import/text", response_model=vocabulary_schema.ImportReportOut, summary="Import en masse (texte)")
def import_text(
    payload: vocabulary_schema.BulkTextImportIn,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    return _run_import(db, bulk_import_service.parse_bulk_text(payload.text))


@router.post("/import/file", response_model=vocabulary_schema.ImportReportOut, summary="Import en masse (fichier)")
async def import_file(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    raw = await file.read()
    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ValidationError("invalid_encoding", "File must be UTF-8 encoded") from exc
    return _run_import(db, bulk_import_service.parse_upload(file.filename, content))
