# Fichier: wortschatz/backend/app/schemas/vocabulary_schema.py

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field, field_validator

from app.models.vocabulary.vocabulary_model import VOCABULARY_CATEGORIES


def _check_category(value: str) -> str:
    value = value.strip()
    if value not in VOCABULARY_CATEGORIES:
        raise ValueError(f"invalid category '{value}'")
    return value


Category = Annotated[str, AfterValidator(_check_category)]


class VocabularyCreate(BaseModel):
    word: str = Field(min_length=1)
    meaning: str = Field(min_length=1)
    example_sentence: Optional[str] = ""
    category: Category

    @field_validator("word", "meaning")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class VocabularyUpdate(BaseModel):
    word: Optional[str] = None
    meaning: Optional[str] = None
    example_sentence: Optional[str] = None
    category: Optional[Category] = None


class VocabularyItem(BaseModel):
    id: int
    word: str
    meaning: str
    example_sentence: Optional[str] = ""
    category: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Flashcard(VocabularyItem):
    user_status: str = Field(serialization_alias="userStatus")
    times_reviewed: int = Field(serialization_alias="timesReviewed")
    last_reviewed: Optional[datetime] = Field(default=None, serialization_alias="lastReviewed")


class BulkTextImportIn(BaseModel):
    text: str = Field(min_length=1)


class ImportReportOut(BaseModel):
    message: str
    created: int
    attempted: int
    errors: List[str] = []
