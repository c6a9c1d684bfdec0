from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.user.badge_schema import UserBadgeRead


class ReviewIn(BaseModel):
    """Évènement de révision d'une flashcard."""

    vocabulary_id: int = Field(alias="vocabularyId")
    status: Literal["learning", "known"]

    class Config:
        populate_by_name = True


class ReviewOut(BaseModel):
    success: bool = True
    status: str
    times_reviewed: int
    awarded_badge_ids: List[int] = []


class AggregateProgressRead(BaseModel):
    words_learned: int = 0
    total_xp: int = 0
    current_streak_days: int = 0
    last_active_date: Optional[date] = None

    class Config:
        from_attributes = True


class ProgressResponse(BaseModel):
    progress: AggregateProgressRead
    badges: List[UserBadgeRead]

