from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base

if TYPE_CHECKING:
    from ..progress.user_vocabulary_progress_model import UserVocabularyProgress


class VocabularyCategory(str, enum.Enum):
    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"
    GREETINGS = "Greetings"
    NUMBERS = "Numbers"
    COLORS = "Colors"
    FAMILY = "Family"
    FOOD = "Food"
    TRAVEL = "Travel"
    WORK = "Work"
    HOME = "Home"
    HEALTH = "Health"
    TIME = "Time"
    WEATHER = "Weather"
    ANIMALS = "Animals"
    VERBS = "Verbs"
    PHRASES = "Phrases"


VOCABULARY_CATEGORIES = frozenset(category.value for category in VocabularyCategory)


class Vocabulary(Base):
    """Entrée du catalogue de vocabulaire (gérée par les administrateurs)."""

    __tablename__ = "vocabulary"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    word: Mapped[str] = mapped_column(String(255), nullable=False)
    meaning: Mapped[str] = mapped_column(String(500), nullable=False)
    example_sentence: Mapped[str] = mapped_column(Text, default="", server_default="")
    category: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), index=True)

    user_progress: Mapped[List["UserVocabularyProgress"]] = relationship(
        back_populates="vocabulary", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<Vocabulary(id={self.id}, word='{self.word}', category='{self.category}')>"
