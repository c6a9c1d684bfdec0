from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base

if TYPE_CHECKING:
    from ..user.user_model import User
    from ..vocabulary.vocabulary_model import Vocabulary


class WordStatus(str, enum.Enum):
    NEW = "new"
    LEARNING = "learning"
    KNOWN = "known"


class UserVocabularyProgress(Base):
    """
    Suit la progression d'un utilisateur sur un mot de vocabulaire spécifique.
    Créé à la première révision, mis à jour ensuite (jamais dupliqué).
    """
    __tablename__ = "user_vocabulary_progress"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    vocabulary_id: Mapped[int] = mapped_column(ForeignKey("vocabulary.id", ondelete="CASCADE"), index=True)

    status: Mapped[str] = mapped_column(String(20), default=WordStatus.NEW.value)
    times_reviewed: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    last_reviewed: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    user: Mapped["User"] = relationship(back_populates="vocabulary_progress")
    vocabulary: Mapped["Vocabulary"] = relationship(back_populates="user_progress")

    __table_args__ = (UniqueConstraint("user_id", "vocabulary_id", name="_user_vocabulary_uc"),)
