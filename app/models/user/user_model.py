from sqlalchemy import Integer, String, Boolean, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base_class import Base
from typing import List, Optional, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from .badge_model import UserBadge
    from ..progress.user_progress_model import UserProgress
    from ..progress.user_vocabulary_progress_model import UserVocabularyProgress


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # --- Réinitialisation du mot de passe (code à 6 chiffres) ---
    reset_code: Mapped[Optional[str]] = mapped_column(String(12), nullable=True)
    reset_code_expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    progress: Mapped[Optional["UserProgress"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", uselist=False
    )
    vocabulary_progress: Mapped[List["UserVocabularyProgress"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    user_badges: Mapped[List["UserBadge"]] = relationship(back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
