from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base

if TYPE_CHECKING:
    from ..user.user_model import User


class UserProgress(Base):
    """
    Agrégat de progression d'un utilisateur (un enregistrement par utilisateur).

    ``version`` sert de verrou optimiste : toute écriture concurrente basée sur
    une lecture périmée lève ``StaleDataError``.
    """
    __tablename__ = "user_progress"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True, index=True, nullable=False
    )
    words_learned: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    total_xp: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    current_streak_days: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    last_active_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user: Mapped["User"] = relationship(back_populates="progress")

    __mapper_args__ = {"version_id_col": version}
