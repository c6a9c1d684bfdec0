"""Utility helpers for test factories."""

from __future__ import annotations

from datetime import datetime, timezone

from app.core.security import Identity, get_password_hash
from app.models.progress.user_progress_model import UserProgress
from app.models.user.badge_model import Badge
from app.models.user.user_model import User
from app.models.vocabulary.vocabulary_model import Vocabulary


def create_user(db, *, password: str = "secret123", with_progress: bool = True, **kwargs) -> User:
    defaults = {
        "name": "Learner",
        "email": "user@example.com",
        "hashed_password": get_password_hash(password),
        "is_admin": False,
        "created_at": datetime.now(timezone.utc),
    }
    defaults.update(kwargs)
    user = User(**defaults)
    if with_progress:
        user.progress = UserProgress(
            words_learned=0,
            total_xp=0,
            current_streak_days=0,
            last_active_date=datetime.now(timezone.utc).date(),
        )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_vocabulary(db, word: str = "Hallo", meaning: str = "Hello", category: str = "A1", **kwargs) -> Vocabulary:
    vocab = Vocabulary(
        word=word,
        meaning=meaning,
        example_sentence=kwargs.pop("example_sentence", ""),
        category=category,
        **kwargs,
    )
    db.add(vocab)
    db.commit()
    db.refresh(vocab)
    return vocab


def create_badge(
    db,
    name: str = "First Steps",
    criteria_type: str = "words_learned",
    criteria_value: int = 1,
    **kwargs,
) -> Badge:
    badge = Badge(
        name=name,
        description=kwargs.pop("description", name),
        icon=kwargs.pop("icon", "🌱"),
        criteria_type=criteria_type,
        criteria_value=criteria_value,
        **kwargs,
    )
    db.add(badge)
    db.commit()
    db.refresh(badge)
    return badge


def identity_for(user: User) -> Identity:
    return Identity(user_id=user.id, email=user.email, is_admin=bool(user.is_admin))
