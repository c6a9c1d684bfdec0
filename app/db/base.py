"""Déclare l'ensemble des modèles SQLAlchemy pour ``Base.metadata.create_all``."""

from app.db.base_class import Base

# Utilisateurs et badges
from app.models.user.user_model import User
from app.models.user.badge_model import Badge, UserBadge

# Catalogue de vocabulaire
from app.models.vocabulary.vocabulary_model import Vocabulary

# Progression
from app.models.progress.user_progress_model import UserProgress
from app.models.progress.user_vocabulary_progress_model import UserVocabularyProgress

__all__ = (
    "Base",
    "User",
    "Badge",
    "UserBadge",
    "Vocabulary",
    "UserProgress",
    "UserVocabularyProgress",
)
