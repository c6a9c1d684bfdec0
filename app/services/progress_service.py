import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.config import settings
from app.core.exceptions import TransientStoreError, ValidationError
from app.crud import badge_crud, vocabulary_crud
from app.models.progress.user_progress_model import UserProgress
from app.models.progress.user_vocabulary_progress_model import UserVocabularyProgress, WordStatus
from app.models.vocabulary.vocabulary_model import Vocabulary

logger = logging.getLogger(__name__)

REVIEW_OUTCOMES = frozenset({WordStatus.LEARNING.value, WordStatus.KNOWN.value})


def compute_streak(last_active_date: Optional[date], today: date, current_streak_days: int) -> int:
    """Série de jours consécutifs après une activité ``today``.

    Même jour : inchangée. Lendemain exact : +1. Sinon (trou ou aucune date) : 1.
    """
    if last_active_date == today:
        return current_streak_days or 0
    if last_active_date is not None and last_active_date == today - timedelta(days=1):
        return (current_streak_days or 0) + 1
    return 1


@dataclass
class ReviewResult:
    word_progress: Optional[UserVocabularyProgress]
    aggregate: Optional[UserProgress] = None
    awarded_badge_ids: set[int] = field(default_factory=set)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProgressService:
    def __init__(
        self,
        db: Session,
        user_id: int,
        *,
        clock: Callable[[], datetime] = _utcnow,
        xp_per_known_review: int | None = None,
        count_repeat_known_reviews: bool | None = None,
        max_retries: int | None = None,
    ):
        self.db = db
        self.user_id = user_id
        self._clock = clock
        self.xp_per_known_review = (
            settings.XP_PER_KNOWN_REVIEW if xp_per_known_review is None else xp_per_known_review
        )
        self.count_repeat_known_reviews = (
            settings.COUNT_REPEAT_KNOWN_REVIEWS
            if count_repeat_known_reviews is None
            else count_repeat_known_reviews
        )
        self.max_retries = settings.PROGRESS_UPDATE_MAX_RETRIES if max_retries is None else max_retries

    # -----------------------------
    # Review events
    # -----------------------------

    def record_review(self, vocabulary_id: int, outcome: str) -> ReviewResult:
        """Enregistre une révision de flashcard.

        L'écriture par mot est critique (une erreur remonte à l'appelant). La
        mise à jour de l'agrégat et l'évaluation des badges ne le sont pas :
        leurs échecs sont journalisés et la révision reste un succès.
        """
        if not vocabulary_id or not outcome:
            raise ValidationError("missing_required_fields", "Missing required fields")
        if outcome not in REVIEW_OUTCOMES:
            raise ValidationError("invalid_status", f"Invalid status '{outcome}'")

        if self.db.get(Vocabulary, vocabulary_id) is None:
            logger.warning(
                "Révision ignorée: vocabulaire %s introuvable (utilisateur %s).", vocabulary_id, self.user_id
            )
            return ReviewResult(word_progress=None)

        now = self._clock()
        word_progress, previous_status = self._upsert_word_progress(vocabulary_id, outcome, now)
        result = ReviewResult(word_progress=word_progress)

        if outcome != WordStatus.KNOWN.value:
            return result

        counts_as_learned = self.count_repeat_known_reviews or previous_status != WordStatus.KNOWN.value
        try:
            result.aggregate = self._apply_known_review(now.date(), counts_as_learned)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning("Mise à jour de la progression de l'utilisateur %s échouée: %s", self.user_id, exc)
            return result

        if result.aggregate is not None:
            try:
                result.awarded_badge_ids = badge_crud.evaluate_badges(self.db, self.user_id)
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.warning("Évaluation des badges de l'utilisateur %s échouée: %s", self.user_id, exc)
        return result

    def _get_word_progress(self, vocabulary_id: int) -> Optional[UserVocabularyProgress]:
        return (
            self.db.query(UserVocabularyProgress)
            .filter_by(user_id=self.user_id, vocabulary_id=vocabulary_id)
            .first()
        )

    def _upsert_word_progress(
        self, vocabulary_id: int, outcome: str, now: datetime
    ) -> tuple[UserVocabularyProgress, Optional[str]]:
        try:
            entry = self._get_word_progress(vocabulary_id)
            previous_status = entry.status if entry else None
            if entry is None:
                entry = UserVocabularyProgress(
                    user_id=self.user_id,
                    vocabulary_id=vocabulary_id,
                    status=outcome,
                    times_reviewed=1,
                    last_reviewed=now,
                )
                self.db.add(entry)
            else:
                entry.status = outcome
                entry.last_reviewed = now
                entry.times_reviewed = (entry.times_reviewed or 0) + 1
            self.db.commit()
        except IntegrityError:
            # Première révision concurrente du même mot : la ligne existe désormais.
            self.db.rollback()
            return self._retry_word_update(vocabulary_id, outcome, now)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Écriture de la progression du mot %s échouée: %s", vocabulary_id, exc)
            raise TransientStoreError() from exc

        self.db.refresh(entry)
        return entry, previous_status

    def _retry_word_update(
        self, vocabulary_id: int, outcome: str, now: datetime
    ) -> tuple[UserVocabularyProgress, Optional[str]]:
        try:
            entry = self._get_word_progress(vocabulary_id)
            if entry is None:
                raise TransientStoreError()
            previous_status = entry.status
            entry.status = outcome
            entry.last_reviewed = now
            entry.times_reviewed = (entry.times_reviewed or 0) + 1
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Écriture de la progression du mot %s échouée: %s", vocabulary_id, exc)
            raise TransientStoreError() from exc
        self.db.refresh(entry)
        return entry, previous_status

    def _apply_known_review(self, today: date, counts_as_learned: bool) -> Optional[UserProgress]:
        """Met à jour l'agrégat avec verrou optimiste (relecture + nouvel essai si périmé)."""
        for attempt in range(1, self.max_retries + 1):
            progress = (
                self.db.query(UserProgress)
                .filter(UserProgress.user_id == self.user_id)
                .populate_existing()
                .first()
            )
            if progress is None:
                logger.warning("Aucune progression pour l'utilisateur %s, mise à jour ignorée.", self.user_id)
                return None

            progress.current_streak_days = compute_streak(
                progress.last_active_date, today, progress.current_streak_days
            )
            if counts_as_learned:
                progress.words_learned = (progress.words_learned or 0) + 1
                progress.total_xp = (progress.total_xp or 0) + self.xp_per_known_review
            progress.last_active_date = today

            try:
                self.db.commit()
            except StaleDataError:
                self.db.rollback()
                logger.info(
                    "Conflit de version sur la progression de l'utilisateur %s (tentative %s/%s).",
                    self.user_id,
                    attempt,
                    self.max_retries,
                )
                continue
            self.db.refresh(progress)
            return progress

        logger.warning(
            "Progression de l'utilisateur %s non mise à jour après %s tentatives.", self.user_id, self.max_retries
        )
        return None

    # -----------------------------
    # Read models
    # -----------------------------

    def get_aggregate(self) -> Optional[UserProgress]:
        return self.db.query(UserProgress).filter(UserProgress.user_id == self.user_id).first()

    def get_progress(self) -> dict:
        """Agrégat (état zéro si absent) et badges obtenus avec leur détail."""
        aggregate = self.get_aggregate()
        progress = {
            "words_learned": 0,
            "total_xp": 0,
            "current_streak_days": 0,
            "last_active_date": None,
        }
        if aggregate is not None:
            progress.update(
                words_learned=aggregate.words_learned or 0,
                total_xp=aggregate.total_xp or 0,
                current_streak_days=aggregate.current_streak_days or 0,
                last_active_date=aggregate.last_active_date,
            )
        return {"progress": progress, "badges": badge_crud.get_user_badges(self.db, self.user_id)}

    def list_flashcards(self, category: Optional[str] = None) -> list[dict]:
        """Catalogue enrichi du statut de l'utilisateur sur chaque mot."""
        vocabulary = vocabulary_crud.list_vocabulary(self.db, category=category)
        progress_by_word = {
            entry.vocabulary_id: entry
            for entry in self.db.query(UserVocabularyProgress).filter_by(user_id=self.user_id).all()
        }

        flashcards = []
        for vocab in vocabulary:
            entry = progress_by_word.get(vocab.id)
            flashcards.append(
                {
                    "id": vocab.id,
                    "word": vocab.word,
                    "meaning": vocab.meaning,
                    "example_sentence": vocab.example_sentence or "",
                    "category": vocab.category,
                    "created_at": vocab.created_at,
                    "user_status": entry.status if entry else WordStatus.NEW.value,
                    "times_reviewed": entry.times_reviewed if entry else 0,
                    "last_reviewed": entry.last_reviewed if entry else None,
                }
            )
        return flashcards
