"""Back-office SQLAdmin : catalogue de vocabulaire, badges et progression."""

from __future__ import annotations

from sqladmin import ModelView

from app.models.progress.user_progress_model import UserProgress
from app.models.progress.user_vocabulary_progress_model import UserVocabularyProgress
from app.models.user.badge_model import Badge, UserBadge
from app.models.user.user_model import User
from app.models.vocabulary.vocabulary_model import Vocabulary


class UserAdmin(ModelView, model=User):
    name = "Utilisateur"
    name_plural = "Utilisateurs"
    icon = "fa-solid fa-user"
    category = "Utilisateurs"
    column_list = [User.id, User.name, User.email, User.is_admin, User.created_at]
    column_searchable_list = [User.name, User.email]
    column_sortable_list = [User.created_at]
    column_default_sort = [(User.created_at, True)]  # newest first
    column_labels = {User.is_admin: "Administrateur"}
    column_details_exclude_list = [User.hashed_password, User.reset_code, User.reset_code_expires_at]
    form_excluded_columns = [
        "hashed_password",
        "reset_code",
        "reset_code_expires_at",
        "progress",
        "vocabulary_progress",
        "user_badges",
    ]
    can_export = True
    page_size = 50


class VocabularyAdmin(ModelView, model=Vocabulary):
    name = "Mot"
    name_plural = "Vocabulaire"
    icon = "fa-solid fa-book"
    category = "Catalogue"
    column_list = [Vocabulary.id, Vocabulary.word, Vocabulary.meaning, Vocabulary.category, Vocabulary.created_at]
    column_searchable_list = [Vocabulary.word, Vocabulary.meaning]
    column_sortable_list = [Vocabulary.category, Vocabulary.created_at]
    column_default_sort = [(Vocabulary.created_at, True)]
    form_excluded_columns = ["user_progress", "created_at"]
    can_export = True
    page_size = 100


class BadgeAdmin(ModelView, model=Badge):
    name = "Badge"
    name_plural = "Badges"
    icon = "fa-solid fa-award"
    category = "Gamification"
    column_list = [Badge.id, Badge.icon, Badge.name, Badge.criteria_type, Badge.criteria_value]
    column_searchable_list = [Badge.name]
    form_excluded_columns = ["user_badges", "created_at"]
    can_export = True


class UserBadgeAdmin(ModelView, model=UserBadge):
    name = "Badge utilisateur"
    name_plural = "Badges utilisateur"
    icon = "fa-solid fa-medal"
    category = "Gamification"
    column_list = [UserBadge.user, UserBadge.badge, UserBadge.awarded_at]
    column_default_sort = [(UserBadge.awarded_at, True)]
    # Les badges obtenus ne sont jamais modifiés ni retirés.
    can_create = False
    can_edit = False
    can_delete = False
    can_export = True


class UserProgressAdmin(ModelView, model=UserProgress):
    name = "Progression"
    name_plural = "Progressions"
    icon = "fa-solid fa-chart-line"
    category = "Progression"
    column_list = [
        UserProgress.user,
        UserProgress.words_learned,
        UserProgress.total_xp,
        UserProgress.current_streak_days,
        UserProgress.last_active_date,
    ]
    column_sortable_list = [UserProgress.total_xp, UserProgress.current_streak_days]
    can_create = False
    can_edit = False
    can_delete = False
    can_export = True


class UserVocabularyProgressAdmin(ModelView, model=UserVocabularyProgress):
    name = "Progression par mot"
    name_plural = "Progressions par mot"
    icon = "fa-solid fa-list-check"
    category = "Progression"
    column_list = [
        UserVocabularyProgress.user,
        UserVocabularyProgress.vocabulary,
        UserVocabularyProgress.status,
        UserVocabularyProgress.times_reviewed,
        UserVocabularyProgress.last_reviewed,
    ]
    column_default_sort = [(UserVocabularyProgress.last_reviewed, True)]
    can_create = False
    can_edit = False
    can_export = True


ADMIN_VIEWS = (
    UserAdmin,
    VocabularyAdmin,
    BadgeAdmin,
    UserBadgeAdmin,
    UserProgressAdmin,
    UserVocabularyProgressAdmin,
)
