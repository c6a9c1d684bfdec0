"""
Règles d'éligibilité des badges.

Un badge du catalogue se débloque lorsqu'une métrique de l'agrégat de
progression atteint son seuil (``criteria_value``). Le mapping ci-dessous
relie chaque ``criteria_type`` à la métrique correspondante ; un type absent
du mapping n'est jamais éligible.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol

from app.models.user.badge_model import BadgeCriteria


class ProgressSnapshot(Protocol):
    words_learned: int
    current_streak_days: int


CRITERIA_METRICS: Dict[str, Callable[[ProgressSnapshot], int]] = {
    BadgeCriteria.WORDS_LEARNED.value: lambda progress: progress.words_learned or 0,
    BadgeCriteria.STREAK_DAYS.value: lambda progress: progress.current_streak_days or 0,
}


def is_eligible(criteria_type: Optional[str], criteria_value: Optional[int], progress: ProgressSnapshot) -> bool:
    metric = CRITERIA_METRICS.get(criteria_type or "")
    if metric is None or criteria_value is None:
        return False
    return metric(progress) >= criteria_value


@dataclass(frozen=True)
class StarterBadge:
    name: str
    description: str
    icon: str
    criteria_type: str
    criteria_value: int


# Catalogue initial (voir scripts/seed_data.py)
STARTER_BADGES: tuple[StarterBadge, ...] = (
    StarterBadge("First Steps", "Learn your first word!", "🌱", "words_learned", 1),
    StarterBadge("Getting Started", "Learn 10 words", "📚", "words_learned", 10),
    StarterBadge("Word Master", "Learn 50 words", "🏆", "words_learned", 50),
    StarterBadge("Vocabulary Expert", "Learn 100 words", "👑", "words_learned", 100),
    StarterBadge("On Fire!", "Maintain a 3-day streak", "🔥", "streak_days", 3),
    StarterBadge("Dedicated Learner", "Maintain a 7-day streak", "⭐", "streak_days", 7),
    StarterBadge("Unstoppable", "Maintain a 30-day streak", "💪", "streak_days", 30),
)
