from __future__ import annotations

import pytest

from app.api.v2.endpoints import badge_router, flashcard_router, progress_router
from app.core.exceptions import NotFoundError
from app.schemas.progress.progress_schema import ProgressResponse, ReviewIn
from tests.utils import create_badge, create_user, create_vocabulary, identity_for


@pytest.fixture()
def identity(db_session):
    return identity_for(create_user(db_session, email="cards@example.com"))


def test_review_then_read_progress(db_session, identity):
    badge = create_badge(db_session, name="First Steps", criteria_value=1)
    vocab = create_vocabulary(db_session)

    review = flashcard_router.record_review(
        ReviewIn(vocabularyId=vocab.id, status="known"), db=db_session, identity=identity
    )
    assert review.success is True
    assert review.status == "known"
    assert review.times_reviewed == 1
    assert review.awarded_badge_ids == [badge.id]

    payload = ProgressResponse.model_validate(progress_router.get_progress(db=db_session, identity=identity))
    assert payload.progress.words_learned == 1
    assert payload.progress.total_xp == 10
    assert payload.badges[0].badge.name == "First Steps"

    statuses = badge_router.list_badges(db=db_session, identity=identity)
    assert statuses[0].is_unlocked is True


def test_flashcards_carry_user_status(db_session, identity):
    reviewed = create_vocabulary(db_session, word="Danke", meaning="Thank you")
    create_vocabulary(db_session, word="Bitte", meaning="Please", category="A2")

    flashcard_router.record_review(
        ReviewIn(vocabulary_id=reviewed.id, status="learning"), db=db_session, identity=identity
    )

    cards = flashcard_router.list_flashcards(category=None, db=db_session, identity=identity)
    by_word = {card["word"]: card for card in cards}
    assert by_word["Danke"]["user_status"] == "learning"
    assert by_word["Bitte"]["user_status"] == "new"

    only_a2 = flashcard_router.list_flashcards(category="A2", db=db_session, identity=identity)
    assert [card["word"] for card in only_a2] == ["Bitte"]


def test_review_of_unknown_word_is_404(db_session, identity):
    with pytest.raises(NotFoundError):
        flashcard_router.record_review(ReviewIn(vocabularyId=999, status="known"), db=db_session, identity=identity)


def test_progress_for_user_without_aggregate_is_zero(db_session):
    user = create_user(db_session, email="fresh@example.com", with_progress=False)

    payload = progress_router.get_progress(db=db_session, identity=identity_for(user))

    assert payload["progress"]["words_learned"] == 0
    assert payload["progress"]["current_streak_days"] == 0
    assert payload["badges"] == []
