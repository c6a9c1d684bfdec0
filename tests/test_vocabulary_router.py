from __future__ import annotations

from io import BytesIO

import pytest
from fastapi import UploadFile
from pydantic import ValidationError as PydanticValidationError

from app.api.v2.endpoints import vocabulary_router
from app.core.exceptions import NotFoundError, ValidationError
from app.models.vocabulary.vocabulary_model import Vocabulary
from app.schemas.vocabulary_schema import BulkTextImportIn, VocabularyCreate, VocabularyUpdate
from tests.utils import create_user, create_vocabulary, identity_for


@pytest.fixture()
def admin(db_session):
    return identity_for(create_user(db_session, email="admin@example.com", is_admin=True))


def test_create_list_update_delete_round_trip(db_session, admin):
    created = vocabulary_router.create_vocabulary(
        VocabularyCreate(word="  Hund ", meaning="Dog", example_sentence="Der Hund bellt.", category="Animals"),
        db=db_session,
        identity=admin,
    )
    assert created.word == "Hund"

    listed = vocabulary_router.list_vocabulary(category=None, db=db_session)
    assert [vocab.id for vocab in listed] == [created.id]

    updated = vocabulary_router.update_vocabulary(
        created.id, VocabularyUpdate(meaning="Dog (animal)"), db=db_session, identity=admin
    )
    assert updated.meaning == "Dog (animal)"
    assert updated.category == "Animals"

    assert vocabulary_router.delete_vocabulary(created.id, db=db_session, identity=admin) == {"success": True}
    assert vocabulary_router.list_vocabulary(category=None, db=db_session) == []


def test_list_filters_by_category_newest_first(db_session):
    first = create_vocabulary(db_session, word="Hallo", category="A1")
    second = create_vocabulary(db_session, word="Trotzdem", category="B1")
    third = create_vocabulary(db_session, word="Haus", category="A1")

    assert [vocab.id for vocab in vocabulary_router.list_vocabulary(category="A1", db=db_session)] == [third.id, first.id]
    assert len(vocabulary_router.list_vocabulary(category=None, db=db_session)) == 3
    assert vocabulary_router.list_vocabulary(category="C2", db=db_session) == []
    assert second.id not in {vocab.id for vocab in vocabulary_router.list_vocabulary(category="A1", db=db_session)}


def test_invalid_category_is_rejected_by_schema():
    with pytest.raises(PydanticValidationError) as exc:
        VocabularyCreate(word="X", meaning="Y", category="NotACategory")
    assert "invalid category" in str(exc.value)


def test_update_and_delete_unknown_entry(db_session, admin):
    with pytest.raises(NotFoundError):
        vocabulary_router.update_vocabulary(404, VocabularyUpdate(word="x"), db=db_session, identity=admin)
    with pytest.raises(NotFoundError):
        vocabulary_router.delete_vocabulary(404, db=db_session, identity=admin)


def test_update_rejects_blank_word(db_session, admin):
    vocab = create_vocabulary(db_session)
    with pytest.raises(ValidationError):
        vocabulary_router.update_vocabulary(vocab.id, VocabularyUpdate(word="   "), db=db_session, identity=admin)


def test_import_text_partial(db_session, admin):
    report = vocabulary_router.import_text(
        BulkTextImportIn(text="Hallo | Hello | A1\nX | Y | NotACategory\nKatze | Cat | Animals"),
        db=db_session,
        identity=admin,
    )

    assert report.created == 2
    assert report.attempted == 2
    assert report.message == "Imported 2 of 2 entries"
    assert report.errors == ["Line 2: invalid category 'NotACategory'"]
    assert db_session.query(Vocabulary).count() == 2


def test_import_text_without_valid_lines_fails(db_session, admin):
    with pytest.raises(ValidationError) as exc:
        vocabulary_router.import_text(BulkTextImportIn(text="X | Y | NotACategory"), db=db_session, identity=admin)

    assert exc.value.code == "import_failed"
    assert exc.value.details["errors"] == ["Line 1: invalid category 'NotACategory'"]
    assert db_session.query(Vocabulary).count() == 0


@pytest.mark.asyncio
async def test_import_csv_file(db_session, admin):
    content = "word,meaning,example,category\nHaus,House,Mein Haus ist groß.,A1\nBroken,OnlyTwo\n".encode("utf-8-sig")
    upload = UploadFile(file=BytesIO(content), filename="words.csv")

    report = await vocabulary_router.import_file(file=upload, db=db_session, identity=admin)

    assert report.created == 1
    assert report.errors == ["Line 3: invalid format"]
    vocab = db_session.query(Vocabulary).one()
    assert vocab.example_sentence == "Mein Haus ist groß."
