from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from app.crud import vocabulary_crud
from app.models.vocabulary.vocabulary_model import Vocabulary
from app.services import bulk_import_service
from app.services.bulk_import_service import VocabularyDraft, import_drafts, parse_bulk_text, parse_csv, parse_upload


def test_text_three_and_four_field_lines():
    result = parse_bulk_text(
        "Hallo | Hello | Greetings\n"
        "\n"
        "Danke | Thank you | Danke schön! | A1\n"
    )

    assert result.errors == []
    assert result.drafts == [
        VocabularyDraft(word="Hallo", meaning="Hello", example_sentence="", category="Greetings"),
        VocabularyDraft(word="Danke", meaning="Thank you", example_sentence="Danke schön!", category="A1"),
    ]


def test_text_invalid_category_reported_with_line_number():
    result = parse_bulk_text("X | Y | NotACategory", strict=False)
    assert result.drafts == []
    assert result.errors == ["Line 1: invalid category 'NotACategory'"]


def test_text_partial_accept():
    result = parse_bulk_text(
        "Hallo | Hello | A1\n"
        "Nur zwei | Felder\n"
        " | Empty | A1\n"
        "Katze | Cat | Animals",
        strict=False,
    )

    assert [draft.word for draft in result.drafts] == ["Hallo", "Katze"]
    assert result.errors == [
        "Line 2: invalid format",
        "Line 3: word and meaning are required",
    ]


def test_text_strict_mode_rejects_whole_batch():
    result = parse_bulk_text("Hallo | Hello | A1\nX | Y | Nope", strict=True)
    assert result.drafts == []
    assert result.errors == ["Line 2: invalid category 'Nope'"]


def test_csv_without_header():
    content = (
        "Hallo,Hello,Greetings\n"
        'Danke,Thank you,"Danke schön!",A1\n'
        "Broken,OnlyTwo\n"
        "Haus,House,A1\n"
        "Katze,Cat,Animals\n"
    )
    result = parse_csv(content, strict=False)

    assert [draft.word for draft in result.drafts] == ["Hallo", "Danke", "Haus", "Katze"]
    assert result.drafts[1].example_sentence == "Danke schön!"
    assert result.errors == ["Line 3: invalid format"]


def test_csv_header_is_skipped_and_quoted_commas_kept():
    content = (
        "word,meaning,example_sentence,category\n"
        'Bitte,"Please, you\'re welcome","Bitte, sehr!",A1\n'
    )
    result = parse_csv(content, strict=False)

    assert result.errors == []
    assert result.drafts == [
        VocabularyDraft(word="Bitte", meaning="Please, you're welcome", example_sentence="Bitte, sehr!", category="A1")
    ]


def test_csv_strict_mode(monkeypatch):
    monkeypatch.setattr(bulk_import_service.settings, "BULK_IMPORT_STRICT_CSV", True)
    result = parse_csv("Hallo,Hello,A1\nX,Y,Nope\n")
    assert result.drafts == []
    assert len(result.errors) == 1


def test_upload_dispatches_on_extension():
    assert parse_upload("words.csv", "Hallo,Hello,A1").drafts[0].word == "Hallo"
    assert parse_upload("words.txt", "Hallo | Hello | A1").drafts[0].word == "Hallo"
    assert parse_upload(None, "Hallo,Hello,A1").errors == ["Line 1: invalid format"]


def test_import_drafts_creates_entries(db_session):
    drafts = parse_bulk_text("Hallo | Hello | A1\nKatze | Cat | Animals", strict=False).drafts

    report = import_drafts(db_session, drafts)

    assert report.created == 2
    assert report.attempted == 2
    assert report.summary == "Imported 2 of 2 entries"
    assert {vocab.word for vocab in db_session.query(Vocabulary).all()} == {"Hallo", "Katze"}


def test_csv_keeps_escaped_quotes_inside_quoted_field():
    result = parse_csv('Zitat,Quote,"Er sagt ""Hallo""",A1\n', strict=False)

    assert result.errors == []
    assert result.drafts[0].example_sentence == 'Er sagt "Hallo"'


def test_csv_keeps_literal_quotes_in_unquoted_field():
    result = parse_csv("Zoll,Inch,12\",A1\n", strict=False)
    assert result.drafts[0].example_sentence == '12"'


def test_one_failing_create_does_not_abort_import(db_session, monkeypatch):
    original_create = vocabulary_crud.create_vocabulary

    def flaky_create(db, payload):
        if payload.word == "Danke":
            raise SQLAlchemyError("statement timeout")
        return original_create(db, payload)

    monkeypatch.setattr(vocabulary_crud, "create_vocabulary", flaky_create)
    drafts = parse_bulk_text(
        "Hallo | Hello | A1\nDanke | Thank you | A1\nKatze | Cat | Animals", strict=False
    ).drafts

    report = import_drafts(db_session, drafts)

    assert report.created == 2
    assert report.attempted == 3
    assert report.summary == "Imported 2 of 3 entries"
    assert len(report.errors) == 1
    assert report.errors[0].startswith("Danke:")
    assert {vocab.word for vocab in db_session.query(Vocabulary).all()} == {"Hallo", "Katze"}
