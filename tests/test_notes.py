# tests/test_notes.py
import pytest

from studyhub.errors import EmptyInput, EntityNotFound
from studyhub.notes import (
    analyze_past_paper, create_note, delete_note, delete_past_paper, export_notes_text, get_note,
    get_past_paper, list_notes, list_past_papers, save_past_paper, summarize_note,
)


def test_create_note_newest_first(tmp_db):
    first = create_note(tmp_db, "maths-ocr", "Chain rule")
    second = create_note(tmp_db, "maths-ocr", "  Product rule  ")
    notes = list_notes(tmp_db, "maths-ocr")
    assert [n.id for n in notes] == [second.id, first.id]
    assert notes[0].text == "Product rule"
    assert notes[0].created


def test_create_note_empty(tmp_db):
    with pytest.raises(EmptyInput):
        create_note(tmp_db, "maths-ocr", "   ")
    assert list_notes(tmp_db, "maths-ocr") == []


def test_get_and_delete_note(tmp_db):
    note = create_note(tmp_db, "maths-ocr", "text")
    assert get_note(tmp_db, "maths-ocr", note.id).text == "text"
    assert delete_note(tmp_db, "maths-ocr", note.id) is True
    assert delete_note(tmp_db, "maths-ocr", note.id) is False
    with pytest.raises(EntityNotFound):
        get_note(tmp_db, "maths-ocr", note.id)


def test_summarize_note_uses_three_sentences():
    assert summarize_note("One. Two. Three. Four.") == "One. Two. Three."
    with pytest.raises(EmptyInput):
        summarize_note("")


def test_export_notes_text(tmp_db):
    create_note(tmp_db, "cs-ocr", "older")
    newer = create_note(tmp_db, "cs-ocr", "newer")
    assert export_notes_text(tmp_db, "cs-ocr") == "newer\n\nolder"
    assert export_notes_text(tmp_db, "cs-ocr", newer.id) == "newer"


def test_export_notes_text_nothing_to_export(tmp_db):
    with pytest.raises(EmptyInput):
        export_notes_text(tmp_db, "cs-ocr")


def test_past_papers(tmp_db):
    paper = save_past_paper(tmp_db, "econ-edx", "Explain price elasticity of demand.")
    assert list_past_papers(tmp_db, "econ-edx") == [paper]
    assert get_past_paper(tmp_db, "econ-edx", paper.id) == paper
    assert delete_past_paper(tmp_db, "econ-edx", paper.id) is True
    assert delete_past_paper(tmp_db, "econ-edx", paper.id) is False
    with pytest.raises(EntityNotFound):
        get_past_paper(tmp_db, "econ-edx", paper.id)


def test_save_past_paper_empty(tmp_db):
    with pytest.raises(EmptyInput):
        save_past_paper(tmp_db, "econ-edx", "")


def test_analyze_past_paper():
    topics = analyze_past_paper("Evaluate the impact of fiscal policy on unemployment.")
    assert topics[0] == "unemployment"
    assert len(topics) <= 6
    with pytest.raises(EmptyInput):
        analyze_past_paper("  ")
