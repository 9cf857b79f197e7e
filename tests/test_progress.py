# tests/test_progress.py
import pytest

from studyhub.errors import EntityNotFound
from studyhub.models import ProgressRecord
from studyhub.progress import (
    get_mastery_color, get_mastery_label, get_progress, list_progress, record, reset,
)


def test_mastery_label():
    assert get_mastery_label(85) == "MASTERED"
    assert get_mastery_label(70) == "STRONG"
    assert get_mastery_label(55) == "DEVELOPING"
    assert get_mastery_label(40) == "STARTING"


def test_mastery_color():
    assert get_mastery_color(100) == "green"
    assert get_mastery_color(0) == "red"


def test_initial_progress_is_zero(tmp_db):
    assert get_progress(tmp_db, "maths-ocr") == ProgressRecord(0, 0, 0)


def test_record_accumulates(tmp_db):
    record(tmp_db, "maths-ocr", attempts=3, correct=2)
    rec = get_progress(tmp_db, "maths-ocr")
    assert (rec.attempts, rec.correct, rec.mastery) == (3, 2, 67)
    record(tmp_db, "maths-ocr", attempts=1, correct=1)
    rec = get_progress(tmp_db, "maths-ocr")
    assert (rec.attempts, rec.correct, rec.mastery) == (4, 3, 75)


def test_record_half_rounds_up(tmp_db):
    record(tmp_db, "maths-ocr", attempts=8, correct=1)  # 12.5%
    assert get_progress(tmp_db, "maths-ocr").mastery == 13


def test_record_clamps_invalid_counts(tmp_db):
    record(tmp_db, "cs-ocr", attempts=2, correct=5)
    rec = get_progress(tmp_db, "cs-ocr")
    assert rec.correct == 2
    assert rec.mastery == 100
    record(tmp_db, "cs-ocr", attempts=-4, correct=-1)
    assert get_progress(tmp_db, "cs-ocr") == rec


def test_record_only_touches_one_subject(tmp_db):
    record(tmp_db, "cs-ocr", attempts=5, correct=5)
    assert get_progress(tmp_db, "econ-edx") == ProgressRecord()


def test_mastery_invariant_holds(tmp_db):
    for attempts, correct in [(1, 0), (7, 3), (10, 10), (3, 1), (0, 0)]:
        rec = record(tmp_db, "econ-edx", attempts, correct)
        assert 0 <= rec.mastery <= 100
        assert rec.correct <= rec.attempts
        assert rec.mastery == int(100 * rec.correct / rec.attempts + 0.5)


def test_reset_is_idempotent(tmp_db):
    record(tmp_db, "maths-ocr", attempts=3, correct=2)
    first = reset(tmp_db, "maths-ocr")
    second = reset(tmp_db, "maths-ocr")
    assert first == second == ProgressRecord(0, 0, 0)
    assert get_progress(tmp_db, "maths-ocr") == ProgressRecord(0, 0, 0)


def test_list_progress_all_subjects(tmp_db):
    record(tmp_db, "cs-ocr", attempts=2, correct=1)
    rows = list_progress(tmp_db)
    assert [s.id for s, _ in rows] == ["maths-ocr", "cs-ocr", "econ-edx"]
    assert rows[1][1].mastery == 50


def test_list_progress_filtered(tmp_db):
    rows = list_progress(tmp_db, "econ-edx")
    assert len(rows) == 1
    assert rows[0][0].name == "A Level Economics (Edexcel)"


def test_unknown_subject(tmp_db):
    with pytest.raises(EntityNotFound):
        record(tmp_db, "history-aqa", 1, 1)
    with pytest.raises(EntityNotFound):
        list_progress(tmp_db, "history-aqa")
