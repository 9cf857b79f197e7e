# tests/test_flashcards.py
from datetime import datetime, timedelta

import pytest

from studyhub.errors import EntityNotFound, InvalidCard, InvalidSessionEvent, NoCardsAvailable
from studyhub.flashcards import (
    Hidden, Rate, Reschedule, Reveal, Revealed, SessionDone, Skip,
    create_card, delete_card, get_default_deck, list_decks, record_flashcard_result,
    start_study_session,
)
from studyhub.scheduling import Rating

NOW = datetime(2026, 3, 1, 9, 30)


def test_create_card_defaults(tmp_db):
    card = create_card(tmp_db, "cs-ocr", "What is a stack?", "LIFO structure", now=NOW)
    assert card.interval == 1
    assert card.next_due == NOW.isoformat()
    assert card.ease == 2.5


def test_create_card_creates_single_default_deck(tmp_db):
    assert get_default_deck(tmp_db, "cs-ocr") is None
    create_card(tmp_db, "cs-ocr", "f1", "b1")
    create_card(tmp_db, "cs-ocr", "f2", "b2")
    decks = list_decks(tmp_db, "cs-ocr")
    assert len(decks) == 1
    assert decks[0].name == "Default deck"
    # newest first
    assert [c.front for c in decks[0].cards] == ["f2", "f1"]


def test_create_card_requires_both_sides(tmp_db):
    with pytest.raises(InvalidCard):
        create_card(tmp_db, "cs-ocr", "front only", "  ")
    with pytest.raises(InvalidCard):
        create_card(tmp_db, "cs-ocr", "", "back only")
    assert get_default_deck(tmp_db, "cs-ocr") is None


def test_decks_are_per_subject(tmp_db):
    create_card(tmp_db, "cs-ocr", "f", "b")
    assert get_default_deck(tmp_db, "maths-ocr") is None


def test_record_result_good(tmp_db):
    card = create_card(tmp_db, "cs-ocr", "f", "b", now=NOW)
    updated = record_flashcard_result(tmp_db, "cs-ocr", card.id, Rating.GOOD, now=NOW)
    assert updated.interval == 2
    stored = get_default_deck(tmp_db, "cs-ocr").find_card(card.id)
    assert stored.interval == 2
    assert stored.next_due == (NOW + timedelta(days=2)).isoformat()
    assert stored.ease == 2.5  # never touched by scheduling


def test_record_result_hard_resets(tmp_db):
    card = create_card(tmp_db, "cs-ocr", "f", "b", now=NOW)
    for _ in range(3):
        record_flashcard_result(tmp_db, "cs-ocr", card.id, Rating.EASY, now=NOW)
    assert get_default_deck(tmp_db, "cs-ocr").find_card(card.id).interval > 1
    record_flashcard_result(tmp_db, "cs-ocr", card.id, Rating.HARD, now=NOW)
    stored = get_default_deck(tmp_db, "cs-ocr").find_card(card.id)
    assert stored.interval == 1
    assert stored.next_due == (NOW + timedelta(days=1)).isoformat()


def test_record_result_stale_card(tmp_db):
    with pytest.raises(EntityNotFound):
        record_flashcard_result(tmp_db, "cs-ocr", "missing", Rating.GOOD)


def test_delete_card(tmp_db):
    card = create_card(tmp_db, "cs-ocr", "f", "b")
    assert delete_card(tmp_db, "cs-ocr", card.id) is True
    assert delete_card(tmp_db, "cs-ocr", card.id) is False
    assert get_default_deck(tmp_db, "cs-ocr").cards == []


# --- Study session ---


def test_start_session_without_cards(tmp_db):
    with pytest.raises(NoCardsAvailable):
        start_study_session(tmp_db, "econ-edx")


def test_start_session_with_empty_deck(tmp_db):
    card = create_card(tmp_db, "econ-edx", "f", "b")
    delete_card(tmp_db, "econ-edx", card.id)
    with pytest.raises(NoCardsAvailable):
        start_study_session(tmp_db, "econ-edx")


def test_session_shows_all_cards_in_stored_order(tmp_db):
    create_card(tmp_db, "econ-edx", "old", "b")
    create_card(tmp_db, "econ-edx", "new", "b")
    # future due dates do not filter cards out
    for card in get_default_deck(tmp_db, "econ-edx").cards:
        record_flashcard_result(tmp_db, "econ-edx", card.id, Rating.EASY)
    session = start_study_session(tmp_db, "econ-edx")
    assert session.state == Hidden(0)
    assert [c.front for c in session.cards] == ["new", "old"]


def test_session_reveal_then_rate(tmp_db):
    card = create_card(tmp_db, "econ-edx", "f", "b")
    session = start_study_session(tmp_db, "econ-edx")
    state, effects = session.handle(Reveal())
    assert state == Revealed(0)
    assert effects == []
    state, effects = session.handle(Rate(Rating.GOOD))
    assert state == SessionDone(reviewed=1, skipped=0)
    assert effects == [Reschedule("econ-edx", card.id, Rating.GOOD)]


def test_session_skip_has_no_effects(tmp_db):
    create_card(tmp_db, "econ-edx", "f1", "b")
    create_card(tmp_db, "econ-edx", "f2", "b")
    session = start_study_session(tmp_db, "econ-edx")
    state, effects = session.handle(Skip())
    assert state == Hidden(1)
    assert effects == []
    state, _ = session.handle(Skip())
    assert state == SessionDone(reviewed=0, skipped=2)
    assert session.current_card is None


def test_session_rejects_rate_before_reveal(tmp_db):
    create_card(tmp_db, "econ-edx", "f", "b")
    session = start_study_session(tmp_db, "econ-edx")
    with pytest.raises(InvalidSessionEvent):
        session.handle(Rate(Rating.EASY))


def test_session_rejects_unsupported_rating(tmp_db):
    create_card(tmp_db, "econ-edx", "f", "b")
    session = start_study_session(tmp_db, "econ-edx")
    session.handle(Reveal())
    with pytest.raises(InvalidSessionEvent):
        session.handle(Rate(2))
    assert session.state == Revealed(0)
