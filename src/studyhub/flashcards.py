"""Flashcard decks and study sessions."""
from dataclasses import dataclass, field
from datetime import datetime

from studyhub.errors import EntityNotFound, InvalidCard, InvalidSessionEvent, NoCardsAvailable
from studyhub.models import DEFAULT_EASE, Deck, Flashcard, new_id
from studyhub.scheduling import Rating, schedule_update
from studyhub.seed import get_subject_data, load_document, save_document

NEW_CARD_INTERVAL = 1


def get_default_deck(db_path: str, subject_id: str) -> Deck | None:
    decks = get_subject_data(load_document(db_path), subject_id).decks
    return decks[0] if decks else None


def list_decks(db_path: str, subject_id: str) -> list[Deck]:
    return get_subject_data(load_document(db_path), subject_id).decks


def create_card(db_path: str, subject_id: str, front: str, back: str, now: datetime = None) -> Flashcard:
    """Add a card to the top of the subject's default deck, creating the deck if needed."""
    front, back = (front or "").strip(), (back or "").strip()
    if not front or not back:
        raise InvalidCard("Fill both front and back.")
    now = now or datetime.now()
    doc = load_document(db_path)
    data = get_subject_data(doc, subject_id)
    if not data.decks:
        data.decks.append(Deck(id=new_id()))
    card = Flashcard(
        id=new_id(), front=front, back=back, next_due=now.isoformat(),
        interval=NEW_CARD_INTERVAL, ease=DEFAULT_EASE,
    )
    data.decks[0].cards.insert(0, card)
    save_document(db_path, doc)
    return card


def delete_card(db_path: str, subject_id: str, card_id: str) -> bool:
    doc = load_document(db_path)
    data = get_subject_data(doc, subject_id)
    for deck in data.decks:
        remaining = [c for c in deck.cards if c.id != card_id]
        if len(remaining) != len(deck.cards):
            deck.cards = remaining
            save_document(db_path, doc)
            return True
    return False


def record_flashcard_result(
    db_path: str, subject_id: str, card_id: str, rating: int, now: datetime = None,
) -> Flashcard:
    """Reschedule a card after it was rated and persist the change."""
    doc = load_document(db_path)
    data = get_subject_data(doc, subject_id)
    card = None
    for deck in data.decks:
        card = deck.find_card(card_id)
        if card is not None:
            break
    if card is None:
        raise EntityNotFound(f"Flashcard not found: {card_id}")
    updated = schedule_update(rating=rating, interval=card.interval, now=now)
    card.interval = updated["interval"]
    card.next_due = updated["next_due"]
    save_document(db_path, doc)
    return card


# --- Study session ---


@dataclass(frozen=True)
class Hidden:
    position: int


@dataclass(frozen=True)
class Revealed:
    position: int


@dataclass(frozen=True)
class SessionDone:
    reviewed: int
    skipped: int


@dataclass(frozen=True)
class Reveal:
    pass


@dataclass(frozen=True)
class Rate:
    rating: Rating


@dataclass(frozen=True)
class Skip:
    pass


@dataclass(frozen=True)
class Reschedule:
    subject_id: str
    card_id: str
    rating: Rating


@dataclass
class StudySession:
    """Walks every card of the default deck in stored order."""

    subject_id: str
    cards: list
    state: object = field(default_factory=lambda: Hidden(0))
    reviewed: int = 0
    skipped: int = 0

    @property
    def current_card(self) -> Flashcard | None:
        if isinstance(self.state, (Hidden, Revealed)):
            return self.cards[self.state.position]
        return None

    def _advance(self, position: int):
        if position + 1 >= len(self.cards):
            return SessionDone(reviewed=self.reviewed, skipped=self.skipped)
        return Hidden(position + 1)

    def handle(self, event) -> tuple:
        """Apply ``event`` and return ``(new_state, effects)``."""
        state = self.state
        effects = []
        if isinstance(state, Hidden) and isinstance(event, Reveal):
            self.state = Revealed(state.position)
        elif isinstance(state, Hidden) and isinstance(event, Skip):
            self.skipped += 1
            self.state = self._advance(state.position)
        elif isinstance(state, Revealed) and isinstance(event, Rate):
            try:
                rating = Rating(event.rating)
            except ValueError:
                raise InvalidSessionEvent(f"Unsupported rating: {event.rating!r}") from None
            effects.append(Reschedule(self.subject_id, self.cards[state.position].id, rating))
            self.reviewed += 1
            self.state = self._advance(state.position)
        else:
            raise InvalidSessionEvent(
                f"{type(event).__name__} is not valid while {type(state).__name__}"
            )
        return self.state, effects


def start_study_session(db_path: str, subject_id: str) -> StudySession:
    deck = get_default_deck(db_path, subject_id)
    if deck is None or not deck.cards:
        raise NoCardsAvailable("No cards to study.")
    return StudySession(subject_id=subject_id, cards=list(deck.cards))
