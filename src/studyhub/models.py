"""Data classes for the study hub domain model."""
import math
import uuid
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_DECK_NAME = "Default deck"
DEFAULT_EASE = 2.5


def new_id() -> str:
    return uuid.uuid4().hex


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (0.5 -> 1, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Subject:
    id: str
    name: str


@dataclass
class Note:
    id: str
    text: str
    created: str

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "created": self.created}

    @classmethod
    def from_dict(cls, data: dict) -> "Note":
        return cls(id=str(data["id"]), text=data["text"], created=data.get("created") or "")


@dataclass
class Question:
    id: str
    q: str
    choices: list
    answer: str

    def is_correct(self, choice: str) -> bool:
        return choice == self.answer

    def to_dict(self) -> dict:
        return {"id": self.id, "q": self.q, "choices": list(self.choices), "answer": self.answer}

    @classmethod
    def from_dict(cls, data: dict) -> "Question":
        return cls(
            id=str(data["id"]), q=data["q"], choices=list(data["choices"]), answer=data["answer"],
        )


@dataclass
class Quiz:
    id: str
    title: str
    questions: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "questions": [q.to_dict() for q in self.questions]}

    @classmethod
    def from_dict(cls, data: dict) -> "Quiz":
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            questions=[Question.from_dict(q) for q in data.get("questions", [])],
        )


@dataclass
class Flashcard:
    id: str
    front: str
    back: str
    next_due: str
    interval: int = 1
    # Stored for on-disk compatibility; scheduling never reads it.
    ease: float = DEFAULT_EASE

    def to_dict(self) -> dict:
        return {
            "id": self.id, "front": self.front, "back": self.back,
            "nextDue": self.next_due, "interval": self.interval, "ease": self.ease,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Flashcard":
        return cls(
            id=str(data["id"]),
            front=data["front"],
            back=data["back"],
            next_due=data["nextDue"],
            interval=int(data.get("interval", 1)),
            ease=float(data.get("ease", DEFAULT_EASE)),
        )


@dataclass
class Deck:
    id: str
    name: str = DEFAULT_DECK_NAME
    cards: list = field(default_factory=list)

    def find_card(self, card_id: str) -> Optional[Flashcard]:
        return next((c for c in self.cards if c.id == card_id), None)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "cards": [c.to_dict() for c in self.cards]}

    @classmethod
    def from_dict(cls, data: dict) -> "Deck":
        return cls(
            id=str(data["id"]),
            name=data.get("name") or DEFAULT_DECK_NAME,
            cards=[Flashcard.from_dict(c) for c in data.get("cards", [])],
        )


@dataclass
class PastPaper:
    id: str
    text: str
    created: str

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "created": self.created}

    @classmethod
    def from_dict(cls, data: dict) -> "PastPaper":
        return cls(id=str(data["id"]), text=data["text"], created=data.get("created") or "")


@dataclass
class ProgressRecord:
    attempts: int = 0
    correct: int = 0
    mastery: int = 0

    def recompute_mastery(self) -> None:
        if self.attempts > 0:
            self.mastery = round_half_up(100 * self.correct / self.attempts)
        else:
            self.mastery = 0

    def to_dict(self) -> dict:
        return {"attempts": self.attempts, "correct": self.correct, "mastery": self.mastery}

    @classmethod
    def from_dict(cls, data: dict) -> "ProgressRecord":
        record = cls(attempts=max(0, int(data.get("attempts", 0))), correct=max(0, int(data.get("correct", 0))))
        record.correct = min(record.correct, record.attempts)
        record.recompute_mastery()
        return record


@dataclass
class SubjectData:
    notes: list = field(default_factory=list)
    quizzes: list = field(default_factory=list)
    decks: list = field(default_factory=list)
    pastpapers: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "notes": [n.to_dict() for n in self.notes],
            "quizzes": [q.to_dict() for q in self.quizzes],
            "decks": [d.to_dict() for d in self.decks],
            "pastpapers": [p.to_dict() for p in self.pastpapers],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SubjectData":
        return cls(
            notes=[Note.from_dict(n) for n in data.get("notes", [])],
            quizzes=[Quiz.from_dict(q) for q in data.get("quizzes", [])],
            decks=[Deck.from_dict(d) for d in data.get("decks", [])],
            pastpapers=[PastPaper.from_dict(p) for p in data.get("pastpapers", [])],
        )


@dataclass
class Document:
    """The single persisted aggregate: per-subject content and progress."""

    version: int
    subjects: dict = field(default_factory=dict)
    progress: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "subjects": {sid: data.to_dict() for sid, data in self.subjects.items()},
            "progress": {sid: rec.to_dict() for sid, rec in self.progress.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Document":
        return cls(
            version=int(data["version"]),
            subjects={sid: SubjectData.from_dict(v) for sid, v in data["subjects"].items()},
            progress={sid: ProgressRecord.from_dict(v) for sid, v in data["progress"].items()},
        )
