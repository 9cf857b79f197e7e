"""View-facing service: every user action as a call returning a Result."""
import logging
from dataclasses import dataclass, field

from studyhub import flashcards, importer, notes, progress, quiz
from studyhub.db import DEFAULT_DB_PATH
from studyhub.errors import StudyHubError
from studyhub.flashcards import Rate, Reschedule, Reveal, Skip, StudySession
from studyhub.quiz import Answer, CommitProgress, Finish, QuizSession, Retry
from studyhub.seed import SUBJECTS, seed_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Result:
    """Outcome of a service call: a value, or the failure that prevented it."""

    value: object = None
    error: StudyHubError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def fatal(self) -> bool:
        return self.error is not None and self.error.fatal

    @property
    def message(self) -> str:
        return str(self.error) if self.error is not None else ""

    @classmethod
    def success(cls, value=None) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: StudyHubError) -> "Result":
        return cls(error=error)


@dataclass(frozen=True)
class Step:
    """A session transition: the state reached and the effects it produced."""

    state: object
    effects: list = field(default_factory=list)


class StudyService:
    """Coordinates the store, the domain components and the play sessions."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH) -> None:
        self.db_path = db_path
        seed_document(db_path)

    def _call(self, fn, *args, **kwargs) -> Result:
        try:
            return Result.success(fn(*args, **kwargs))
        except StudyHubError as e:
            if e.fatal:
                logger.error("%s: %s", e.kind, e)
            else:
                logger.debug("%s: %s", e.kind, e)
            return Result.failure(e)

    def _apply(self, effects: list) -> None:
        for effect in effects:
            if isinstance(effect, CommitProgress):
                progress.record(self.db_path, effect.subject_id, effect.attempts, effect.correct)
            elif isinstance(effect, Reschedule):
                flashcards.record_flashcard_result(
                    self.db_path, effect.subject_id, effect.card_id, effect.rating,
                )

    def _step(self, session, event) -> Result:
        def run():
            state, effects = session.handle(event)
            self._apply(effects)
            return Step(state=state, effects=effects)
        return self._call(run)

    def list_subjects(self) -> list:
        return list(SUBJECTS)

    # Notes

    def create_note(self, subject_id: str, text: str) -> Result:
        return self._call(notes.create_note, self.db_path, subject_id, text)

    def delete_note(self, subject_id: str, note_id: str) -> Result:
        return self._call(notes.delete_note, self.db_path, subject_id, note_id)

    def get_note(self, subject_id: str, note_id: str) -> Result:
        return self._call(notes.get_note, self.db_path, subject_id, note_id)

    def list_notes(self, subject_id: str) -> Result:
        return self._call(notes.list_notes, self.db_path, subject_id)

    def summarize_note(self, text: str) -> Result:
        return self._call(notes.summarize_note, text)

    def export_notes(self, subject_id: str, note_id: str = None) -> Result:
        return self._call(notes.export_notes_text, self.db_path, subject_id, note_id)

    # Quizzes

    def create_quiz(self, subject_id: str, title: str, raw_text: str, rng=None) -> Result:
        return self._call(quiz.create_quiz, self.db_path, subject_id, title, raw_text, rng)

    def delete_quiz(self, subject_id: str, quiz_id: str) -> Result:
        return self._call(quiz.delete_quiz, self.db_path, subject_id, quiz_id)

    def list_quizzes(self, subject_id: str) -> Result:
        return self._call(quiz.list_quizzes, self.db_path, subject_id)

    def start_quiz_session(self, subject_id: str, quiz_id: str = None) -> Result:
        return self._call(quiz.start_quiz_session, self.db_path, subject_id, quiz_id)

    def answer_question(self, session: QuizSession, choice: str) -> Result:
        return self._step(session, Answer(choice))

    def finish_session(self, session: QuizSession) -> Result:
        return self._step(session, Finish())

    def retry_session(self, session: QuizSession) -> Result:
        return self._step(session, Retry())

    # Flashcards

    def create_card(self, subject_id: str, front: str, back: str) -> Result:
        return self._call(flashcards.create_card, self.db_path, subject_id, front, back)

    def list_decks(self, subject_id: str) -> Result:
        return self._call(flashcards.list_decks, self.db_path, subject_id)

    def start_study_session(self, subject_id: str) -> Result:
        return self._call(flashcards.start_study_session, self.db_path, subject_id)

    def reveal_card(self, session: StudySession) -> Result:
        return self._step(session, Reveal())

    def rate_card(self, session: StudySession, rating: int) -> Result:
        return self._step(session, Rate(rating))

    def skip_card(self, session: StudySession) -> Result:
        return self._step(session, Skip())

    # Past papers

    def save_past_paper(self, subject_id: str, text: str) -> Result:
        return self._call(notes.save_past_paper, self.db_path, subject_id, text)

    def delete_past_paper(self, subject_id: str, paper_id: str) -> Result:
        return self._call(notes.delete_past_paper, self.db_path, subject_id, paper_id)

    def list_past_papers(self, subject_id: str) -> Result:
        return self._call(notes.list_past_papers, self.db_path, subject_id)

    def analyze_past_paper(self, text: str) -> Result:
        return self._call(notes.analyze_past_paper, text)

    # Progress

    def reset_progress(self, subject_id: str) -> Result:
        return self._call(progress.reset, self.db_path, subject_id)

    def get_progress(self, subject_id: str = None) -> Result:
        return self._call(progress.list_progress, self.db_path, subject_id)

    # Import

    def import_file(self, file_path: str, subject_id: str = None, target: str = "note") -> Result:
        return self._call(importer.import_file, self.db_path, file_path, subject_id, target)
