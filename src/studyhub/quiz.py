"""Quiz engine: line-based question parsing and sequential play sessions."""
import random
from dataclasses import dataclass

from studyhub.errors import (
    EmptyInput, EntityNotFound, InvalidSessionEvent, NoQuizzesAvailable, NoValidQuestions,
)
from studyhub.models import Question, Quiz, new_id
from studyhub.seed import get_subject_data, load_document, save_document

DEFAULT_TITLE = "Untitled Quiz"
CHOICE_COUNT = 4
PLACEHOLDER_CHOICE = "N/A"
QUESTION_FORMAT = "Question? | correct | wrong1 ; wrong2 ; wrong3"


def parse_question_line(line: str, rng=None) -> Question | None:
    """Parse ``question | correct | wrong1 ; wrong2 ; wrong3``.

    Returns None for lines with fewer than two pipe-separated fields. The
    choices are padded with "N/A" to four entries and shuffled once here.
    """
    parts = [p.strip() for p in line.split("|")]
    if len(parts) < 2:
        return None
    question_text, correct = parts[0], parts[1]
    wrong = [w.strip() for w in (parts[2] if len(parts) > 2 else "").split(";") if w.strip()]
    choices = [correct, *wrong][:CHOICE_COUNT]
    while len(choices) < CHOICE_COUNT:
        choices.append(PLACEHOLDER_CHOICE)
    (rng or random).shuffle(choices)
    return Question(id=new_id(), q=question_text, choices=choices, answer=correct)


def parse_questions(raw: str, rng=None) -> list[Question]:
    lines = [line.strip() for line in (raw or "").split("\n")]
    questions = []
    for line in lines:
        if not line:
            continue
        question = parse_question_line(line, rng)
        if question is not None:
            questions.append(question)
    return questions


def create_quiz(db_path: str, subject_id: str, title: str, raw: str, rng=None) -> Quiz:
    title = (title or "").strip() or DEFAULT_TITLE
    raw = (raw or "").strip()
    if not raw:
        raise EmptyInput("Add questions following the format.")
    questions = parse_questions(raw, rng)
    if not questions:
        raise NoValidQuestions(f"No valid questions parsed. Use the format: {QUESTION_FORMAT}")
    doc = load_document(db_path)
    quiz = Quiz(id=new_id(), title=title, questions=questions)
    get_subject_data(doc, subject_id).quizzes.insert(0, quiz)
    save_document(db_path, doc)
    return quiz


def list_quizzes(db_path: str, subject_id: str) -> list[Quiz]:
    """Saved quizzes for a subject, most recent first."""
    return get_subject_data(load_document(db_path), subject_id).quizzes


def get_quiz(db_path: str, subject_id: str, quiz_id: str) -> Quiz:
    for quiz in list_quizzes(db_path, subject_id):
        if quiz.id == quiz_id:
            return quiz
    raise EntityNotFound("Quiz not found")


def delete_quiz(db_path: str, subject_id: str, quiz_id: str) -> bool:
    doc = load_document(db_path)
    data = get_subject_data(doc, subject_id)
    remaining = [q for q in data.quizzes if q.id != quiz_id]
    if len(remaining) == len(data.quizzes):
        return False
    data.quizzes = remaining
    save_document(db_path, doc)
    return True


# --- Play session ---


@dataclass(frozen=True)
class Presenting:
    index: int
    score: int = 0


@dataclass(frozen=True)
class Complete:
    score: int
    total: int


@dataclass(frozen=True)
class Finished:
    score: int
    total: int


@dataclass(frozen=True)
class Answer:
    choice: str


@dataclass(frozen=True)
class Finish:
    pass


@dataclass(frozen=True)
class Retry:
    pass


@dataclass(frozen=True)
class AnswerFeedback:
    question_id: str
    choice: str
    correct: bool
    answer: str


@dataclass(frozen=True)
class CommitProgress:
    subject_id: str
    attempts: int
    correct: int


@dataclass
class QuizSession:
    """One play-through of a quiz. Never persisted."""

    subject_id: str
    quiz: Quiz
    state: object = None

    def __post_init__(self):
        if self.state is None:
            self.state = self._opening_state()

    def _opening_state(self):
        # a quiz with no questions is complete before it starts
        if not self.quiz.questions:
            return Complete(score=0, total=0)
        return Presenting(0)

    @property
    def total(self) -> int:
        return len(self.quiz.questions)

    @property
    def current_question(self) -> Question | None:
        if isinstance(self.state, Presenting):
            return self.quiz.questions[self.state.index]
        return None

    def handle(self, event) -> tuple:
        """Apply ``event`` and return ``(new_state, effects)``."""
        state = self.state
        effects = []
        if isinstance(state, Presenting) and isinstance(event, Answer):
            question = self.quiz.questions[state.index]
            correct = question.is_correct(event.choice)
            score = state.score + (1 if correct else 0)
            effects.append(AnswerFeedback(question.id, event.choice, correct, question.answer))
            if state.index + 1 == self.total:
                self.state = Complete(score=score, total=self.total)
            else:
                self.state = Presenting(index=state.index + 1, score=score)
        elif isinstance(state, Complete) and isinstance(event, Finish):
            effects.append(CommitProgress(self.subject_id, attempts=state.total, correct=state.score))
            self.state = Finished(score=state.score, total=state.total)
        elif isinstance(state, Complete) and isinstance(event, Retry):
            self.state = self._opening_state()
        else:
            raise InvalidSessionEvent(
                f"{type(event).__name__} is not valid while {type(state).__name__}"
            )
        return self.state, effects


def start_quiz_session(db_path: str, subject_id: str, quiz_id: str = None) -> QuizSession:
    """Start playing ``quiz_id``, or the most recent quiz when no id is given."""
    quizzes = list_quizzes(db_path, subject_id)
    if not quizzes:
        raise NoQuizzesAvailable("No quizzes. Create one first.")
    if quiz_id is None:
        quiz = quizzes[0]
    else:
        quiz = next((q for q in quizzes if q.id == quiz_id), None)
        if quiz is None:
            raise EntityNotFound("Quiz not found")
    return QuizSession(subject_id=subject_id, quiz=quiz)
