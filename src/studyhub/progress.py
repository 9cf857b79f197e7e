"""Per-subject mastery tracking from quiz attempts."""
from studyhub.models import ProgressRecord, Subject
from studyhub.seed import SUBJECTS, get_subject, load_document, save_document


def get_mastery_label(mastery: float) -> str:
    if mastery >= 80:
        return "MASTERED"
    elif mastery >= 65:
        return "STRONG"
    elif mastery >= 50:
        return "DEVELOPING"
    return "STARTING"


def get_mastery_color(mastery: float) -> str:
    if mastery >= 80:
        return "green"
    elif mastery >= 65:
        return "yellow"
    elif mastery >= 50:
        return "dark_orange"
    return "red"


def get_progress(db_path: str, subject_id: str) -> ProgressRecord:
    get_subject(subject_id)
    return load_document(db_path).progress[subject_id]


def record(db_path: str, subject_id: str, attempts: int, correct: int) -> ProgressRecord:
    """Add quiz attempts to a subject and recompute its mastery.

    Negative counts are treated as zero and ``correct`` never exceeds
    ``attempts``, so the stored record always satisfies correct <= attempts.
    """
    get_subject(subject_id)
    attempts = max(0, int(attempts))
    correct = min(max(0, int(correct)), attempts)
    doc = load_document(db_path)
    rec = doc.progress[subject_id]
    rec.attempts += attempts
    rec.correct += correct
    rec.recompute_mastery()
    save_document(db_path, doc)
    return rec


def reset(db_path: str, subject_id: str) -> ProgressRecord:
    """Zero a subject's record. Asking the user to confirm is up to the caller."""
    get_subject(subject_id)
    doc = load_document(db_path)
    doc.progress[subject_id] = ProgressRecord()
    save_document(db_path, doc)
    return doc.progress[subject_id]


def list_progress(db_path: str, subject_id: str = None) -> list[tuple[Subject, ProgressRecord]]:
    """Progress paired with subject metadata, for one subject or all of them."""
    doc = load_document(db_path)
    subjects = [get_subject(subject_id)] if subject_id else list(SUBJECTS)
    return [(s, doc.progress[s.id]) for s in subjects]
