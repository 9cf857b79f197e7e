"""Notes and past papers stored per subject."""
from datetime import datetime

from studyhub.errors import EmptyInput, EntityNotFound
from studyhub.heuristics import extract_topics, summarize
from studyhub.models import Note, PastPaper, new_id
from studyhub.seed import get_subject_data, load_document, save_document

NOTE_SEPARATOR = "\n\n"


def create_note(db_path: str, subject_id: str, text: str) -> Note:
    text = (text or "").strip()
    if not text:
        raise EmptyInput("Add some notes first.")
    doc = load_document(db_path)
    note = Note(id=new_id(), text=text, created=datetime.now().isoformat())
    get_subject_data(doc, subject_id).notes.insert(0, note)
    save_document(db_path, doc)
    return note


def list_notes(db_path: str, subject_id: str) -> list[Note]:
    """Notes for a subject, newest first."""
    return get_subject_data(load_document(db_path), subject_id).notes


def get_note(db_path: str, subject_id: str, note_id: str) -> Note:
    for note in list_notes(db_path, subject_id):
        if note.id == note_id:
            return note
    raise EntityNotFound(f"Note not found: {note_id}")


def delete_note(db_path: str, subject_id: str, note_id: str) -> bool:
    """Remove a note. Returns False when the id was already gone."""
    doc = load_document(db_path)
    data = get_subject_data(doc, subject_id)
    remaining = [n for n in data.notes if n.id != note_id]
    if len(remaining) == len(data.notes):
        return False
    data.notes = remaining
    save_document(db_path, doc)
    return True


def summarize_note(text: str, max_sentences: int = 3) -> str:
    """Auto-summary for the notes editor."""
    text = (text or "").strip()
    if not text:
        raise EmptyInput("Paste notes first.")
    return summarize(text, max_sentences)


def export_notes_text(db_path: str, subject_id: str, note_id: str = None) -> str:
    """Raw note text for download: one note, or every note separated by a blank line."""
    if note_id is not None:
        return get_note(db_path, subject_id, note_id).text
    notes = list_notes(db_path, subject_id)
    if not notes:
        raise EmptyInput("No notes to download.")
    return NOTE_SEPARATOR.join(n.text for n in notes)


def save_past_paper(db_path: str, subject_id: str, text: str) -> PastPaper:
    text = (text or "").strip()
    if not text:
        raise EmptyInput("Paste or type the past paper text.")
    doc = load_document(db_path)
    paper = PastPaper(id=new_id(), text=text, created=datetime.now().isoformat())
    get_subject_data(doc, subject_id).pastpapers.insert(0, paper)
    save_document(db_path, doc)
    return paper


def list_past_papers(db_path: str, subject_id: str) -> list[PastPaper]:
    return get_subject_data(load_document(db_path), subject_id).pastpapers


def get_past_paper(db_path: str, subject_id: str, paper_id: str) -> PastPaper:
    for paper in list_past_papers(db_path, subject_id):
        if paper.id == paper_id:
            return paper
    raise EntityNotFound(f"Past paper not found: {paper_id}")


def delete_past_paper(db_path: str, subject_id: str, paper_id: str) -> bool:
    doc = load_document(db_path)
    data = get_subject_data(doc, subject_id)
    remaining = [p for p in data.pastpapers if p.id != paper_id]
    if len(remaining) == len(data.pastpapers):
        return False
    data.pastpapers = remaining
    save_document(db_path, doc)
    return True


def analyze_past_paper(text: str) -> list[str]:
    """Keywords detected in past paper text."""
    text = (text or "").strip()
    if not text:
        raise EmptyInput("Paste past paper text first.")
    return extract_topics(text)
