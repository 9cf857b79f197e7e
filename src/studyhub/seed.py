"""Seed, load and migrate the persisted study document."""
import copy
import logging
from datetime import datetime

from studyhub.db import init_db, has_key, load, save
from studyhub.errors import EntityNotFound
from studyhub.models import Document, ProgressRecord, Subject, SubjectData

logger = logging.getLogger(__name__)

STORE_KEY = "studyhub_data"
SCHEMA_VERSION = 1

SUBJECTS = (
    Subject(id="maths-ocr", name="A Level Maths (OCR)"),
    Subject(id="cs-ocr", name="A Level Computer Science (OCR)"),
    Subject(id="econ-edx", name="A Level Economics (Edexcel)"),
)

SUBJECT_IDS = tuple(s.id for s in SUBJECTS)


def get_subject(subject_id: str) -> Subject:
    for subject in SUBJECTS:
        if subject.id == subject_id:
            return subject
    raise EntityNotFound(f"Unknown subject: {subject_id}")


def new_document() -> Document:
    """Build an empty document with one container and one zeroed record per subject."""
    return Document(
        version=SCHEMA_VERSION,
        subjects={s.id: SubjectData() for s in SUBJECTS},
        progress={s.id: ProgressRecord() for s in SUBJECTS},
    )


def is_seeded(db_path: str) -> bool:
    """Check whether a document has already been written to the store."""
    return has_key(db_path, STORE_KEY)


def seed_document(db_path: str) -> None:
    """Create and persist the initial document on first run. No-op afterwards."""
    init_db(db_path)
    if is_seeded(db_path):
        return
    logger.info("Seeding new study document in %s", db_path)
    save_document(db_path, new_document())


def _epoch_ms_to_iso(value) -> str:
    return datetime.fromtimestamp(value / 1000).isoformat()


def _migrate_to_v1(raw: dict) -> dict:
    """Upgrade a version-less document written by the browser edition."""
    data = copy.deepcopy(raw)
    for subject_data in (data.get("subjects") or {}).values():
        for deck in subject_data.get("decks") or []:
            for card in deck.get("cards") or []:
                if isinstance(card.get("nextDue"), (int, float)):
                    card["nextDue"] = _epoch_ms_to_iso(card["nextDue"])
    data["version"] = 1
    return data


def migrate_document(raw: dict) -> dict:
    """Bring a stored document up to SCHEMA_VERSION and fill in missing subjects."""
    if not isinstance(raw, dict):
        raise ValueError(f"Stored document is a {type(raw).__name__}, expected an object")
    version = int(raw.get("version", 0))
    if version > SCHEMA_VERSION:
        raise ValueError(f"Document version {version} is newer than supported {SCHEMA_VERSION}")
    if version < 1:
        logger.info("Migrating study document from version %s to 1", version)
        raw = _migrate_to_v1(raw)
    subjects = raw["subjects"] = raw.get("subjects") or {}
    progress = raw["progress"] = raw.get("progress") or {}
    for subject_id in SUBJECT_IDS:
        containers = subjects.setdefault(subject_id, {})
        for name in ("notes", "quizzes", "decks", "pastpapers"):
            if not containers.get(name):
                containers[name] = []
        progress.setdefault(subject_id, ProgressRecord().to_dict())
    return raw


def load_document(db_path: str) -> Document:
    """Load the document, seeding it on first run.

    Unreadable or malformed stored data yields a fresh empty document which is
    not written back until the next mutation.
    """
    seed_document(db_path)
    raw = load(db_path, STORE_KEY, None)
    if raw is None:
        logger.warning("Stored study document is unreadable, starting from an empty one")
        return new_document()
    try:
        return Document.from_dict(migrate_document(raw))
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Stored study document is malformed (%s), starting from an empty one", e)
        return new_document()


def save_document(db_path: str, doc: Document) -> None:
    save(db_path, STORE_KEY, doc.to_dict())


def get_subject_data(doc: Document, subject_id: str) -> SubjectData:
    get_subject(subject_id)
    return doc.subjects[subject_id]
