"""Import study material from files as notes or past papers."""
import json
import logging
import zipfile
from pathlib import Path

from studyhub.errors import EmptyInput, EntityNotFound, ImportFailed
from studyhub.notes import create_note, save_past_paper

logger = logging.getLogger(__name__)

# Keyword mapping for auto-categorization
SUBJECT_KEYWORDS = {
    "maths-ocr": [
        "differentiat", "integra", "equation", "quadratic", "polynomial", "logarithm",
        "trigonometr", "vector", "matrix", "binomial", "probability", "hypothesis test",
        "sequence", "proof", "calculus", "gradient",
    ],
    "cs-ocr": [
        "algorithm", "binary", "hexadecimal", "boolean", "compiler", "processor", "cpu",
        "recursion", "data structure", "linked list", "stack", "queue", "database", "sql",
        "network", "protocol", "object-oriented", "big o",
    ],
    "econ-edx": [
        "demand", "supply", "elasticity", "market failure", "inflation", "unemployment",
        "gdp", "fiscal", "monetary", "interest rate", "monopoly", "oligopoly", "externalit",
        "aggregate", "tariff", "exchange rate",
    ],
}

IMPORT_TARGETS = ("note", "pastpaper")


def _read_json(path: Path) -> str:
    data = json.loads(path.read_text())
    return json.dumps(data, indent=2) if isinstance(data, (dict, list)) else str(data)


def _read_yaml(path: Path) -> str:
    import yaml
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"invalid YAML: {e}") from e
    return yaml.safe_dump(data, sort_keys=False) if isinstance(data, (dict, list)) else str(data)


def _read_pdf(path: Path) -> str:
    from PyPDF2 import PdfReader
    from PyPDF2.errors import PdfReadError
    try:
        reader = PdfReader(str(path))
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    except PdfReadError as e:
        raise ValueError(f"unreadable PDF: {e}") from e


def _read_docx(path: Path) -> str:
    from docx import Document
    from docx.opc.exceptions import PackageNotFoundError
    try:
        doc = Document(str(path))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError) as e:
        raise ValueError(f"unreadable Word document: {e}") from e
    return "\n".join(p.text for p in doc.paragraphs)


def _read_html(path: Path) -> str:
    from bs4 import BeautifulSoup
    return BeautifulSoup(path.read_text(), "html.parser").get_text()


READERS = {
    ".json": _read_json,
    ".yaml": _read_yaml,
    ".yml": _read_yaml,
    ".pdf": _read_pdf,
    ".docx": _read_docx,
    ".html": _read_html,
    ".htm": _read_html,
}


def read_file_content(file_path: str) -> str:
    """Return the text of ``file_path``, chosen by suffix. Unknown suffixes are read as plain text.

    Raises ImportFailed if the file is missing or cannot be decoded.
    """
    path = Path(file_path)
    reader = READERS.get(path.suffix.lower(), Path.read_text)
    try:
        return reader(path)
    except (OSError, ValueError) as e:
        raise ImportFailed(f"Could not read {path.name}: {e}") from e


def categorize_content(text: str) -> str | None:
    """Guess the subject of ``text`` by keyword counts. Returns a subject id or None."""
    text_lower = text.lower()
    scores = {}
    for subject_id, keywords in SUBJECT_KEYWORDS.items():
        scores[subject_id] = sum(1 for kw in keywords if kw in text_lower)
    best = max(scores, key=scores.get)
    return best if scores[best] > 0 else None


def import_file(db_path: str, file_path: str, subject_id: str | None = None, target: str = "note") -> dict:
    """Store a file's text as a note or past paper. Auto-categorizes if subject_id not provided."""
    if target not in IMPORT_TARGETS:
        raise ImportFailed(f"Unknown import target: {target}")
    content = read_file_content(file_path).strip()
    if not content:
        raise EmptyInput(f"No text found in {Path(file_path).name}")
    if subject_id is None:
        subject_id = categorize_content(content)
        if subject_id is None:
            raise EntityNotFound(f"Could not tell which subject {Path(file_path).name} belongs to")
        logger.info("Categorized %s as %s", Path(file_path).name, subject_id)
    if target == "note":
        entity = create_note(db_path, subject_id, content)
    else:
        entity = save_past_paper(db_path, subject_id, content)
    return {
        "filename": Path(file_path).name,
        "subject_id": subject_id,
        "target": target,
        "id": entity.id,
        "length": len(content),
    }
