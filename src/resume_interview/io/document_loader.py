"""
Source document loading.

Turns an uploaded file into the plain text a session is created from.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def _read_docx(file_path: Path) -> str:
    """
    Read text content from a .docx file.

    Args:
        file_path: Path to the .docx file.

    Returns:
        Non-empty paragraphs joined by newlines.
    """
    from docx import Document

    doc = Document(str(file_path))
    paragraphs = [para.text for para in doc.paragraphs if para.text.strip()]
    return "\n".join(paragraphs)


def load_document(file_path: str | Path) -> str:
    """
    Load a document as plain text.

    ``.docx`` files are read with python-docx; anything else is read as
    UTF-8 text.

    Args:
        file_path: Path to the document.

    Returns:
        Extracted text, stripped of surrounding whitespace.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file contains no text.
    """
    path = Path(file_path).expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(f"Document not found: {path}")

    if path.suffix.lower() == ".docx":
        text = _read_docx(path)
    else:
        text = path.read_text(encoding="utf-8")

    text = text.strip()
    if not text:
        raise ValueError(f"Document is empty: {path}")

    logger.debug(f"Loaded document {path.name} ({len(text)} chars)")
    return text
