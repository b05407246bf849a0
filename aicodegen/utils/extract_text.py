"""
Text Extraction
===============

Turns a file on disk into plain text for the model, whatever its format:

    .pdf    page text via pypdf
    .odt    paragraphs of content.xml inside the zip container
    .docx   paragraphs of word/document.xml inside the zip container
    .xml    every text node in the document
    other   read as UTF-8 text

load_text() raises ExtractionError on failure. extract_text() never raises:
failures come back as "Error reading file: ..." text, ready to hand to the
model as a tool payload.
"""

import zipfile
import xml.etree.ElementTree as ET
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from aicodegen.utils.logger import Logger

logger = Logger("ExtractText")

# Members holding the body of zipped office documents
_ZIPPED_BODIES = {
    ".odt": "content.xml",
    ".docx": "word/document.xml",
}

# Local names of paragraph-like elements (ODF text:p / text:h, OOXML w:p)
_PARAGRAPH_TAGS = {"p", "h"}


def _local_name(tag: str) -> str:
    """Strip the '{namespace}' prefix ElementTree puts on tag names."""
    return tag.rsplit("}", 1)[-1]


def _text_from_xml(xml_text: str | bytes) -> str:
    """
    Collect the text of an XML document, one line per paragraph.

    Documents without paragraph elements fall back to all text nodes.
    """
    root = ET.fromstring(xml_text)

    paragraphs = []
    for element in root.iter():
        if not isinstance(element.tag, str) or _local_name(element.tag) not in _PARAGRAPH_TAGS:
            continue
        text = "".join(element.itertext()).strip()
        if text:
            paragraphs.append(text)

    if not paragraphs:
        paragraphs = [chunk.strip() for chunk in root.itertext() if chunk.strip()]

    return "\n".join(paragraphs).strip()


def _text_from_pdf(path: Path) -> str:
    reader = PdfReader(path)
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def _text_from_zipped_xml(path: Path, member: str) -> str:
    with zipfile.ZipFile(path) as archive:
        return _text_from_xml(archive.read(member))


class ExtractionError(Exception):
    """A file could not be read or decoded."""


def load_text(filepath: str) -> str:
    """
    Extract plain text from a file.

    Args:
        filepath: Path to the file (relative paths resolve against the cwd)

    Returns:
        The text content

    Raises:
        ExtractionError: If the file is missing, unreadable or malformed
    """
    path = Path(filepath).resolve()
    suffix = path.suffix.lower()
    logger.debug(f"Extracting text from {path}")

    try:
        if suffix == ".pdf":
            return _text_from_pdf(path)

        if suffix in _ZIPPED_BODIES:
            return _text_from_zipped_xml(path, _ZIPPED_BODIES[suffix])

        if suffix == ".xml":
            return _text_from_xml(path.read_bytes())

        with open(path, encoding="utf-8", newline="") as f:
            return f.read()

    except (OSError, UnicodeDecodeError, ET.ParseError, zipfile.BadZipFile,
            KeyError, PyPdfError) as e:
        logger.warning(f"Could not read {path}: {e}")
        raise ExtractionError(f"Error reading file: {e}") from e


def extract_text(filepath: str) -> str:
    """
    Like load_text(), but a failure comes back as "Error reading file: ..."
    text instead of an exception.
    """
    try:
        return load_text(filepath)
    except ExtractionError as e:
        return str(e)
