"""
Document loading: PDF, text and CSV files into engine input.
"""
import csv
import re
import pdfplumber
from pathlib import Path
from typing import List, Optional, Union
import logging

from .errors import InputMissingError, NoExtractableContentError
from ..models.schema import PlainText, Table

logger = logging.getLogger(__name__)

LIGATURES = {
    'ﬁ': 'fi',
    'ﬂ': 'fl',
    'ﬀ': 'ff',
    'ﬃ': 'ffi',
    'ﬄ': 'ffl',
    'ﬆ': 'st',
    'ﬅ': 'st'
}

FORMATS = ("auto", "text", "csv", "pdf", "pdf-table")


def normalize_ligatures(text: str) -> str:
    for ligature, replacement in LIGATURES.items():
        text = text.replace(ligature, replacement)
    return text


class PDFLoader:
    """Flattens a PDF to text or table rows using pdfplumber."""

    def __init__(self, pdf_path: Path):
        self.pdf_path = pdf_path
        self._pdf = None

    def _open(self):
        if self._pdf is None:
            self._pdf = pdfplumber.open(self.pdf_path)
            logger.info(f"Loaded PDF with {len(self._pdf.pages)} pages")
        return self._pdf

    def load_text(self) -> PlainText:
        """Join the text of every page, one physical line per newline."""
        pdf = self._open()
        page_texts = []
        for i, page in enumerate(pdf.pages, 1):
            text = page.extract_text() or ""
            logger.debug(f"Page {i}: {len(text)} characters extracted")
            page_texts.append(normalize_ligatures(text))
        return PlainText(text="\n".join(page_texts))

    def load_table(self) -> Table:
        """Collect the rows of every table pdfplumber finds, page by page."""
        pdf = self._open()
        rows = []
        for i, page in enumerate(pdf.pages, 1):
            for table in page.extract_tables():
                for row in table:
                    rows.append([normalize_ligatures(cell or "") for cell in row])
            logger.debug(f"Page {i}: {len(rows)} table rows so far")
        return Table(rows=rows)

    def close(self):
        """Close the PDF file."""
        if self._pdf:
            self._pdf.close()
            self._pdf = None


def read_text_file(path: Path) -> PlainText:
    return PlainText(text=Path(path).read_text(encoding='utf-8', errors='replace'))


def read_csv_file(path: Path) -> Table:
    with open(path, 'r', encoding='utf-8', errors='replace', newline='') as f:
        return Table(rows=[row for row in csv.reader(f)])


def parse_csv_text(text: str) -> Table:
    return Table(rows=[row for row in csv.reader(text.splitlines())])


def detect_format(path: Path) -> str:
    suffix = Path(path).suffix.lower()
    if suffix == '.pdf':
        return 'pdf'
    if suffix == '.csv':
        return 'csv'
    return 'text'


def load_document(path: Path, fmt: str = "auto") -> Union[PlainText, Table]:
    """
    Load a statement file as engine input.

    Args:
        path: Statement file (.pdf, .txt, .csv)
        fmt: One of auto, text, csv, pdf (text layer) or pdf-table

    Returns:
        PlainText or Table

    Raises:
        InputMissingError: file missing or empty
        NoExtractableContentError: nothing usable came out of the file
        ValueError: unknown format
    """
    path = Path(path)
    if not path.exists() or path.stat().st_size == 0:
        raise InputMissingError(f"No document content: {path}")

    if fmt not in FORMATS:
        raise ValueError(f"Unknown input format: {fmt}")
    if fmt == "auto":
        fmt = detect_format(path)

    if fmt == "text":
        document = read_text_file(path)
    elif fmt == "csv":
        document = read_csv_file(path)
    else:
        loader = PDFLoader(path)
        try:
            document = loader.load_table() if fmt == "pdf-table" else loader.load_text()
        finally:
            loader.close()

    if not has_content(document):
        raise NoExtractableContentError(f"No text or table rows extracted from {path.name}")
    return document


def has_content(document: Optional[Union[PlainText, Table]]) -> bool:
    """True when the document holds at least one non-blank line or cell."""
    if document is None:
        return False
    if isinstance(document, PlainText):
        return bool(re.search(r'\S', document.text or ""))
    return any(any((cell or "").strip() for cell in row) for row in document.rows)


def table_rows(document: Table) -> List[List[str]]:
    return [list(row) for row in document.rows if any((cell or "").strip() for cell in row)]
