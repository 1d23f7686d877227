"""PDF text extraction for card statements."""
from pathlib import Path
from typing import Iterable, Optional
import pdfplumber
import pypdf

from cardsense.utils.logger import get_logger
from cardsense.utils.exceptions import ExtractionError

logger = get_logger()


class PDFProcessor:
    """Extracts text from PDF statements, page order preserved."""

    MIN_TEXT_LENGTH = 50

    def extract_text(self, pdf_path: Path, password: Optional[str] = None) -> str:
        """
        Extract text from a statement PDF.

        Args:
            pdf_path: Path to PDF file
            password: Statement password, if the bank encrypts it

        Returns:
            Page texts joined with newlines

        Raises:
            ExtractionError: If the file is missing, unreadable or yields too little text
        """
        pdf_path = Path(pdf_path)
        if not pdf_path.exists():
            raise ExtractionError(pdf_path.name, "file not found")

        text = self._extract_with_pdfplumber(pdf_path, password)

        if not self.validate_extraction(text):
            logger.info(f"pdfplumber got {len(text or '')} chars from {pdf_path.name}, falling back to pypdf")
            text = self._extract_with_pypdf(pdf_path, password)

        if not self.validate_extraction(text):
            raise ExtractionError(
                pdf_path.name,
                f"extracted text too short ({len(text or '')} chars, "
                f"minimum {self.MIN_TEXT_LENGTH}); file may be scanned, encrypted or corrupted"
            )

        logger.info(f"Extracted {len(text)} characters from {pdf_path.name}")
        return text

    def validate_extraction(self, text: Optional[str]) -> bool:
        """Return True when the text is long enough to hold a statement."""
        return bool(text) and len(text) >= self.MIN_TEXT_LENGTH

    def _extract_with_pdfplumber(self, pdf_path: Path, password: Optional[str]) -> Optional[str]:
        try:
            with pdfplumber.open(pdf_path, password=password or "") as pdf:
                return _join_pages((page.extract_text() for page in pdf.pages), "pdfplumber", pdf_path.name)
        except Exception as e:
            logger.warning(f"pdfplumber could not read {pdf_path.name}: {e}")
            return None

    def _extract_with_pypdf(self, pdf_path: Path, password: Optional[str]) -> Optional[str]:
        """
        Extract text using pypdf.

        Encrypted files are decrypted with the given password first; a wrong
        or missing password yields None.
        """
        try:
            with open(pdf_path, "rb") as f:
                reader = pypdf.PdfReader(f)
                if reader.is_encrypted and not reader.decrypt(password or ""):
                    logger.error(f"pypdf could not decrypt {pdf_path.name}; wrong or missing password")
                    return None
                return _join_pages((page.extract_text() for page in reader.pages), "pypdf", pdf_path.name)
        except Exception as e:
            logger.error(f"pypdf could not read {pdf_path.name}: {e}")
            return None


def _join_pages(page_texts: Iterable[Optional[str]], engine: str, file_name: str) -> Optional[str]:
    """Join non-empty page texts in page order."""
    parts = []
    for number, page_text in enumerate(page_texts, 1):
        if page_text:
            parts.append(page_text)
        else:
            logger.debug(f"{engine}: page {number} of {file_name} has no text layer")

    text = "\n".join(parts)
    logger.debug(f"{engine}: {len(text)} chars from {file_name}")
    return text or None
