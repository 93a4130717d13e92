"""Book text extraction: local PDF decoding with a remote service fallback."""

import logging
import re
from pathlib import Path

import chardet
import httpx

from src.config import ExtractionConfig
from src.errors import ExtractionError
from src.models.extracted import ExtractedText

logger = logging.getLogger(__name__)

# Supported file extensions mapped to format identifiers
SUPPORTED_FORMATS: dict[str, str] = {
    ".pdf": "pdf",
    ".txt": "txt",
    ".md": "txt",
}

PAGE_SEPARATOR = "\n\n"


def title_from_filename(file_path: str | Path) -> str:
    """Derive a display title from a file name.

    ``my-great_book.pdf`` becomes ``My Great Book``.
    """
    stem = Path(file_path).stem
    spaced = re.sub(r"[-_]", " ", stem)
    return re.sub(r"\b\w", lambda m: m.group().upper(), spaced)


class TextExtractor:
    """Extracts raw text from uploaded book files.

    PDFs are decoded locally with pymupdf. When that fails or yields no
    text and ``remote_url`` is configured, the file is posted to the
    remote extraction service instead.

    Args:
        config: ExtractionConfig with the optional remote_url and timeout.
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self._config = config or ExtractionConfig()

    def extract(self, file_path: str | Path) -> ExtractedText:
        """Extract the text of a book file.

        Args:
            file_path: Path to the book file.

        Returns:
            ExtractedText with the page count and full text.

        Raises:
            FileNotFoundError: If file_path does not exist.
            ValueError: If the file format is not supported.
            ExtractionError: If no strategy produced any text.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        file_format = self._detect_format(path)
        if file_format == "txt":
            return ExtractedText(
                page_count=1,
                text=self._read_txt(path),
                source_path=str(path),
                method="txt",
            )

        result = self._extract_pdf_local(path)
        if result is not None:
            return result

        if self._config.remote_url:
            logger.info("Falling back to remote extraction for %s", path)
            return self._extract_pdf_remote(path)

        raise ExtractionError(
            f"Failed to extract text from PDF: {path.name}",
            context={"source_path": str(path)},
        )

    def _detect_format(self, file_path: Path) -> str:
        ext = file_path.suffix.lower()
        if ext not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported file format: '{ext}'. "
                f"Supported: {', '.join(SUPPORTED_FORMATS.keys())}"
            )
        return SUPPORTED_FORMATS[ext]

    def _extract_pdf_local(self, file_path: Path) -> ExtractedText | None:
        """Extract text from a PDF file using pymupdf (fitz).

        Returns:
            The extracted text, or None if decoding failed or found no text.
        """
        import fitz  # type: ignore[import-untyped]

        try:
            with fitz.open(str(file_path)) as doc:
                page_count = doc.page_count
                pages = []
                for page in doc:
                    text = page.get_text("text")
                    if text.strip():
                        pages.append(text)
        except Exception:
            logger.exception("Failed to parse PDF: %s", file_path)
            return None

        if not pages:
            logger.warning("PDF contains no extractable text: %s", file_path)
            return None

        return ExtractedText(
            page_count=page_count,
            text=PAGE_SEPARATOR.join(pages),
            source_path=str(file_path),
            method="pymupdf",
        )

    def _extract_pdf_remote(self, file_path: Path) -> ExtractedText:
        """Post a PDF to the remote extraction service.

        The service answers with ``{"pageCount": int, "text": str}``.

        Raises:
            ExtractionError: On HTTP failure or an empty reply.
        """
        url = self._config.remote_url
        try:
            with open(file_path, "rb") as f:
                response = httpx.post(
                    url,
                    files={"file": (file_path.name, f, "application/pdf")},
                    timeout=self._config.timeout,
                )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ExtractionError(
                f"Remote PDF extraction failed: {e}",
                context={"source_path": str(file_path), "url": url},
            ) from e

        text = str(data.get("text") or "") if isinstance(data, dict) else ""
        if not text.strip():
            raise ExtractionError(
                "Remote PDF extraction returned no text",
                context={"source_path": str(file_path), "url": url},
            )

        return ExtractedText(
            page_count=int(data.get("pageCount") or 1),
            text=text,
            source_path=str(file_path),
            method="remote",
        )

    def _read_txt(self, file_path: Path) -> str:
        """Read a plain text file, detecting the encoding when not UTF-8."""
        try:
            return file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            pass

        raw_bytes = file_path.read_bytes()
        detected = chardet.detect(raw_bytes)
        encoding = detected.get("encoding") or "utf-8"
        confidence = detected.get("confidence", 0)

        if confidence < 0.7:
            logger.warning(
                "Low confidence encoding detection for %s: %s (%.0f%%)",
                file_path,
                encoding,
                confidence * 100,
            )

        try:
            return raw_bytes.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.error("Failed to decode file: %s", file_path)
            return raw_bytes.decode("utf-8", errors="replace")
