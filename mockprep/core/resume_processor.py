"""
Resume Processing Layer for MockPrep

Handles:
- Storing uploaded resumes in the upload directory for the duration of a request
- Text extraction from PDF, Word and plain-text resumes

Extraction never fails the request; problems degrade to a placeholder
string that tells the model no usable resume was provided.
"""

import asyncio
import logging
from pathlib import Path
from uuid import uuid4

from docx import Document
from fastapi import UploadFile
from pypdf import PdfReader

from mockprep.config.settings import get_settings
from mockprep.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

PDF_TYPE = "application/pdf"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_TYPE = "application/msword"
TEXT_TYPE = "text/plain"

EXTENSION_TYPES = {
    ".pdf": PDF_TYPE,
    ".docx": DOCX_TYPE,
    ".doc": DOC_TYPE,
    ".txt": TEXT_TYPE,
}


class ResumeProcessor:
    """Resume upload handling and text extraction."""

    def __init__(self):
        self.settings = get_settings()
        self.upload_dir = Path(self.settings.upload_dir)

    async def process_upload(self, upload: UploadFile) -> str:
        """
        Extract text from an uploaded resume.

        The upload is written into the upload directory and removed again
        on every exit path.

        Raises:
            ValidationError: if the file exceeds the configured size limit
        """
        data = await upload.read()
        if len(data) > self.settings.max_upload_bytes:
            raise ValidationError(
                "Resume file is too large",
                details=f"Maximum size is {self.settings.max_upload_mb} MB",
            )

        mime_type = self.resolve_mime_type(upload.filename, upload.content_type)
        suffix = Path(upload.filename or "").suffix.lower()

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        temp_path = self.upload_dir / f"resume-{uuid4().hex}{suffix}"

        try:
            temp_path.write_bytes(data)
            logger.info(f"Stored resume upload {upload.filename!r} ({len(data)} bytes, {mime_type})")
            return await self.extract_text(temp_path, mime_type)
        finally:
            temp_path.unlink(missing_ok=True)

    @staticmethod
    def resolve_mime_type(filename: str | None, content_type: str | None) -> str:
        """Prefer the declared content type, falling back to the file extension."""
        if content_type and content_type != "application/octet-stream":
            return content_type
        return EXTENSION_TYPES.get(Path(filename or "").suffix.lower(), content_type or "")

    async def extract_text(self, path: Path | str, mime_type: str) -> str:
        """
        Extract plain text from a resume file.

        Runs the blocking extractors in the default executor.
        """
        path = Path(path)
        try:
            if mime_type == PDF_TYPE:
                extractor = self._extract_pdf
                label = "PDF"
            elif mime_type in (DOCX_TYPE, DOC_TYPE):
                extractor = self._extract_docx
                label = "DOC"
            elif mime_type == TEXT_TYPE:
                extractor = self._extract_txt
                label = "TXT"
            else:
                return "Unsupported resume format - continuing without resume analysis"

            if not path.exists():
                logger.error(f"{label} file not found: {path}")
                return f"{label} file not found"

            loop = asyncio.get_running_loop()
            text = await loop.run_in_executor(None, extractor, path)
            logger.info(f"{label} text extracted, length: {len(text)}")
            return text

        except Exception as e:
            logger.error(f"Error extracting resume text: {e}")
            return f"Error extracting resume content: {e} - continuing without resume analysis"

    def _extract_pdf(self, path: Path) -> str:
        reader = PdfReader(str(path))
        pages = []
        for page in reader.pages:
            text = page.extract_text()
            if text:
                pages.append(text)
        return "\n".join(pages)

    def _extract_docx(self, path: Path) -> str:
        document = Document(str(path))
        return "\n".join(p.text for p in document.paragraphs)

    def _extract_txt(self, path: Path) -> str:
        return path.read_text(encoding="utf-8", errors="replace")
