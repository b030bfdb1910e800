"""
Résumé blob store.

Files live under UPLOAD_DIR; the database only keeps the relative path.
"""
import logging
from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile

from .. import config
from ..utils.error_handlers import FileUploadError, NotFoundError, get_error_message
from ..utils.validation import sanitize_filename

logger = logging.getLogger(__name__)

ALLOWED_RESUME_EXTENSIONS = {".pdf", ".doc", ".docx"}
ALLOWED_RESUME_CONTENT_TYPES = {
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
    "application/octet-stream",
}
_CHUNK_BYTES = 1024 * 1024


def _upload_root() -> Path:
    return Path(config.UPLOAD_DIR)


async def save_resume(file: UploadFile, *, job_id: int, student_id: int) -> str:
    """Store an uploaded résumé and return its path relative to UPLOAD_DIR."""
    original_filename = sanitize_filename(Path(file.filename or "").name)
    ext = Path(original_filename).suffix.lower()
    if ext not in ALLOWED_RESUME_EXTENSIONS:
        raise FileUploadError(get_error_message("invalid_file_type"))
    if file.content_type and file.content_type not in ALLOWED_RESUME_CONTENT_TYPES:
        raise FileUploadError(get_error_message("invalid_file_type"))

    rel_path = Path("resumes") / str(job_id) / str(student_id) / f"{uuid4().hex}{ext}"
    dest = _upload_root() / rel_path
    dest.parent.mkdir(parents=True, exist_ok=True)

    size = 0
    try:
        with open(dest, "wb") as out:
            while True:
                chunk = await file.read(_CHUNK_BYTES)
                if not chunk:
                    break
                size += len(chunk)
                if size > config.MAX_RESUME_BYTES:
                    raise FileUploadError(get_error_message("file_too_large"), status_code=413)
                out.write(chunk)
    except FileUploadError:
        dest.unlink(missing_ok=True)
        raise
    except OSError as e:
        dest.unlink(missing_ok=True)
        logger.error("Failed to store résumé %s: %s", dest, e)
        raise FileUploadError(get_error_message("file_processing_failed"), status_code=500)
    finally:
        await file.close()

    logger.info("Stored résumé %s (%s bytes)", rel_path.as_posix(), size)
    return rel_path.as_posix()


def resolve(rel_path: str) -> Path:
    """Absolute path for a stored reference; refuses paths outside UPLOAD_DIR."""
    root = _upload_root().resolve()
    path = (root / rel_path).resolve()
    if root not in path.parents or not path.is_file():
        raise NotFoundError("Résumé file not found")
    return path


def discard(rel_path: str | None) -> None:
    if not rel_path:
        return
    try:
        (_upload_root() / rel_path).unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove orphaned résumé %s: %s", rel_path, e)
