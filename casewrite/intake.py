"""Form input validation and file encoding for the intake page."""

import base64
import logging
from dataclasses import replace
from typing import Optional

from .models.submission import ALLOWED_MIME_TYPES, DocumentSubmission, FileData
from .utils.errors import EncodingError, ValidationError

logger = logging.getLogger(__name__)

CASE_ID_REQUIRED = "Case ID is required."
CONTENT_REQUIRED = "Please provide either text content OR upload a document."
INVALID_FILE_TYPE = "Invalid file type. Please upload JPG, PNG, WEBP, or PDF."

DEFAULT_MAX_FILE_SIZE_MB = 10


def is_allowed_mime_type(mime_type: Optional[str]) -> bool:
    return (mime_type or "").lower() in ALLOWED_MIME_TYPES


def encode_file(
    data: bytes,
    mime_type: str,
    filename: str = "upload",
    max_file_size_mb: int = DEFAULT_MAX_FILE_SIZE_MB
) -> FileData:
    """
    Filter and base64-encode an uploaded file.

    Args:
        data: Raw file bytes
        mime_type: Content type reported by the browser
        filename: Original filename, used in messages
        max_file_size_mb: Per-file size limit

    Returns:
        FileData with the base64 body (no data-URL prefix)

    Raises:
        ValidationError: If the type is not allowed, or the file is empty or too large
        EncodingError: If the bytes cannot be converted to base64
    """
    if not is_allowed_mime_type(mime_type):
        logger.warning(f"Rejected upload {filename} with type {mime_type!r}")
        raise ValidationError.from_fields({"general": INVALID_FILE_TYPE})

    if not data:
        raise ValidationError.from_fields({"general": f"{filename} is empty."})

    if len(data) > max_file_size_mb * 1024 * 1024:
        raise ValidationError.from_fields({
            "general": f"{filename} exceeds the per-file limit of {max_file_size_mb} MB."
        })

    try:
        encoded = base64.b64encode(data).decode("ascii")
    except (TypeError, ValueError) as e:
        logger.error(f"File conversion error for {filename}: {e}")
        raise EncodingError.conversion_failed(mime_type, e)

    logger.debug(f"Encoded {filename}: {len(data)} bytes -> {len(encoded)} base64 chars")
    return FileData(mime_type=mime_type.lower(), data=encoded)


def validate_submission(
    case_id: Optional[str],
    document_content: Optional[str],
    file_data: Optional[FileData]
) -> DocumentSubmission:
    """
    Check the form before anything is sent to the model.

    Both checks run so every field gets its message in one pass.

    Raises:
        ValidationError: With ``field_errors`` keyed by ``case_id`` and ``general``
    """
    draft = DocumentSubmission(
        case_id=(case_id or "").strip(),
        document_content=document_content or "",
        file_data=file_data,
    )
    field_errors = {}

    if not draft.case_id:
        field_errors["case_id"] = CASE_ID_REQUIRED

    if not draft.has_text and not draft.has_file:
        field_errors["general"] = CONTENT_REQUIRED
    elif draft.has_file and not is_allowed_mime_type(file_data.mime_type):
        field_errors["general"] = INVALID_FILE_TYPE

    if field_errors:
        raise ValidationError.from_fields(field_errors)

    if not draft.has_file:
        return replace(draft, file_data=None)
    # Converse formats are keyed by lower-case MIME type
    return replace(draft, file_data=replace(file_data, mime_type=file_data.mime_type.lower()))
