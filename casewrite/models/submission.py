"""Document submission input models."""

from dataclasses import dataclass
from typing import Optional, Dict, Any

from ..utils.errors import ValidationError

ALLOWED_MIME_TYPES = (
    "image/jpeg",
    "image/png",
    "image/webp",
    "application/pdf",
)

FILE_DATA_NOT_OBJECT = "fileData must be an object with mimeType and data."


@dataclass(frozen=True)
class FileData:
    """
    An uploaded document ready to be sent inline to the model.

    Attributes:
        mime_type: One of ALLOWED_MIME_TYPES
        data: Base64 text of the file body, without a data-URL prefix
    """
    mime_type: str
    data: str


@dataclass(frozen=True)
class DocumentSubmission:
    """
    Input for one analysis request.

    Attributes:
        case_id: Case or document identifier entered by the user
        document_content: Free text pasted into the form (may be empty)
        file_data: Optional uploaded file, already base64-encoded
    """
    case_id: str
    document_content: str = ""
    file_data: Optional[FileData] = None

    @property
    def has_text(self) -> bool:
        return bool(self.document_content and self.document_content.strip())

    @property
    def has_file(self) -> bool:
        return self.file_data is not None and bool(self.file_data.data)
    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "DocumentSubmission":
        """
        Build a submission from the camelCase JSON body posted by API clients.

        Raises:
            ValidationError: If ``fileData`` is present but not an object
        """
        file_payload = payload.get("fileData")
        file_data = None
        if file_payload is not None and not isinstance(file_payload, dict):
            raise ValidationError.from_fields({"general": FILE_DATA_NOT_OBJECT})
        if file_payload:
            file_data = FileData(
                mime_type=str(file_payload.get("mimeType") or ""),
                data=str(file_payload.get("data") or ""),
            )
        return cls(
            case_id=str(payload.get("caseId") or ""),
            document_content=str(payload.get("documentContent") or ""),
            file_data=file_data,
        )
