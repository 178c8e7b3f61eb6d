"""Provider-neutral model request."""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional


@dataclass(frozen=True)
class InlineData:
    """Binary payload sent alongside the prompt text."""
    mime_type: str
    data: str  # base64


@dataclass(frozen=True)
class ContentPart:
    """
    One segment of the user turn: either text or an inline-data payload.

    Exactly one of ``text`` and ``inline_data`` is set.
    """
    text: Optional[str] = None
    inline_data: Optional[InlineData] = None

    @property
    def is_text(self) -> bool:
        return self.text is not None


@dataclass(frozen=True)
class ModelRequest:
    """
    Everything the model client needs for a single constrained-JSON call.

    Attributes:
        system_instruction: Agent instructions including date and case ID
        parts: Ordered content parts (text first, then optional inline data)
        response_schema: JSON schema the reply must conform to
        response_mime_type: Always application/json for this service
    """
    system_instruction: str
    parts: List[ContentPart]
    response_schema: Dict[str, Any] = field(default_factory=dict)
    response_mime_type: str = "application/json"
