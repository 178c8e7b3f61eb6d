"""
Request builder for document analysis.

Packages a DocumentSubmission into a schema-constrained model request, issues
exactly one call through the model client and returns the typed result.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import List, Optional, Protocol

from .models.request import ContentPart, InlineData, ModelRequest
from .models.submission import DocumentSubmission
from .models.workflow import WorkflowResult
from .schema import WORKFLOW_RESULT_SCHEMA
from .utils.config import API_KEY_ENV_VARS
from .utils.errors import MissingCredentialError, SchemaError

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_PROMPT = "Please analyze the attached document."
TEXT_CONTEXT_PREFIX = "Additional Context/Text Content:\n"


class ModelClient(Protocol):
    async def generate_content(self, request: ModelRequest) -> str:
        ...


def build_system_instruction(case_id: str, today: Optional[date] = None) -> str:
    """
    Compose the agent instructions for one case.

    Args:
        case_id: Case identifier embedded verbatim in the instructions
        today: Date to report as current (defaults to today)

    Returns:
        System instruction text
    """
    current_date = (today or date.today()).isoformat()
    return f"""
You are "Casewrite AI", an advanced autonomous agent for employee disability case management.
Your goal is to process incoming case documents (images, PDFs, handwritten notes, or text), understand them deeply, and orchestrate the entire case management workflow.
The current date is {current_date}.
Case ID: "{case_id}".

**Your Capabilities:**
1. **Vision & OCR**: You can read complex documents, including cursive handwriting, forms, and medical notes.
2. **Analysis**: Identify document types, extract employee details, and summarize medical conditions.
3. **Planning**: Create actionable case management plans and schedule tasks.
4. **Communication Agent**:
   - You must DRAFT formal letters to stakeholders (Employee, Doctor, HR) based on the document content.
   - These letters should be professional, empathetic, and ready for the Case Manager to approve.
   - Identify necessary updates to other stakeholders.

**Output Requirement:**
Analyze the provided input (text and/or image) and return a strict JSON object matching the provided schema.
Set overallUrgencyLevel to Low, Medium, or High, and the status of every draft letter to "Pending Approval".
"""


def build_content_parts(submission: DocumentSubmission) -> List[ContentPart]:
    """
    Build the user turn: one text part, then the file as inline data if present.

    When no free text was given the text part is a fixed placeholder asking
    the model to analyze the attachment.
    """
    if submission.has_text:
        text = f"{TEXT_CONTEXT_PREFIX}{submission.document_content}"
    else:
        text = DEFAULT_DOCUMENT_PROMPT

    parts = [ContentPart(text=text)]

    if submission.file_data is not None:
        parts.append(
            ContentPart(
                inline_data=InlineData(
                    mime_type=submission.file_data.mime_type,
                    data=submission.file_data.data,
                )
            )
        )
    return parts


def parse_workflow_result(body: str) -> WorkflowResult:
    """
    Parse the raw reply body.

    Raises:
        SchemaError: If the body is not JSON or not a WorkflowResult
    """
    try:
        data = json.loads(body)
    except (TypeError, ValueError) as e:
        raise SchemaError.invalid_json(e, body or "")
    return WorkflowResult.from_dict(data)


class RequestBuilder:
    """
    Turns submissions into model calls.

    Attributes:
        client: Model client used for the single outbound call
        api_key: Credential passed in at construction; checked again per call
    """

    def __init__(self, client: ModelClient, api_key: Optional[str]):
        self.client = client
        self.api_key = api_key

    def build_request(
        self,
        submission: DocumentSubmission,
        today: Optional[date] = None
    ) -> ModelRequest:
        return ModelRequest(
            system_instruction=build_system_instruction(submission.case_id, today),
            parts=build_content_parts(submission),
            response_schema=WORKFLOW_RESULT_SCHEMA,
            response_mime_type="application/json",
        )

    async def analyze(self, submission: DocumentSubmission) -> WorkflowResult:
        """
        Analyze one submission.

        Args:
            submission: Validated submission (case ID and text or file present)

        Returns:
            WorkflowResult parsed from the model's reply

        Raises:
            MissingCredentialError: If no API key is configured
            EncodingError: If the file payload cannot be decoded for sending
            RemoteError: If the model call fails or returns nothing
            SchemaError: If the reply does not parse into a WorkflowResult
        """
        if not self.api_key:
            raise MissingCredentialError.for_variables(*API_KEY_ENV_VARS)

        request = self.build_request(submission)
        logger.info(
            f"Analyzing document for case {submission.case_id}: "
            f"text={'yes' if submission.has_text else 'placeholder'}, "
            f"file={submission.file_data.mime_type if submission.file_data else 'none'}"
        )

        body = await self.client.generate_content(request)
        result = parse_workflow_result(body)

        logger.info(
            f"Workflow result for case {submission.case_id}: "
            f"urgency={result.notifications_and_urgency.overall_urgency_level}, "
            f"tasks={len(result.planning_and_tasks.suggested_tasks)}, "
            f"letters={len(result.ai_agent_actions.draft_letters) if result.ai_agent_actions else 0}"
        )
        return result
