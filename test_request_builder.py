"""Tests for turning submissions into model requests."""

import asyncio
import base64
import json
from datetime import date

import pytest

from casewrite.models.submission import DocumentSubmission, FileData
from casewrite.request_builder import (
    DEFAULT_DOCUMENT_PROMPT,
    TEXT_CONTEXT_PREFIX,
    RequestBuilder,
    build_content_parts,
    build_system_instruction,
    parse_workflow_result,
)
from casewrite.schema import WORKFLOW_RESULT_SCHEMA
from casewrite.utils.errors import MissingCredentialError, SchemaError

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class RecordingClient:
    """Model client that records requests and replies with a fixed body."""

    def __init__(self, body):
        self.body = body
        self.requests = []

    async def generate_content(self, request):
        self.requests.append(request)
        return self.body


def test_text_only_submission_builds_single_text_part():
    submission = DocumentSubmission(
        case_id="CASE-1",
        document_content="Employee fell at work on 2024-01-05.",
    )

    parts = build_content_parts(submission)

    assert len(parts) == 1
    assert parts[0].text == TEXT_CONTEXT_PREFIX + "Employee fell at work on 2024-01-05."
    assert parts[0].inline_data is None


def test_file_without_text_uses_placeholder_then_inline_part():
    encoded = base64.b64encode(PNG_BYTES).decode("ascii")
    submission = DocumentSubmission(
        case_id="CASE-2",
        document_content="   ",
        file_data=FileData(mime_type="image/png", data=encoded),
    )

    parts = build_content_parts(submission)

    assert [part.is_text for part in parts] == [True, False]
    assert parts[0].text == DEFAULT_DOCUMENT_PROMPT
    assert parts[1].inline_data.mime_type == "image/png"
    assert parts[1].inline_data.data == encoded
    assert not parts[1].inline_data.data.startswith("data:")


def test_system_instruction_names_case_and_date():
    instruction = build_system_instruction("CASE-42", today=date(2024, 3, 1))

    assert 'Case ID: "CASE-42".' in instruction
    assert "2024-03-01" in instruction
    assert "Casewrite AI" in instruction


def test_build_request_asks_for_schema_constrained_json():
    builder = RequestBuilder(RecordingClient("{}"), api_key="key")
    request = builder.build_request(DocumentSubmission(case_id="CASE-1", document_content="x"))

    assert request.response_mime_type == "application/json"
    assert request.response_schema is WORKFLOW_RESULT_SCHEMA
    assert "CASE-1" in request.system_instruction


def test_analyze_makes_exactly_one_call(sample_result_json):
    client = RecordingClient(sample_result_json)
    builder = RequestBuilder(client, api_key="key")

    result = asyncio.run(
        builder.analyze(DocumentSubmission(case_id="CASE-1", document_content="Fell at work."))
    )

    assert len(client.requests) == 1
    assert result.case_id == "CASE-1"
    assert result.notifications_and_urgency.overall_urgency_level == "High"


def test_missing_api_key_fails_before_calling_model(sample_result_json):
    client = RecordingClient(sample_result_json)
    builder = RequestBuilder(client, api_key=None)

    with pytest.raises(MissingCredentialError) as exc_info:
        asyncio.run(builder.analyze(DocumentSubmission(case_id="CASE-1", document_content="x")))

    assert client.requests == []
    assert "BEDROCK_API_KEY" in str(exc_info.value)


def test_non_json_reply_is_schema_error():
    builder = RequestBuilder(RecordingClient("I'm sorry, I cannot help with that."), api_key="key")

    with pytest.raises(SchemaError):
        asyncio.run(builder.analyze(DocumentSubmission(case_id="CASE-1", document_content="x")))


def test_reply_missing_section_is_schema_error(sample_result):
    del sample_result["notificationsAndUrgency"]

    with pytest.raises(SchemaError):
        parse_workflow_result(json.dumps(sample_result))
