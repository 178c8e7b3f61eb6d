"""Shared fixtures: a schema-conforming reply and a stubbed Bedrock runtime."""

import copy
import json

import pytest

from casewrite import service
from casewrite.request_builder import RequestBuilder
from casewrite.schema import RESPONSE_TOOL_NAME
from casewrite.session import CaseSession
from casewrite.utils.bedrock_client import BedrockClient
from casewrite.utils.logging import clear_context

SAMPLE_RESULT = {
    "caseId": "CASE-1",
    "initialProcessing": {
        "acknowledgedToSender": "Email receipt automatically acknowledged to sender.",
        "documentTypeIdentified": "Incident Report",
        "employeeName": "Jordan Lee",
        "dateOfIncident": "2024-01-05",
        "dateReceived": "2024-01-08",
    },
    "analysisAndStorage": {
        "summary": "Employee reports a fall at the warehouse.",
        "keyPoints": ["Fall on 2024-01-05", "Left wrist injury", "Off work one week"],
        "disabilityDetails": "Sprained left wrist; light duty advised.",
        "simulatedStorageConfirmation": "Document and summary noted for upload to Case File CASE-1.",
    },
    "planningAndTasks": {
        "casePlan": {
            "planDetails": "Open short-term disability claim and arrange light duty.",
            "reasoning": "Injury is temporary and return to work is expected.",
        },
        "suggestedTasks": [
            {
                "title": "Request medical certificate",
                "details": "Ask the treating physician for restrictions.",
                "dueDateSuggestion": "3 days from now",
                "assignedToSuggestion": "Case Manager",
            },
            {
                "title": "Notify supervisor",
                "details": "Confirm light-duty availability.",
                "dueDateSuggestion": "2024-01-10",
                "assignedToSuggestion": "HR Specialist",
            },
        ],
        "suggestedCalendarEvents": [
            {
                "title": "Return-to-work check-in",
                "description": "Call with the employee.",
                "startTimeSuggestion": "7 days from now at 09:00",
                "endTimeSuggestion": "7 days from now at 09:30",
                "alertMinutesBeforeSuggestion": 15,
            },
        ],
    },
    "notificationsAndUrgency": {
        "simulatedAlerts": [
            {
                "recipientSuggestion": "Assigned Case Manager",
                "channelSuggestion": "Urgent Notifications",
                "message": "New injury claim requires review.",
            },
        ],
        "overallUrgencyLevel": "High",
    },
    "aiAgentActions": {
        "draftLetters": [
            {
                "recipient": "Jordan Lee",
                "subject": "Your disability claim",
                "content": "Dear Jordan,\n\nWe have received your report.",
                "context": "Acknowledge the claim to the employee.",
                "status": "Pending Approval",
            },
        ],
        "stakeholderCommunications": [
            {
                "stakeholder": "HR Director",
                "updateType": "Status Report",
                "notes": "New claim opened.",
            },
        ],
    },
}


def tool_use_response(payload):
    """Converse response whose forced tool input is ``payload``."""
    return {
        "output": {
            "message": {
                "role": "assistant",
                "content": [
                    {
                        "toolUse": {
                            "toolUseId": "tooluse-1",
                            "name": RESPONSE_TOOL_NAME,
                            "input": payload,
                        }
                    }
                ],
            }
        },
        "stopReason": "tool_use",
        "usage": {"inputTokens": 1200, "outputTokens": 800, "totalTokens": 2000},
    }


def text_response(text):
    return {
        "output": {"message": {"role": "assistant", "content": [{"text": text}]}},
        "stopReason": "end_turn",
        "usage": {},
    }


class StubRuntime:
    """Stands in for the boto3 bedrock-runtime client."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def converse(self, **params):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def sample_result():
    return copy.deepcopy(SAMPLE_RESULT)


@pytest.fixture
def sample_result_json():
    return json.dumps(SAMPLE_RESULT)


@pytest.fixture
def stub_runtime():
    return StubRuntime(response=tool_use_response(copy.deepcopy(SAMPLE_RESULT)))


@pytest.fixture
def bedrock_client(stub_runtime):
    return BedrockClient(api_key="test-key", runtime=stub_runtime)


@pytest.fixture
def builder(bedrock_client):
    return RequestBuilder(bedrock_client, api_key="test-key")


@pytest.fixture
def case_session(builder):
    return CaseSession(builder)


@pytest.fixture(autouse=True)
def reset_service():
    service.use_session(None)
    clear_context()
    yield
    service.use_session(None)
    clear_context()
