"""JSON schema constraining the model's reply to the WorkflowResult shape."""

from typing import Dict, Any

from .models.workflow import URGENCY_LEVELS

RESPONSE_TOOL_NAME = "record_workflow_result"
RESPONSE_TOOL_DESCRIPTION = (
    "Record the complete case-management workflow result for the analyzed document."
)

_STRING = {"type": "string"}
_NULLABLE_STRING = {"type": ["string", "null"]}


def _object(properties: Dict[str, Any], required=None) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": list(required if required is not None else properties),
    }


def _array_of(items: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "array", "items": items}


WORKFLOW_RESULT_SCHEMA: Dict[str, Any] = _object({
    "caseId": _STRING,
    "initialProcessing": _object(
        {
            "acknowledgedToSender": _STRING,
            "documentTypeIdentified": {
                "type": "string",
                "description": "Identify if it is a form, letter, or handwritten note.",
            },
            "employeeName": _NULLABLE_STRING,
            "dateOfIncident": _NULLABLE_STRING,
            "dateReceived": _STRING,
        },
        required=["acknowledgedToSender", "documentTypeIdentified", "dateReceived"],
    ),
    "analysisAndStorage": _object({
        "summary": _STRING,
        "keyPoints": _array_of(_STRING),
        "disabilityDetails": {
            "type": "string",
            "description": "Details extracted from text or handwriting regarding the condition.",
        },
        "simulatedStorageConfirmation": _STRING,
    }),
    "planningAndTasks": _object({
        "casePlan": _object({
            "planDetails": _STRING,
            "reasoning": _STRING,
        }),
        "suggestedTasks": _array_of(_object({
            "title": _STRING,
            "details": _STRING,
            "dueDateSuggestion": _STRING,
            "assignedToSuggestion": _STRING,
        })),
        "suggestedCalendarEvents": _array_of(_object(
            {
                "title": _STRING,
                "description": _STRING,
                "startTimeSuggestion": _STRING,
                "endTimeSuggestion": _STRING,
                "alertMinutesBeforeSuggestion": {"type": ["number", "null"]},
            },
            required=["title", "description", "startTimeSuggestion", "endTimeSuggestion"],
        )),
    }),
    "notificationsAndUrgency": _object({
        "simulatedAlerts": _array_of(_object({
            "recipientSuggestion": _STRING,
            "channelSuggestion": _STRING,
            "message": _STRING,
        })),
        # Free text; unknown levels render in the default tier
        "overallUrgencyLevel": {
            "type": "string",
            "description": "One of: " + ", ".join(URGENCY_LEVELS) + ".",
        },
    }),
    "aiAgentActions": _object({
        "draftLetters": _array_of(_object({
            "recipient": _STRING,
            "subject": _STRING,
            "content": {"type": "string", "description": "Full draft of the letter content."},
            "context": _STRING,
            "status": {"type": "string", "enum": ["Pending Approval"]},
        })),
        "stakeholderCommunications": _array_of(_object({
            "stakeholder": _STRING,
            "updateType": _STRING,
            "notes": _STRING,
        })),
    }),
})


def build_tool_config(schema: Dict[str, Any]) -> Dict[str, Any]:
    """
    Bedrock Converse toolConfig forcing the reply through a single tool.

    Forcing the tool is how Converse constrains output to ``schema``.
    """
    return {
        "tools": [
            {
                "toolSpec": {
                    "name": RESPONSE_TOOL_NAME,
                    "description": RESPONSE_TOOL_DESCRIPTION,
                    "inputSchema": {"json": schema},
                }
            }
        ],
        "toolChoice": {"tool": {"name": RESPONSE_TOOL_NAME}},
    }
