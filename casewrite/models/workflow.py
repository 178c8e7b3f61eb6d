"""Workflow result models returned by the model."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar, Union

from ..utils.errors import SchemaError

T = TypeVar("T")
Number = Union[int, float]

URGENCY_LEVELS = ("Low", "Medium", "High")
LETTER_STATUSES = ("Draft", "Pending Approval")


# ----------------------------------------------------------------------
# Shape helpers
# ----------------------------------------------------------------------

def _object(data: Any, path: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise SchemaError.shape_mismatch(path, "an object")
    return data


def _string(data: Dict[str, Any], key: str, path: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise SchemaError.shape_mismatch(f"{path}.{key}", "a string")
    return value


def _optional_string(data: Dict[str, Any], key: str, path: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise SchemaError.shape_mismatch(f"{path}.{key}", "a string or null")
    return value


def _optional_number(data: Dict[str, Any], key: str, path: str) -> Optional[Number]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaError.shape_mismatch(f"{path}.{key}", "a number or null")
    return value


def _array(
    data: Dict[str, Any],
    key: str,
    path: str,
    item: Callable[[Any, str], T]
) -> Tuple[T, ...]:
    value = data.get(key)
    if not isinstance(value, list):
        raise SchemaError.shape_mismatch(f"{path}.{key}", "an array")
    return tuple(item(entry, f"{path}.{key}[{index}]") for index, entry in enumerate(value))


def _string_item(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise SchemaError.shape_mismatch(path, "a string")
    return value


# ----------------------------------------------------------------------
# Intake
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class IntakeSummary:
    """
    Simulated receipt of the incoming document.

    Attributes:
        acknowledged_to_sender: Acknowledgement text sent back to the sender
        document_type_identified: e.g. "Doctor's Note", "Claim Form"
        employee_name: Employee named in the document, if any
        date_of_incident: ISO date of the incident, if stated
        date_received: ISO date the document was received
    """
    acknowledged_to_sender: str
    document_type_identified: str
    employee_name: Optional[str]
    date_of_incident: Optional[str]
    date_received: str

    @classmethod
    def from_dict(cls, data: Any, path: str = "initialProcessing") -> "IntakeSummary":
        data = _object(data, path)
        return cls(
            acknowledged_to_sender=_string(data, "acknowledgedToSender", path),
            document_type_identified=_string(data, "documentTypeIdentified", path),
            employee_name=_optional_string(data, "employeeName", path),
            date_of_incident=_optional_string(data, "dateOfIncident", path),
            date_received=_string(data, "dateReceived", path),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "acknowledgedToSender": self.acknowledged_to_sender,
            "documentTypeIdentified": self.document_type_identified,
            "employeeName": self.employee_name,
            "dateOfIncident": self.date_of_incident,
            "dateReceived": self.date_received,
        }


# ----------------------------------------------------------------------
# Analysis
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class DocumentAnalysis:
    """
    Summary and extracted details of the document.

    ``simulated_storage_confirmation`` is display text only; nothing is stored.
    """
    summary: str
    key_points: Tuple[str, ...]
    disability_details: str
    simulated_storage_confirmation: str

    @classmethod
    def from_dict(cls, data: Any, path: str = "analysisAndStorage") -> "DocumentAnalysis":
        data = _object(data, path)
        return cls(
            summary=_string(data, "summary", path),
            key_points=_array(data, "keyPoints", path, _string_item),
            disability_details=_string(data, "disabilityDetails", path),
            simulated_storage_confirmation=_string(data, "simulatedStorageConfirmation", path),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "keyPoints": list(self.key_points),
            "disabilityDetails": self.disability_details,
            "simulatedStorageConfirmation": self.simulated_storage_confirmation,
        }


# ----------------------------------------------------------------------
# Planning
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class CasePlan:
    plan_details: str
    reasoning: str

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "CasePlan":
        data = _object(data, path)
        return cls(
            plan_details=_string(data, "planDetails", path),
            reasoning=_string(data, "reasoning", path),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"planDetails": self.plan_details, "reasoning": self.reasoning}


@dataclass(frozen=True)
class SuggestedTask:
    title: str
    details: str
    due_date_suggestion: str  # "5 days from now" or YYYY-MM-DD
    assigned_to_suggestion: str  # "Case Manager", "HR Specialist", ...

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "SuggestedTask":
        data = _object(data, path)
        return cls(
            title=_string(data, "title", path),
            details=_string(data, "details", path),
            due_date_suggestion=_string(data, "dueDateSuggestion", path),
            assigned_to_suggestion=_string(data, "assignedToSuggestion", path),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "details": self.details,
            "dueDateSuggestion": self.due_date_suggestion,
            "assignedToSuggestion": self.assigned_to_suggestion,
        }


@dataclass(frozen=True)
class SuggestedCalendarEvent:
    title: str
    description: str
    start_time_suggestion: str
    end_time_suggestion: str
    alert_minutes_before_suggestion: Optional[Number] = None

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "SuggestedCalendarEvent":
        data = _object(data, path)
        return cls(
            title=_string(data, "title", path),
            description=_string(data, "description", path),
            start_time_suggestion=_string(data, "startTimeSuggestion", path),
            end_time_suggestion=_string(data, "endTimeSuggestion", path),
            alert_minutes_before_suggestion=_optional_number(
                data, "alertMinutesBeforeSuggestion", path
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "startTimeSuggestion": self.start_time_suggestion,
            "endTimeSuggestion": self.end_time_suggestion,
            "alertMinutesBeforeSuggestion": self.alert_minutes_before_suggestion,
        }


@dataclass(frozen=True)
class PlanningOutput:
    case_plan: CasePlan
    suggested_tasks: Tuple[SuggestedTask, ...]
    suggested_calendar_events: Tuple[SuggestedCalendarEvent, ...]

    @classmethod
    def from_dict(cls, data: Any, path: str = "planningAndTasks") -> "PlanningOutput":
        data = _object(data, path)
        return cls(
            case_plan=CasePlan.from_dict(data.get("casePlan"), f"{path}.casePlan"),
            suggested_tasks=_array(data, "suggestedTasks", path, SuggestedTask.from_dict),
            suggested_calendar_events=_array(
                data, "suggestedCalendarEvents", path, SuggestedCalendarEvent.from_dict
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "casePlan": self.case_plan.to_dict(),
            "suggestedTasks": [task.to_dict() for task in self.suggested_tasks],
            "suggestedCalendarEvents": [
                event.to_dict() for event in self.suggested_calendar_events
            ],
        }


# ----------------------------------------------------------------------
# Notifications
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class SimulatedAlert:
    recipient_suggestion: str
    channel_suggestion: str
    message: str

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "SimulatedAlert":
        data = _object(data, path)
        return cls(
            recipient_suggestion=_string(data, "recipientSuggestion", path),
            channel_suggestion=_string(data, "channelSuggestion", path),
            message=_string(data, "message", path),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recipientSuggestion": self.recipient_suggestion,
            "channelSuggestion": self.channel_suggestion,
            "message": self.message,
        }


@dataclass(frozen=True)
class UrgencyReport:
    """
    Overall urgency plus simulated alerts.

    ``overall_urgency_level`` is normally one of URGENCY_LEVELS but any string
    the model emits is kept as-is.
    """
    simulated_alerts: Tuple[SimulatedAlert, ...]
    overall_urgency_level: str

    @classmethod
    def from_dict(cls, data: Any, path: str = "notificationsAndUrgency") -> "UrgencyReport":
        data = _object(data, path)
        return cls(
            simulated_alerts=_array(data, "simulatedAlerts", path, SimulatedAlert.from_dict),
            overall_urgency_level=_string(data, "overallUrgencyLevel", path),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "simulatedAlerts": [alert.to_dict() for alert in self.simulated_alerts],
            "overallUrgencyLevel": self.overall_urgency_level,
        }


# ----------------------------------------------------------------------
# Agent actions
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class DraftLetter:
    recipient: str
    subject: str
    content: str  # full letter body
    context: str  # why the letter is being sent
    status: str  # "Draft" | "Pending Approval"

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "DraftLetter":
        data = _object(data, path)
        status = _string(data, "status", path)
        if status not in LETTER_STATUSES:
            raise SchemaError.shape_mismatch(
                f"{path}.status", "one of " + ", ".join(repr(s) for s in LETTER_STATUSES)
            )
        return cls(
            recipient=_string(data, "recipient", path),
            subject=_string(data, "subject", path),
            content=_string(data, "content", path),
            context=_string(data, "context", path),
            status=status,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recipient": self.recipient,
            "subject": self.subject,
            "content": self.content,
            "context": self.context,
            "status": self.status,
        }


@dataclass(frozen=True)
class StakeholderCommunication:
    stakeholder: str  # "HR Director", "Legal", ...
    update_type: str  # "Status Report", "Risk Alert", ...
    notes: str

    @classmethod
    def from_dict(cls, data: Any, path: str) -> "StakeholderCommunication":
        data = _object(data, path)
        return cls(
            stakeholder=_string(data, "stakeholder", path),
            update_type=_string(data, "updateType", path),
            notes=_string(data, "notes", path),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stakeholder": self.stakeholder,
            "updateType": self.update_type,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class AgentActions:
    draft_letters: Tuple[DraftLetter, ...]
    stakeholder_communications: Tuple[StakeholderCommunication, ...]

    @classmethod
    def from_dict(cls, data: Any, path: str = "aiAgentActions") -> "AgentActions":
        data = _object(data, path)
        return cls(
            draft_letters=_array(data, "draftLetters", path, DraftLetter.from_dict),
            stakeholder_communications=_array(
                data, "stakeholderCommunications", path, StakeholderCommunication.from_dict
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "draftLetters": [letter.to_dict() for letter in self.draft_letters],
            "stakeholderCommunications": [
                comm.to_dict() for comm in self.stakeholder_communications
            ],
        }


# ----------------------------------------------------------------------
# Result
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class WorkflowResult:
    """
    Complete structured reply for one submission.

    All sections are produced by a single model call; the object is replaced
    wholesale on the next submission and never mutated.
    """
    case_id: str
    initial_processing: IntakeSummary
    analysis_and_storage: DocumentAnalysis
    planning_and_tasks: PlanningOutput
    notifications_and_urgency: UrgencyReport
    ai_agent_actions: Optional[AgentActions] = None

    @classmethod
    def from_dict(cls, data: Any) -> "WorkflowResult":
        """
        Map the wire document onto typed records.

        Raises:
            SchemaError: If a required key is missing or has the wrong JSON type
        """
        data = _object(data, "$")
        actions = data.get("aiAgentActions")
        return cls(
            case_id=_string(data, "caseId", "$"),
            initial_processing=IntakeSummary.from_dict(data.get("initialProcessing")),
            analysis_and_storage=DocumentAnalysis.from_dict(data.get("analysisAndStorage")),
            planning_and_tasks=PlanningOutput.from_dict(data.get("planningAndTasks")),
            notifications_and_urgency=UrgencyReport.from_dict(
                data.get("notificationsAndUrgency")
            ),
            ai_agent_actions=None if actions is None else AgentActions.from_dict(actions),
        )

    def to_dict(self) -> Dict[str, Any]:
        wire = {
            "caseId": self.case_id,
            "initialProcessing": self.initial_processing.to_dict(),
            "analysisAndStorage": self.analysis_and_storage.to_dict(),
            "planningAndTasks": self.planning_and_tasks.to_dict(),
            "notificationsAndUrgency": self.notifications_and_urgency.to_dict(),
        }
        if self.ai_agent_actions is not None:
            wire["aiAgentActions"] = self.ai_agent_actions.to_dict()
        return wire


__all__: List[str] = [
    "URGENCY_LEVELS",
    "LETTER_STATUSES",
    "IntakeSummary",
    "DocumentAnalysis",
    "CasePlan",
    "SuggestedTask",
    "SuggestedCalendarEvent",
    "PlanningOutput",
    "SimulatedAlert",
    "UrgencyReport",
    "DraftLetter",
    "StakeholderCommunication",
    "AgentActions",
    "WorkflowResult",
]
