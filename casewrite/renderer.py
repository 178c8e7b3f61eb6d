"""
Result renderer.

Walks a WorkflowResult into the fixed set of dashboard panels shown on the
results page. The renderer owns the "Not specified" fallback for every
optional or empty field, so the layout is the same whichever fields the model
populated. Rendering is pure: the same result always yields an equal Dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .models.workflow import WorkflowResult

NOT_SPECIFIED = "Not specified"

URGENCY_TIERS = ("low", "medium", "high")
DEFAULT_TIER = "default"

NO_LETTERS = "No formal letters required for this update."
NO_STAKEHOLDER_UPDATES = "No additional stakeholder updates needed."
NO_KEY_POINTS = "No specific key points identified."
NO_TASKS = "No specific tasks suggested."
NO_EVENTS = "No calendar events suggested."
NO_ALERTS = "No specific alerts simulated."


def display_value(value: Any) -> str:
    """Text to show for a field; empty and missing values become NOT_SPECIFIED."""
    if value is None:
        return NOT_SPECIFIED
    text = str(value)
    return text if text.strip() else NOT_SPECIFIED


def urgency_tier(level: Optional[str]) -> str:
    """Map an urgency level case-insensitively onto a display tier."""
    normalized = (level or "").strip().lower()
    return normalized if normalized in URGENCY_TIERS else DEFAULT_TIER


def format_reminder(minutes: Any) -> Optional[str]:
    if not minutes:
        return None
    if isinstance(minutes, float) and minutes.is_integer():
        minutes = int(minutes)
    return f"{minutes} minutes before"


@dataclass(frozen=True)
class DetailItem:
    label: str
    value: str
    placeholder: bool
    block: bool = False

    @classmethod
    def of(cls, label: str, value: Any, block: bool = False) -> "DetailItem":
        missing = value is None or not str(value).strip()
        return cls(label=label, value=display_value(value), placeholder=missing, block=block)


@dataclass(frozen=True)
class LetterView:
    recipient: str
    subject: str
    content: str
    context: str
    status_label: str


@dataclass(frozen=True)
class StakeholderRow:
    stakeholder: str
    update_type: str
    notes: str


@dataclass(frozen=True)
class ItemCard:
    """A task or calendar event card: heading, body text and detail rows."""
    title: str
    body: str
    details: Tuple[DetailItem, ...]


@dataclass(frozen=True)
class AlertView:
    message: str
    recipient: str
    channel: str


@dataclass(frozen=True)
class AgentActionsPanel:
    title: str
    letters: Tuple[LetterView, ...]
    stakeholders: Tuple[StakeholderRow, ...]
    no_letters_message: str = NO_LETTERS
    no_stakeholders_message: str = NO_STAKEHOLDER_UPDATES
    kind: str = "agent_actions"


@dataclass(frozen=True)
class DetailPanel:
    title: str
    details: Tuple[DetailItem, ...]
    kind: str = "details"


@dataclass(frozen=True)
class AnalysisPanel:
    title: str
    summary: DetailItem
    key_points: Tuple[str, ...]
    disability_details: DetailItem
    storage_confirmation: str
    no_key_points_message: str = NO_KEY_POINTS
    kind: str = "analysis"


@dataclass(frozen=True)
class CardListPanel:
    title: str
    cards: Tuple[ItemCard, ...]
    empty_message: str
    kind: str = "cards"


@dataclass(frozen=True)
class UrgencyPanel:
    title: str
    level: str
    tier: str
    alerts: Tuple[AlertView, ...]
    empty_message: str = NO_ALERTS
    kind: str = "urgency"


@dataclass(frozen=True)
class Dashboard:
    """All panels for one result, in display order."""
    case_id: str
    agent_actions: Optional[AgentActionsPanel]
    intake: DetailPanel
    analysis: AnalysisPanel
    case_plan: DetailPanel
    tasks: CardListPanel
    calendar: CardListPanel
    urgency: UrgencyPanel

    @property
    def panels(self) -> Tuple[Any, ...]:
        ordered = (
            self.agent_actions,
            self.intake,
            self.analysis,
            self.case_plan,
            self.tasks,
            self.calendar,
            self.urgency,
        )
        return tuple(panel for panel in ordered if panel is not None)


def _agent_actions_panel(result: WorkflowResult) -> Optional[AgentActionsPanel]:
    actions = result.ai_agent_actions
    if actions is None:
        return None
    letters = tuple(
        LetterView(
            recipient=display_value(letter.recipient),
            subject=display_value(letter.subject),
            content=display_value(letter.content),
            context=display_value(letter.context),
            status_label=display_value(letter.status).upper(),
        )
        for letter in actions.draft_letters
    )
    stakeholders = tuple(
        StakeholderRow(
            stakeholder=display_value(comm.stakeholder),
            update_type=display_value(comm.update_type),
            notes=display_value(comm.notes),
        )
        for comm in actions.stakeholder_communications
    )
    return AgentActionsPanel(title="AI Agent Actions", letters=letters, stakeholders=stakeholders)


def _intake_panel(result: WorkflowResult) -> DetailPanel:
    intake = result.initial_processing
    return DetailPanel(
        title="Initial Processing & Receipt",
        details=(
            DetailItem.of("Case ID", result.case_id),
            DetailItem.of("Simulated Acknowledgement", intake.acknowledged_to_sender, block=True),
            DetailItem.of("Document Type Identified", intake.document_type_identified),
            DetailItem.of("Employee Name", intake.employee_name),
            DetailItem.of("Date of Incident", intake.date_of_incident),
            DetailItem.of("Date Received", intake.date_received),
        ),
    )


def _analysis_panel(result: WorkflowResult) -> AnalysisPanel:
    analysis = result.analysis_and_storage
    return AnalysisPanel(
        title="Document Analysis & Simulated Storage",
        summary=DetailItem.of("AI Summary", analysis.summary, block=True),
        key_points=tuple(point for point in analysis.key_points if point.strip()),
        disability_details=DetailItem.of("Disability Details", analysis.disability_details, block=True),
        storage_confirmation=display_value(analysis.simulated_storage_confirmation),
    )


def _case_plan_panel(result: WorkflowResult) -> DetailPanel:
    plan = result.planning_and_tasks.case_plan
    return DetailPanel(
        title="Case Plan Update",
        details=(
            DetailItem.of("Proposed Plan", plan.plan_details, block=True),
            DetailItem.of("Reasoning", plan.reasoning, block=True),
        ),
    )


def _tasks_panel(result: WorkflowResult) -> CardListPanel:
    cards = tuple(
        ItemCard(
            title=display_value(task.title),
            body=task.details,
            details=(
                DetailItem.of("Suggested Due Date", task.due_date_suggestion),
                DetailItem.of("Suggested Assignee", task.assigned_to_suggestion),
            ),
        )
        for task in result.planning_and_tasks.suggested_tasks
    )
    return CardListPanel(title="Suggested Tasks", cards=cards, empty_message=NO_TASKS)


def _calendar_panel(result: WorkflowResult) -> CardListPanel:
    cards = []
    for event in result.planning_and_tasks.suggested_calendar_events:
        details = [
            DetailItem.of("Suggested Start", event.start_time_suggestion),
            DetailItem.of("Suggested End", event.end_time_suggestion),
        ]
        reminder = format_reminder(event.alert_minutes_before_suggestion)
        if reminder:
            details.append(DetailItem.of("Reminder", reminder))
        cards.append(
            ItemCard(
                title=display_value(event.title),
                body=event.description,
                details=tuple(details),
            )
        )
    return CardListPanel(title="Suggested Calendar Events", cards=tuple(cards), empty_message=NO_EVENTS)


def _urgency_panel(result: WorkflowResult) -> UrgencyPanel:
    report = result.notifications_and_urgency
    alerts = tuple(
        AlertView(
            message=display_value(alert.message),
            recipient=display_value(alert.recipient_suggestion),
            channel=display_value(alert.channel_suggestion),
        )
        for alert in report.simulated_alerts
    )
    return UrgencyPanel(
        title="Simulated Alerts & Urgency",
        level=display_value(report.overall_urgency_level),
        tier=urgency_tier(report.overall_urgency_level),
        alerts=alerts,
    )


def render_dashboard(result: Optional[WorkflowResult]) -> Optional[Dashboard]:
    """
    Build the dashboard for a result.

    Args:
        result: Parsed result, or None when nothing should be displayed

    Returns:
        Dashboard with panels in fixed order, or None when there is no result
    """
    if result is None:
        return None

    return Dashboard(
        case_id=result.case_id,
        agent_actions=_agent_actions_panel(result),
        intake=_intake_panel(result),
        analysis=_analysis_panel(result),
        case_plan=_case_plan_panel(result),
        tasks=_tasks_panel(result),
        calendar=_calendar_panel(result),
        urgency=_urgency_panel(result),
    )
