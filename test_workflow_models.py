"""Tests for parsing the model reply into WorkflowResult."""

import dataclasses

import pytest

from casewrite.models.workflow import WorkflowResult
from casewrite.utils.errors import ErrorType, SchemaError


def test_full_result_exposes_every_field(sample_result):
    result = WorkflowResult.from_dict(sample_result)

    assert result.case_id == "CASE-1"
    assert result.initial_processing.employee_name == "Jordan Lee"
    assert result.initial_processing.date_received == "2024-01-08"
    assert result.analysis_and_storage.key_points == (
        "Fall on 2024-01-05", "Left wrist injury", "Off work one week"
    )
    assert result.planning_and_tasks.case_plan.reasoning.startswith("Injury is temporary")
    assert [t.title for t in result.planning_and_tasks.suggested_tasks] == [
        "Request medical certificate",
        "Notify supervisor",
    ]
    event = result.planning_and_tasks.suggested_calendar_events[0]
    assert event.alert_minutes_before_suggestion == 15
    assert result.notifications_and_urgency.overall_urgency_level == "High"
    assert result.notifications_and_urgency.simulated_alerts[0].channel_suggestion == "Urgent Notifications"
    assert result.ai_agent_actions.draft_letters[0].status == "Pending Approval"
    assert result.ai_agent_actions.stakeholder_communications[0].update_type == "Status Report"


def test_to_dict_reproduces_wire_document(sample_result):
    assert WorkflowResult.from_dict(sample_result).to_dict() == sample_result


def test_nullable_fields_may_be_null_or_absent(sample_result):
    sample_result["initialProcessing"]["employeeName"] = None
    del sample_result["initialProcessing"]["dateOfIncident"]
    del sample_result["planningAndTasks"]["suggestedCalendarEvents"][0]["alertMinutesBeforeSuggestion"]

    result = WorkflowResult.from_dict(sample_result)

    assert result.initial_processing.employee_name is None
    assert result.initial_processing.date_of_incident is None
    assert result.planning_and_tasks.suggested_calendar_events[0].alert_minutes_before_suggestion is None


def test_unknown_urgency_level_is_kept(sample_result):
    sample_result["notificationsAndUrgency"]["overallUrgencyLevel"] = "Critical"
    result = WorkflowResult.from_dict(sample_result)
    assert result.notifications_and_urgency.overall_urgency_level == "Critical"


def test_missing_section_is_schema_error(sample_result):
    del sample_result["planningAndTasks"]

    with pytest.raises(SchemaError) as exc_info:
        WorkflowResult.from_dict(sample_result)

    assert exc_info.value.error_type == ErrorType.SCHEMA_MISMATCH
    assert "planningAndTasks" in str(exc_info.value)


def test_wrong_type_reports_path(sample_result):
    sample_result["planningAndTasks"]["suggestedTasks"][1]["title"] = 42

    with pytest.raises(SchemaError) as exc_info:
        WorkflowResult.from_dict(sample_result)

    assert exc_info.value.to_dict()["details"]["path"] == "planningAndTasks.suggestedTasks[1].title"


def test_unknown_letter_status_is_rejected(sample_result):
    sample_result["aiAgentActions"]["draftLetters"][0]["status"] = "Sent"
    with pytest.raises(SchemaError):
        WorkflowResult.from_dict(sample_result)


def test_non_object_reply_is_rejected():
    with pytest.raises(SchemaError):
        WorkflowResult.from_dict(["not", "an", "object"])


def test_result_is_immutable(sample_result):
    result = WorkflowResult.from_dict(sample_result)
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.case_id = "CASE-2"


def test_agent_actions_section_is_optional(sample_result):
    del sample_result["aiAgentActions"]

    result = WorkflowResult.from_dict(sample_result)

    assert result.ai_agent_actions is None
    assert "aiAgentActions" not in result.to_dict()
