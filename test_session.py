"""Tests for the one-at-a-time case session."""

import asyncio

import pytest

from casewrite.models.submission import DocumentSubmission
from casewrite.models.workflow import WorkflowResult
from casewrite.session import CaseSession
from casewrite.utils.errors import ErrorType, RemoteError, SubmissionBusyError
from casewrite.utils.logging import current_context


class GatedBuilder:
    """Builder whose analyze() waits until the test releases it."""

    def __init__(self, result):
        self.result = result
        self.release = None
        self.started = None
        self.calls = []

    async def analyze(self, submission):
        self.calls.append(submission)
        self.started.set()
        await self.release.wait()
        return self.result


class FailingBuilder:
    def __init__(self, error):
        self.error = error

    async def analyze(self, submission):
        raise self.error


def submission(case_id="CASE-1"):
    return DocumentSubmission(case_id=case_id, document_content="Employee fell at work.")


def test_successful_submission_fills_result_slot(case_session, stub_runtime):
    outcome = asyncio.run(case_session.submit(submission()))

    assert outcome.ok
    assert outcome.result.case_id == "CASE-1"
    assert case_session.current_result is outcome.result
    assert not case_session.busy
    assert len(stub_runtime.calls) == 1


def test_second_submission_while_busy_is_rejected(sample_result):
    builder = GatedBuilder(WorkflowResult.from_dict(sample_result))
    session = CaseSession(builder)

    async def scenario():
        builder.release = asyncio.Event()
        builder.started = asyncio.Event()

        first = asyncio.ensure_future(session.submit(submission("CASE-1")))
        await builder.started.wait()

        assert session.busy
        assert session.current_result is None
        with pytest.raises(SubmissionBusyError):
            await session.submit(submission("CASE-2"))

        builder.release.set()
        return await first

    outcome = asyncio.run(scenario())

    assert outcome.ok
    assert [s.case_id for s in builder.calls] == ["CASE-1"]
    assert not session.busy


def test_new_submission_clears_previous_result(sample_result):
    builder = GatedBuilder(WorkflowResult.from_dict(sample_result))
    session = CaseSession(builder)

    async def scenario():
        builder.release = asyncio.Event()
        builder.started = asyncio.Event()
        builder.release.set()
        first = await session.submit(submission("CASE-1"))
        assert session.current_result is first.result

        builder.release = asyncio.Event()
        builder.started = asyncio.Event()
        second = asyncio.ensure_future(session.submit(submission("CASE-2")))
        await builder.started.wait()
        assert session.current_result is None
        builder.release.set()
        return await second

    outcome = asyncio.run(scenario())
    assert session.current_result is outcome.result


def test_remote_failure_becomes_error_outcome():
    error = RemoteError.empty_response("max_tokens")
    session = CaseSession(FailingBuilder(error))

    outcome = asyncio.run(session.submit(submission()))

    assert not outcome.ok
    assert outcome.error_type == ErrorType.BEDROCK_EMPTY_RESPONSE
    assert outcome.error_message == str(error)
    assert session.current_result is None
    assert not session.busy


def test_unexpected_failure_becomes_unknown_error():
    session = CaseSession(FailingBuilder(RuntimeError("boom")))

    outcome = asyncio.run(session.submit(submission()))

    assert outcome.error_type == ErrorType.UNKNOWN_ERROR
    assert outcome.error_message == "boom"
    assert not session.busy


def test_log_context_is_restored_after_submission(case_session):
    asyncio.run(case_session.submit(submission("CASE-7")))
    assert current_context() == {}
