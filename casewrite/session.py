"""Single-submission case session: busy flag and current-result slot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .models.submission import DocumentSubmission
from .models.workflow import WorkflowResult
from .request_builder import RequestBuilder
from .utils.errors import CasewriteError, ErrorType, SubmissionBusyError
from .utils.logging import case_context

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred during document analysis."


@dataclass(frozen=True)
class SubmissionOutcome:
    """Result-or-error of one submission. Exactly one of result/error_message is set."""

    case_id: str
    result: Optional[WorkflowResult] = None
    error_type: Optional[ErrorType] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is not None


class CaseSession:
    """
    Runs submissions one at a time.

    A submission clears the current result, awaits the model, then replaces
    the slot with the new result (or leaves it empty on failure). A second
    submission while one is in flight is rejected before any network call.
    """

    def __init__(self, builder: RequestBuilder):
        self.builder = builder
        self.busy = False
        self.current_result: Optional[WorkflowResult] = None
        self.current_case_id: Optional[str] = None

    async def submit(self, submission: DocumentSubmission) -> SubmissionOutcome:
        """
        Process one validated submission.

        Raises:
            SubmissionBusyError: If another submission is still in flight
        """
        if self.busy:
            logger.warning(
                f"Rejected submission for {submission.case_id}: "
                f"{self.current_case_id} still in flight"
            )
            raise SubmissionBusyError.for_case(self.current_case_id)

        self.busy = True
        self.current_result = None
        self.current_case_id = submission.case_id

        try:
            with case_context(case_id=submission.case_id):
                try:
                    result = await self.builder.analyze(submission)
                except CasewriteError as e:
                    logger.error(f"Processing error: {e.to_dict()}")
                    return SubmissionOutcome(
                        case_id=submission.case_id,
                        error_type=e.error_type,
                        error_message=str(e),
                    )
                except Exception as e:
                    logger.error(f"Unexpected processing error: {str(e)}", exc_info=True)
                    return SubmissionOutcome(
                        case_id=submission.case_id,
                        error_type=ErrorType.UNKNOWN_ERROR,
                        error_message=str(e) or UNKNOWN_ERROR_MESSAGE,
                    )

                self.current_result = result
                return SubmissionOutcome(case_id=submission.case_id, result=result)
        finally:
            self.busy = False
