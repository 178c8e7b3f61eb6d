"""Error handling utilities for the case intake workflow."""

from dataclasses import dataclass
from typing import Optional, Dict, Any
from enum import Enum


class ErrorType(Enum):
    """Enumeration of error types in the case intake workflow."""

    # Configuration Errors
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    CONFIG_MISSING = "CONFIG_MISSING"
    CONFIG_INVALID = "CONFIG_INVALID"

    # Submission Errors
    VALIDATION_FAILED = "VALIDATION_FAILED"
    ENCODING_FAILED = "ENCODING_FAILED"
    SUBMISSION_IN_PROGRESS = "SUBMISSION_IN_PROGRESS"

    # Bedrock API Errors
    BEDROCK_RATE_LIMIT = "BEDROCK_RATE_LIMIT"
    BEDROCK_TIMEOUT = "BEDROCK_TIMEOUT"
    BEDROCK_AUTH_ERROR = "BEDROCK_AUTH_ERROR"
    BEDROCK_MODEL_ERROR = "BEDROCK_MODEL_ERROR"
    BEDROCK_INVALID_REQUEST = "BEDROCK_INVALID_REQUEST"
    BEDROCK_SERVICE_ERROR = "BEDROCK_SERVICE_ERROR"
    BEDROCK_EMPTY_RESPONSE = "BEDROCK_EMPTY_RESPONSE"

    # Response Errors
    SCHEMA_MISMATCH = "SCHEMA_MISMATCH"

    # General Errors
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


@dataclass
class ErrorContext:
    """
    What went wrong with one submission.

    Attributes:
        error_type: Category used for logging and HTTP status mapping
        message: Text shown to the user as-is
        details: Machine-readable extras (field errors, error codes, paths)
        original_exception: Underlying exception, if one was caught
    """

    error_type: ErrorType
    message: str
    details: Optional[Dict[str, Any]] = None
    original_exception: Optional[Exception] = None

    def to_dict(self) -> Dict[str, Any]:
        """Flatten for structured log lines."""
        cause = self.original_exception
        return {
            "error_type": self.error_type.value,
            "message": self.message,
            "details": dict(self.details or {}),
            "original_exception": None if cause is None else str(cause),
        }


class CasewriteError(Exception):
    """
    Base exception for all case intake errors.

    Every failure aborts the current submission; the message is shown to the
    user verbatim.
    """

    def __init__(self, context: ErrorContext):
        super().__init__(context.message)
        self.context = context

    def __str__(self) -> str:
        return self.context.message

    @property
    def error_type(self) -> ErrorType:
        return self.context.error_type

    def to_dict(self) -> Dict[str, Any]:
        return self.context.to_dict()


class ConfigurationError(CasewriteError):
    """Exception for unreadable or invalid configuration."""

    @classmethod
    def missing_file(cls, config_path: str) -> "ConfigurationError":
        context = ErrorContext(
            error_type=ErrorType.CONFIG_MISSING,
            message=f"Configuration file not found at '{config_path}'",
            details={"config_path": config_path}
        )
        return cls(context)

    @classmethod
    def invalid_value(cls, key: str, value: Any, error: Exception) -> "ConfigurationError":
        context = ErrorContext(
            error_type=ErrorType.CONFIG_INVALID,
            message=f"Invalid configuration value for '{key}': {value!r}",
            details={"key": key},
            original_exception=error
        )
        return cls(context)


class MissingCredentialError(CasewriteError):
    """Exception raised when no model API key is configured."""

    @classmethod
    def for_variables(cls, *env_vars: str) -> "MissingCredentialError":
        """
        Create error naming the environment variables that were checked.

        Args:
            env_vars: Names of the environment variables searched for a key

        Returns:
            MissingCredentialError instance
        """
        names = " or ".join(env_vars)
        context = ErrorContext(
            error_type=ErrorType.MISSING_CREDENTIAL,
            message=(
                f"{names} environment variable not set. "
                "Please ensure it's configured."
            ),
            details={"env_vars": list(env_vars)}
        )
        return cls(context)


class ValidationError(CasewriteError):
    """
    Exception for submissions rejected before the model is called.

    ``field_errors`` maps form field names (``case_id``, ``general``) to the
    message shown next to that field.
    """

    @classmethod
    def from_fields(cls, field_errors: Dict[str, str]) -> "ValidationError":
        context = ErrorContext(
            error_type=ErrorType.VALIDATION_FAILED,
            message=" ".join(field_errors.values()),
            details={"field_errors": dict(field_errors)}
        )
        return cls(context)

    @property
    def field_errors(self) -> Dict[str, str]:
        return (self.context.details or {}).get("field_errors", {})


class EncodingError(CasewriteError):
    """Exception for file payloads that cannot be converted to or from base64."""

    @classmethod
    def conversion_failed(
        cls,
        mime_type: str,
        error: Optional[Exception] = None
    ) -> "EncodingError":
        """
        Create error for a failed base64 conversion.

        Args:
            mime_type: MIME type of the payload being converted
            error: Original exception, if any

        Returns:
            EncodingError instance
        """
        context = ErrorContext(
            error_type=ErrorType.ENCODING_FAILED,
            message="Failed to process the file.",
            details={"mime_type": mime_type},
            original_exception=error
        )
        return cls(context)


class RemoteError(CasewriteError):
    """Exception for AWS Bedrock API errors and unusable replies."""

    @classmethod
    def from_client_error(
        cls,
        error: Exception,
        operation: str
    ) -> "RemoteError":
        """
        Create RemoteError from boto3 ClientError.

        Args:
            error: Original boto3 ClientError
            operation: Description of operation that failed

        Returns:
            RemoteError instance
        """
        error_code = "Unknown"
        error_message = str(error)

        if hasattr(error, 'response'):
            error_info = error.response.get("Error", {})
            error_code = error_info.get("Code", "Unknown")
            error_message = error_info.get("Message", str(error))

        error_type_map = {
            "ThrottlingException": ErrorType.BEDROCK_RATE_LIMIT,
            "TooManyRequestsException": ErrorType.BEDROCK_RATE_LIMIT,
            "RequestTimeout": ErrorType.BEDROCK_TIMEOUT,
            "RequestTimeoutException": ErrorType.BEDROCK_TIMEOUT,
            "ModelTimeoutException": ErrorType.BEDROCK_TIMEOUT,
            "UnauthorizedException": ErrorType.BEDROCK_AUTH_ERROR,
            "AccessDeniedException": ErrorType.BEDROCK_AUTH_ERROR,
            "UnrecognizedClientException": ErrorType.BEDROCK_AUTH_ERROR,
            "ValidationException": ErrorType.BEDROCK_INVALID_REQUEST,
            "ModelNotReadyException": ErrorType.BEDROCK_MODEL_ERROR,
            "ModelErrorException": ErrorType.BEDROCK_MODEL_ERROR,
            "ServiceUnavailableException": ErrorType.BEDROCK_SERVICE_ERROR,
            "InternalServerException": ErrorType.BEDROCK_SERVICE_ERROR,
        }

        context = ErrorContext(
            error_type=error_type_map.get(error_code, ErrorType.BEDROCK_SERVICE_ERROR),
            message=f"Failed to analyze document: {error_message}",
            details={
                "error_code": error_code,
                "operation": operation
            },
            original_exception=error
        )
        return cls(context)

    @classmethod
    def unexpected(cls, error: Exception, operation: str) -> "RemoteError":
        """Wrap a transport-level failure that is not a ClientError."""
        context = ErrorContext(
            error_type=ErrorType.BEDROCK_SERVICE_ERROR,
            message=f"Failed to analyze document: {error}",
            details={"operation": operation},
            original_exception=error
        )
        return cls(context)

    @classmethod
    def empty_response(cls, stop_reason: Optional[str] = None) -> "RemoteError":
        context = ErrorContext(
            error_type=ErrorType.BEDROCK_EMPTY_RESPONSE,
            message="Failed to analyze document: No text response from the model.",
            details={"stop_reason": stop_reason}
        )
        return cls(context)


class SchemaError(CasewriteError):
    """Exception for model replies that are not JSON or not a WorkflowResult."""

    @classmethod
    def invalid_json(cls, error: Exception, body: str) -> "SchemaError":
        context = ErrorContext(
            error_type=ErrorType.SCHEMA_MISMATCH,
            message=f"Failed to analyze document: response was not valid JSON ({error})",
            details={"body_preview": body[:200]},
            original_exception=error
        )
        return cls(context)

    @classmethod
    def shape_mismatch(cls, path: str, expected: str) -> "SchemaError":
        """
        Create error for a response field that is missing or mistyped.

        Args:
            path: Dotted path of the offending field (e.g. ``planningAndTasks.casePlan``)
            expected: Description of the expected JSON type

        Returns:
            SchemaError instance
        """
        context = ErrorContext(
            error_type=ErrorType.SCHEMA_MISMATCH,
            message=(
                "Failed to analyze document: response did not match the expected "
                f"shape ('{path}' should be {expected})"
            ),
            details={"path": path, "expected": expected}
        )
        return cls(context)


class SubmissionBusyError(CasewriteError):
    """Exception raised when a submission arrives while another is in flight."""

    @classmethod
    def for_case(cls, case_id: Optional[str]) -> "SubmissionBusyError":
        context = ErrorContext(
            error_type=ErrorType.SUBMISSION_IN_PROGRESS,
            message="A document is already being processed. Please wait for it to finish.",
            details={"in_flight_case_id": case_id}
        )
        return cls(context)
