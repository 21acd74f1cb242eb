"""Exception hierarchy for Masjid Member Registration.

All application exceptions inherit from RegistrationError. This allows
catching every registration failure with a single base class while
preserving specificity for individual error types.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from masjid_registration.services.validation import ValidationReason


class RegistrationError(Exception):
    """Base exception for all registration errors.

    Includes an error_code for machine-readable reporting and extra context.
    """

    error_code: str = "REGISTRATION_ERROR"

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.context = context or {}


# =============================================================================
# Record Errors (caller precondition violations)
# =============================================================================


class RecordError(RegistrationError):
    """Base exception for misuse of the household record store."""

    error_code = "RECORD_ERROR"


class UnknownFieldError(RecordError):
    """Raised when a field name does not exist on the addressed record."""

    error_code = "UNKNOWN_FIELD"

    def __init__(self, field: str, scope: str = "household") -> None:
        super().__init__(
            f"Unknown {scope} field: {field}",
            context={"field": field, "scope": scope},
        )


class FieldNotApplicableError(RecordError):
    """Raised when a field belongs to a different head-of-family branch."""

    error_code = "FIELD_NOT_APPLICABLE"

    def __init__(self, field: str, head_of_family: str | None) -> None:
        super().__init__(
            f"Field {field} does not apply when head of family is "
            f"{head_of_family or 'unset'}",
            context={"field": field, "head_of_family": head_of_family},
        )


class InvalidSpouseCountError(RecordError):
    """Raised when a spouse count falls outside the allowed range."""

    error_code = "INVALID_SPOUSE_COUNT"

    def __init__(self, count: object, maximum: int) -> None:
        super().__init__(
            f"Spouse count must be between 1 and {maximum}, got {count}",
            context={"count": count, "maximum": maximum},
        )


class CollectionIndexError(RecordError):
    """Raised when a spouse or child position is out of bounds."""

    error_code = "COLLECTION_INDEX_OUT_OF_RANGE"

    def __init__(self, collection: str, index: int, length: int) -> None:
        super().__init__(
            f"{collection} index {index} out of range (length {length})",
            context={"collection": collection, "index": index, "length": length},
        )


class RecordFileError(RecordError):
    """Raised when a saved form fill cannot be read."""

    error_code = "RECORD_FILE_ERROR"


# =============================================================================
# Validation Errors
# =============================================================================


class HouseholdValidationError(RegistrationError):
    """Raised when a record that failed validation is handed to the mapper."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, reason: ValidationReason) -> None:
        super().__init__(reason.message, context=reason.to_context())
        self.reason = reason


# =============================================================================
# Submission Errors
# =============================================================================


class SubmissionError(RegistrationError):
    """Base exception for failures while sending a registration."""

    error_code = "SUBMISSION_ERROR"


class ServerRejectedError(SubmissionError):
    """Raised when the API answers with a non-success status."""

    error_code = "SERVER_REJECTED"

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(
            message, context={"status_code": status_code}
        )
        self.status_code = status_code


class TransportError(SubmissionError):
    """Raised when no response arrived at all."""

    error_code = "TRANSPORT_ERROR"
