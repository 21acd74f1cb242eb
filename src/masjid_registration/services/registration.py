"""Submit flow: validate the record, build the payload, send it."""

from __future__ import annotations

from masjid_registration.api_client import (
    RegistrationAPIClient,
    SubmissionOutcome,
    SubmissionResult,
)
from masjid_registration.logging_config import LogContext, get_logger
from masjid_registration.services.household_store import HouseholdStore
from masjid_registration.services.payload_mapper import build_payload
from masjid_registration.services.validation import validate_household

logger = get_logger(__name__)


class RegistrationService:
    def __init__(self, api_client: RegistrationAPIClient) -> None:
        self._api_client = api_client

    async def submit(self, store: HouseholdStore) -> SubmissionResult:
        """Run one submit action against the store's current record.

        The store is never modified: after any outcome, success included,
        the record stays as it was.
        """
        if self._api_client.is_pending:
            logger.warning("submission_ignored_in_flight")
            return SubmissionResult(
                SubmissionOutcome.BUSY, "A submission is already in progress"
            )

        record = store.record
        validation = validate_household(record)
        if not validation.is_valid:
            assert validation.reason is not None
            logger.info("validation_failed", **validation.reason.to_context())
            return SubmissionResult(
                SubmissionOutcome.INVALID,
                validation.reason.message,
                reason=validation.reason,
            )

        payload = build_payload(record, validation)
        hof = record.head_of_family
        with LogContext(head_of_family=hof.value if hof else None):
            return await self._api_client.submit(payload)
