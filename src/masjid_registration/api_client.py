"""HTTP client that submits a registration to the member API.

One submit issues exactly one request: no retries, no coalescing. A second
submit while the first is still in flight is turned away as BUSY without
touching the network.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from masjid_registration.api.schemas import ErrorBody, WirePayload
from masjid_registration.exceptions import (
    ServerRejectedError,
    TransportError,
)
from masjid_registration.logging_config import get_logger
from masjid_registration.services.validation import ValidationReason

logger = get_logger(__name__)

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class SubmissionOutcome(str, Enum):
    SUCCESS = "success"
    INVALID = "invalid"
    REJECTED = "rejected"
    TRANSPORT_ERROR = "transport_error"
    BUSY = "busy"


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    """What the caller shows the user after a submit attempt."""

    outcome: SubmissionOutcome
    message: str
    status_code: int | None = None
    body: Any = None
    reason: ValidationReason | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == SubmissionOutcome.SUCCESS


def _rejection_message(response: httpx.Response) -> str:
    """First field error from the body, else the bare status code."""
    try:
        message = ErrorBody.model_validate(response.json()).first_error()
    except ValueError:
        message = None
    if message is None:
        return f"Server responded with error {response.status_code}"
    return message


class RegistrationAPIClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        registration_path: str = "/api/PersonalDetails",
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._client = (
            client
            if client is not None
            else httpx.AsyncClient(base_url=base_url, timeout=timeout)
        )
        self._base_url = base_url
        self._registration_path = registration_path
        self._pending = False

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def is_pending(self) -> bool:
        return self._pending

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RegistrationAPIClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def post_registration(self, payload: WirePayload) -> Any:
        """POST the payload and return the parsed success body.

        Raises ServerRejectedError on a non-2xx status and TransportError
        when no response arrives.
        """
        body = payload.to_wire()
        logger.debug("submission_payload", payload=body)
        try:
            r = await self._client.post(
                self._registration_path, json=body, headers=JSON_HEADERS
            )
        except httpx.RequestError as e:
            raise TransportError(
                str(e) or type(e).__name__,
                context={"exception": type(e).__name__},
            ) from e

        if not r.is_success:
            raise ServerRejectedError(r.status_code, _rejection_message(r))

        if not r.content:
            return None
        try:
            return r.json()
        except ValueError:
            logger.warning("submission_body_not_json", status_code=r.status_code)
            return r.text

    async def submit(self, payload: WirePayload) -> SubmissionResult:
        """Send the payload once and classify the response."""
        if self._pending:
            logger.warning("submission_ignored_in_flight")
            return SubmissionResult(
                SubmissionOutcome.BUSY, "A submission is already in progress"
            )

        self._pending = True
        logger.info(
            "submission_started",
            path=self._registration_path,
            number_of_children=payload.number_of_children,
        )
        try:
            body = await self.post_registration(payload)
        except ServerRejectedError as e:
            logger.warning(
                "submission_rejected", status_code=e.status_code, detail=e.message
            )
            return SubmissionResult(
                SubmissionOutcome.REJECTED, e.message, status_code=e.status_code
            )
        except TransportError as e:
            logger.error("submission_transport_error", error=e.message)
            return SubmissionResult(SubmissionOutcome.TRANSPORT_ERROR, e.message)
        finally:
            self._pending = False

        logger.info("submission_succeeded")
        return SubmissionResult(
            SubmissionOutcome.SUCCESS, "Form Submitted Successfully!", body=body
        )
