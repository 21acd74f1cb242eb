"""Client-side checks run before a household record is submitted.

Validation is fail-fast: checks run in a fixed order and the first failure
is the only reason reported.

Positions are 1-based over the whole list: an incomplete spouse in the
second slot is "Wife 2" even when the first slot was left unnamed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from masjid_registration.domain.households import (
    HouseholdRecord,
    HusbandHousehold,
    Spouse,
)

# Checked in this order; labels are what the user is told is missing.
REQUIRED_APPLICANT_FIELDS: tuple[tuple[str, str], ...] = (
    ("full_name", "Full Name"),
    ("phone_number", "Phone Number"),
    ("house_type", "House Type"),
    ("address", "Address"),
)

REQUIRED_SPOUSE_FIELDS: tuple[tuple[str, str], ...] = (
    ("dob", "Date of Birth"),
    ("caste", "Caste"),
    ("nativity", "Nativity"),
    ("occupation", "Occupation"),
    ("qualification", "Qualification"),
    ("blood_group", "Blood Group"),
    ("status", "Status"),
)


class ValidationFailure(str, Enum):
    MISSING_APPLICANT_FIELD = "missing_applicant_field"
    INCOMPLETE_SPOUSE = "incomplete_spouse"
    MISSING_CHILD_DOB = "missing_child_dob"


@dataclass(frozen=True, slots=True)
class ValidationReason:
    failure: ValidationFailure
    message: str
    field: str | None = None
    position: int | None = None  # 1-based spouse or child position

    def to_context(self) -> dict[str, Any]:
        context: dict[str, Any] = {"failure": self.failure.value}
        if self.field is not None:
            context["field"] = self.field
        if self.position is not None:
            context["position"] = self.position
        return context


@dataclass(frozen=True, slots=True)
class ValidationResult:
    reason: ValidationReason | None = None

    @property
    def is_valid(self) -> bool:
        return self.reason is None


VALID = ValidationResult()


def _present(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _missing_spouse_fields(spouse: Spouse) -> list[str]:
    return [
        label
        for name, label in REQUIRED_SPOUSE_FIELDS
        if not _present(getattr(spouse, name))
    ]


def validate_household(record: HouseholdRecord) -> ValidationResult:
    applicant = record.applicant
    for name, label in REQUIRED_APPLICANT_FIELDS:
        if not _present(getattr(applicant, name)):
            return ValidationResult(
                ValidationReason(
                    failure=ValidationFailure.MISSING_APPLICANT_FIELD,
                    message=f"Please fill the required field: {label}",
                    field=name,
                )
            )

    household = record.household
    if isinstance(household, HusbandHousehold):
        for position, spouse in household.active_spouses():
            missing = _missing_spouse_fields(spouse)
            if missing:
                return ValidationResult(
                    ValidationReason(
                        failure=ValidationFailure.INCOMPLETE_SPOUSE,
                        message=(
                            f"Since you entered a name for Wife {position}, you "
                            f"must fill all her details (missing: {', '.join(missing)})."
                        ),
                        position=position,
                    )
                )

    for position, child in enumerate(record.children, start=1):
        if not _present(child.dob):
            return ValidationResult(
                ValidationReason(
                    failure=ValidationFailure.MISSING_CHILD_DOB,
                    message=f"Date of Birth is required for Child {position}.",
                    field="dob",
                    position=position,
                )
            )

    return VALID
