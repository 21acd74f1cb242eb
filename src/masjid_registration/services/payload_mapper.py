"""Maps a validated household record onto the registration API payload.

Per-field policy for unset selections:

============================  =====================================
wire field                    unset / blank
============================  =====================================
residentialStatus             0 (Own House)
occupation, monthlyIncome     null
wifeDetails[].maritalStatus   1 (Present)
childDetails[].maritalStatus  0 (Single)
childDetails[].gender         always 0, gender is not collected
dates                         null, also when unparsable
death years                   null unless the parent's status is Late
============================  =====================================
"""

from __future__ import annotations

import re
from datetime import UTC

from dateutil.parser import isoparse  # type: ignore[import-untyped]

from masjid_registration.api.schemas import ChildDetail, SpouseDetail, WirePayload
from masjid_registration.domain.households import (
    Child,
    HouseholdRecord,
    HusbandHousehold,
    Parent,
    Spouse,
    WifeHousehold,
)
from masjid_registration.domain.value_objects import (
    CHILD_MARITAL_STATUS_CODES,
    GENDER_CODES,
    MONTHLY_INCOME_CODES,
    OCCUPATION_CODES,
    RESIDENTIAL_STATUS_CODES,
    SPOUSE_MARITAL_STATUS_CODES,
    ParentStatus,
    PhysicallyChallenged,
)
from masjid_registration.exceptions import HouseholdValidationError
from masjid_registration.logging_config import get_logger
from masjid_registration.services.validation import VALID, ValidationResult

logger = get_logger(__name__)

UNKNOWN_CHILD_NAME = "Unknown"

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


def to_api_date(value: str | None) -> str | None:
    """Render a form date as a UTC timestamp, e.g. ``2020-01-15T00:00:00.000Z``.

    Date-only input is taken as UTC midnight. Blank, unparsable or
    out-of-range input gives None.
    """
    if not value or not value.strip():
        return None
    try:
        parsed = isoparse(value.strip())
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        else:
            parsed = parsed.astimezone(UTC)
    except (ValueError, OverflowError):
        return None
    return parsed.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_api_int(value: str | int | None) -> int | None:
    """Leniently read an integer from free text; leading ASCII digits win ("1998 approx" -> 1998)."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def _text(value: str) -> str | None:
    return value or None


def _death_year(parent: Parent) -> int | None:
    if parent.status != ParentStatus.LATE:
        return None
    return to_api_int(parent.death_year)


def map_spouse(spouse: Spouse) -> SpouseDetail:
    return SpouseDetail(
        name=spouse.name,
        date_of_birth=to_api_date(spouse.dob),
        occupation=spouse.occupation,
        native=spouse.nativity,
        caste=spouse.caste.value if spouse.caste else "",
        qualification=spouse.qualification,
        blood_group=spouse.blood_group.value if spouse.blood_group else "",
        marital_status=SPOUSE_MARITAL_STATUS_CODES.encode(spouse.status),
    )


def map_child(child: Child) -> ChildDetail:
    return ChildDetail(
        name=child.name.strip() or UNKNOWN_CHILD_NAME,
        gender=GENDER_CODES.encode(None),
        date_of_birth=to_api_date(child.dob),
        qualification=_text(child.qualification),
        marital_status=CHILD_MARITAL_STATUS_CODES.encode(child.marital_status),
        blood_group=child.blood_group.value if child.blood_group else None,
        is_physically_challenged=child.physically_challenged
        == PhysicallyChallenged.YES,
    )


def build_payload(
    record: HouseholdRecord, validation: ValidationResult = VALID
) -> WirePayload:
    """Build the wire payload for a record that passed validation.

    ``numberOfWives`` is the declared spouse count while ``wifeDetails``
    lists only the named spouses, so "2 wives" with one described sends a
    count of 2 and a single detail entry.
    """
    if not validation.is_valid:
        assert validation.reason is not None
        raise HouseholdValidationError(validation.reason)

    applicant = record.applicant
    household = record.household

    spouse_details: list[SpouseDetail] = []
    number_of_wives = 0
    marriage_date = None
    blood_group = None

    if isinstance(household, HusbandHousehold):
        active = [spouse for _, spouse in household.active_spouses()]
        spouse_details = [map_spouse(spouse) for spouse in active]
        number_of_wives = household.spouse_count
        if active:
            marriage_date = to_api_date(active[0].marriage_date)
    elif isinstance(household, WifeHousehold):
        husband_blood_group = household.husband.blood_group
        blood_group = husband_blood_group.value if husband_blood_group else None

    payload = WirePayload(
        full_name=applicant.full_name,
        phone_number=applicant.phone_number,
        residential_status=RESIDENTIAL_STATUS_CODES.encode(applicant.house_type),
        address=applicant.address,
        alternate_number=_text(applicant.alternate_number),
        date_of_birth=to_api_date(applicant.dob),
        caste_group=applicant.caste.value if applicant.caste else None,
        aadhar_number=_text(applicant.aadhar_number),
        qualification=_text(applicant.qualification),
        marriage_date=marriage_date,
        blood_group=blood_group,
        occupation=OCCUPATION_CODES.encode(applicant.occupation_type),
        occupation_detail=_text(applicant.occupation_details),
        monthly_income=MONTHLY_INCOME_CODES.encode(applicant.monthly_income),
        email_id=_text(applicant.email),
        father_name=_text(record.father.name),
        father_occupation=None,
        father_death_year=_death_year(record.father),
        mother_name=_text(record.mother.name),
        mother_occupation=None,
        mother_death_year=_death_year(record.mother),
        number_of_wives=number_of_wives,
        number_of_children=len(record.children),
        feedback=_text(record.remarks),
        spouse_details=spouse_details,
        child_details=[map_child(child) for child in record.children],
    )
    logger.debug(
        "payload_built",
        number_of_wives=number_of_wives,
        spouse_details=len(spouse_details),
        number_of_children=len(record.children),
    )
    return payload
