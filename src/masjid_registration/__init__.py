from masjid_registration.domain.households import (
    Applicant,
    Child,
    HouseholdRecord,
    Husband,
    HusbandHousehold,
    Parent,
    Photo,
    Spouse,
    WifeHousehold,
)
from masjid_registration.domain.value_objects import HeadOfFamily

__all__ = [
    "Applicant",
    "Child",
    "HeadOfFamily",
    "HouseholdRecord",
    "Husband",
    "HusbandHousehold",
    "Parent",
    "Photo",
    "Spouse",
    "WifeHousehold",
]

__version__ = "0.1.0"
