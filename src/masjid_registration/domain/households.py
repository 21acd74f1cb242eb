"""Household record model for a member registration.

The record is a tagged union on head of family: a husband-headed household
carries the declared spouse count and spouse entries, a wife-headed one
carries the (late or absent) husband's details. Fields that only make sense
in one branch simply do not exist in the other.
"""

import base64
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from masjid_registration.domain.value_objects import (
    BloodGroup,
    Caste,
    ChildMaritalStatus,
    HeadOfFamily,
    HouseType,
    IncomeRange,
    OccupationType,
    ParentStatus,
    PhysicallyChallenged,
    SpouseStatus,
    parse_label,
)
from masjid_registration.exceptions import UnknownFieldError


def _choice(enum_cls: type) -> Any:
    return field(default=None, metadata={"enum": enum_cls})


class FormSection:
    """Mixin for sections whose fields are set by name from form input.

    Text fields store the string as typed. Enum fields go through
    ``parse_label`` so blank or unknown selections become None.
    """

    scope: ClassVar[str] = "section"

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))  # type: ignore[arg-type]

    def set(self, name: str, value: Any) -> None:
        for f in fields(self):  # type: ignore[arg-type]
            if f.name == name:
                break
        else:
            raise UnknownFieldError(name, scope=self.scope)

        enum_cls = f.metadata.get("enum")
        if enum_cls is not None:
            setattr(self, name, parse_label(enum_cls, value))
        else:
            setattr(self, name, "" if value is None else str(value))


@dataclass
class Applicant(FormSection):
    scope: ClassVar[str] = "applicant"

    full_name: str = ""
    phone_number: str = ""
    alternate_number: str = ""
    email: str = ""
    dob: str = ""
    caste: Caste | None = _choice(Caste)
    aadhar_number: str = ""
    qualification: str = ""
    occupation_type: OccupationType | None = _choice(OccupationType)
    occupation_details: str = ""
    company_name: str = ""
    monthly_income: IncomeRange | None = _choice(IncomeRange)
    house_type: HouseType | None = _choice(HouseType)
    address: str = ""


@dataclass
class Parent(FormSection):
    """Father or mother of the applicant.

    ``death_year`` is kept as typed even while status is Alive; only the
    payload mapper decides whether it is transmitted.
    """

    scope: ClassVar[str] = "parent"

    name: str = ""
    status: ParentStatus | None = _choice(ParentStatus)
    death_year: str = ""


@dataclass
class Spouse(FormSection):
    scope: ClassVar[str] = "spouse"

    name: str = ""
    dob: str = ""
    marriage_date: str = ""
    occupation: str = ""
    nativity: str = ""
    caste: Caste | None = _choice(Caste)
    qualification: str = ""
    blood_group: BloodGroup | None = _choice(BloodGroup)
    status: SpouseStatus | None = _choice(SpouseStatus)

    @property
    def is_active(self) -> bool:
        """A spouse entry counts only once a name has been typed."""
        return bool(self.name.strip())


@dataclass
class Husband(FormSection):
    scope: ClassVar[str] = "husband"

    name: str = ""
    dob: str = ""
    occupation: str = ""
    nativity: str = ""
    caste: Caste | None = _choice(Caste)
    qualification: str = ""
    blood_group: BloodGroup | None = _choice(BloodGroup)
    status: SpouseStatus | None = _choice(SpouseStatus)


@dataclass
class Child(FormSection):
    scope: ClassVar[str] = "child"

    name: str = ""
    dob: str = ""
    mother: str = ""  # "Wife N" or "Self"
    qualification: str = ""
    marital_status: ChildMaritalStatus | None = _choice(ChildMaritalStatus)
    blood_group: BloodGroup | None = _choice(BloodGroup)
    physically_challenged: PhysicallyChallenged | None = _choice(
        PhysicallyChallenged
    )


@dataclass(frozen=True)
class Photo:
    """Opaque image handle supplied by the file input. Bytes are never decoded."""

    data: bytes
    content_type: str = "application/octet-stream"
    filename: str | None = None

    def preview_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


@dataclass
class HusbandHousehold:
    """Husband is head of family; ``len(spouses) == spouse_count`` always."""

    spouse_count: int = 1
    spouses: list[Spouse] = field(default_factory=lambda: [Spouse()])

    head_of_family: ClassVar[HeadOfFamily] = HeadOfFamily.HUSBAND

    def active_spouses(self) -> list[tuple[int, Spouse]]:
        """Named spouses with their 1-based position in the form."""
        return [
            (position, spouse)
            for position, spouse in enumerate(self.spouses, start=1)
            if spouse.is_active
        ]


@dataclass
class WifeHousehold:
    """Wife is head of family, usually because the husband has passed away."""

    husband: Husband = field(default_factory=Husband)

    head_of_family: ClassVar[HeadOfFamily] = HeadOfFamily.WIFE


@dataclass
class HouseholdRecord:
    applicant: Applicant = field(default_factory=Applicant)
    father: Parent = field(default_factory=Parent)
    mother: Parent = field(default_factory=Parent)
    household: HusbandHousehold | WifeHousehold | None = field(
        default_factory=HusbandHousehold
    )
    children: list[Child] = field(default_factory=list)
    remarks: str = ""
    photo: Photo | None = None

    @property
    def head_of_family(self) -> HeadOfFamily | None:
        return self.household.head_of_family if self.household else None
