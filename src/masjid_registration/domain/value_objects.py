"""Enumerations used on the registration form and their wire codes.

Enum values are the canonical labels shown on the form. Labels that the
API treats as synonyms are accepted through each enum's alias table, so
``SpouseStatus("Married")`` is ``SpouseStatus.PRESENT``.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar


class HeadOfFamily(str, Enum):
    HUSBAND = "Husband"
    WIFE = "Wife"


class HouseType(str, Enum):
    OWN = "Own House"
    RENT = "Rent House"


class OccupationType(str, Enum):
    WORKING = "Working"
    BUSINESS = "Business"
    UNEMPLOYED = "Unemployed"
    RETIRED = "Retired"


class IncomeRange(str, Enum):
    BELOW_10K = "Below 10,000"
    FROM_10K_TO_25K = "10,000 - 25,000"
    FROM_25K_TO_50K = "25,000 - 50,000"
    FROM_50K_TO_1L = "50,000 - 1,00,000"
    ABOVE_1L = "Above 1,00,000"


class ParentStatus(str, Enum):
    ALIVE = "Alive"
    LATE = "Late"


class Caste(str, Enum):
    DAKNI = "Dakni"
    LABBAI = "Labbai"
    OTHERS = "Others"


class BloodGroup(str, Enum):
    A_POSITIVE = "A+"
    A_NEGATIVE = "A-"
    B_POSITIVE = "B+"
    B_NEGATIVE = "B-"
    AB_POSITIVE = "AB+"
    AB_NEGATIVE = "AB-"
    O_POSITIVE = "O+"
    O_NEGATIVE = "O-"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


class PhysicallyChallenged(str, Enum):
    YES = "Yes"
    NO = "No"


# "Present" and "Married" share marital code 1, "Late" and "Expired" share 3.
SPOUSE_STATUS_ALIASES: dict[str, str] = {
    "Married": "Present",
    "Late": "Expired",
}

CHILD_MARITAL_STATUS_ALIASES: dict[str, str] = {
    "Present": "Married",
}


class SpouseStatus(str, Enum):
    PRESENT = "Present"
    DIVORCED = "Divorced"
    EXPIRED = "Expired"

    @classmethod
    def _missing_(cls, value: object) -> "SpouseStatus | None":
        canonical = SPOUSE_STATUS_ALIASES.get(value) if isinstance(value, str) else None
        return cls(canonical) if canonical is not None else None


class ChildMaritalStatus(str, Enum):
    SINGLE = "Single"
    MARRIED = "Married"
    DIVORCED = "Divorced"

    @classmethod
    def _missing_(cls, value: object) -> "ChildMaritalStatus | None":
        canonical = (
            CHILD_MARITAL_STATUS_ALIASES.get(value) if isinstance(value, str) else None
        )
        return cls(canonical) if canonical is not None else None


E = TypeVar("E", bound=Enum)


def parse_label(enum_cls: type[E], value: object) -> E | None:
    """Turn a form selection into an enum member.

    Blank and unrecognised labels come back as None (unset) rather than
    raising, matching how an empty ``<select>`` behaves.
    """
    if value is None or isinstance(value, enum_cls):
        return value
    if isinstance(value, Enum):
        value = value.value
    label = str(value).strip()
    if not label:
        return None
    try:
        return enum_cls(label)
    except ValueError:
        return None


# =============================================================================
# Wire codes
# =============================================================================


@dataclass(frozen=True)
class CodeTable(Generic[E]):
    """Fixed mapping between an enum and the integer codes the API expects.

    ``default`` is what an unset selection is transmitted as; None means the
    field is sent as null so absence stays distinguishable from code 0.
    """

    wire_field: str
    codes: Mapping[E, int]
    default: int | None = None

    def encode(self, member: E | None) -> int | None:
        if member is None:
            return self.default
        return self.codes[member]

    def decode(self, code: int) -> E:
        for member, member_code in self.codes.items():
            if member_code == code:
                return member
        raise KeyError(f"{self.wire_field}: no label for code {code}")


RESIDENTIAL_STATUS_CODES: CodeTable[HouseType] = CodeTable(
    "residentialStatus",
    {HouseType.OWN: 0, HouseType.RENT: 1},
    default=0,
)

OCCUPATION_CODES: CodeTable[OccupationType] = CodeTable(
    "occupation",
    {
        OccupationType.WORKING: 0,
        OccupationType.BUSINESS: 1,
        OccupationType.UNEMPLOYED: 2,
        OccupationType.RETIRED: 3,
    },
)

MONTHLY_INCOME_CODES: CodeTable[IncomeRange] = CodeTable(
    "monthlyIncome",
    {
        IncomeRange.BELOW_10K: 0,
        IncomeRange.FROM_10K_TO_25K: 1,
        IncomeRange.FROM_25K_TO_50K: 2,
        IncomeRange.FROM_50K_TO_1L: 3,
        IncomeRange.ABOVE_1L: 4,
    },
)

SPOUSE_MARITAL_STATUS_CODES: CodeTable[SpouseStatus] = CodeTable(
    "maritalStatus",
    {
        SpouseStatus.PRESENT: 1,
        SpouseStatus.DIVORCED: 2,
        SpouseStatus.EXPIRED: 3,
    },
    default=1,
)

CHILD_MARITAL_STATUS_CODES: CodeTable[ChildMaritalStatus] = CodeTable(
    "maritalStatus",
    {
        ChildMaritalStatus.SINGLE: 0,
        ChildMaritalStatus.MARRIED: 1,
        ChildMaritalStatus.DIVORCED: 2,
    },
    default=0,
)

GENDER_CODES: CodeTable[Gender] = CodeTable(
    "gender",
    {Gender.MALE: 0, Gender.FEMALE: 1},
    default=0,
)
