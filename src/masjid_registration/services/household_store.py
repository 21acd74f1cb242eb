"""Household record store.

Single owner of the in-progress registration. Every mutation goes through
one of the narrow operations below so the spouse list can never drift out
of step with the declared spouse count.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import Any

from masjid_registration.domain.households import (
    Applicant,
    Child,
    HouseholdRecord,
    HusbandHousehold,
    Photo,
    Spouse,
    WifeHousehold,
)
from masjid_registration.domain.value_objects import HeadOfFamily, parse_label
from masjid_registration.exceptions import (
    CollectionIndexError,
    FieldNotApplicableError,
    InvalidSpouseCountError,
    UnknownFieldError,
)
from masjid_registration.logging_config import get_logger

logger = get_logger(__name__)

MAX_SPOUSES = 4

_NON_DIGITS = re.compile(r"[^0-9]")
_APPLICANT_FIELDS = frozenset(Applicant.field_names())


@dataclass(frozen=True, slots=True)
class MotherOption:
    value: str
    label: str


class HouseholdStore:
    def __init__(
        self,
        record: HouseholdRecord | None = None,
        max_spouses: int = MAX_SPOUSES,
    ) -> None:
        self._record = record if record is not None else HouseholdRecord()
        self._max_spouses = max_spouses
        # Branch left behind when head of family is switched, restored on switch back
        self._parked: dict[HeadOfFamily, HusbandHousehold | WifeHousehold] = {}

    @property
    def record(self) -> HouseholdRecord:
        return self._record

    @property
    def head_of_family(self) -> HeadOfFamily | None:
        return self._record.head_of_family

    def snapshot(self) -> HouseholdRecord:
        """Deep copy of the current record for rendering."""
        return copy.deepcopy(self._record)

    # ------------------------------------------------------------------
    # Scalar fields
    # ------------------------------------------------------------------

    def set_field(self, name: str, value: Any) -> None:
        """Update one scalar field addressed by its form name.

        Parent fields are ``father_*`` / ``mother_*`` and husband fields are
        ``husband_*``. The Aadhar number is reduced to its digits.
        """
        if name == "head_of_family":
            self.set_head_of_family(value)
        elif name == "spouse_count":
            try:
                count = int(value)
            except (TypeError, ValueError):
                raise InvalidSpouseCountError(value, self._max_spouses) from None
            self.set_spouse_count(count)
        elif name == "remarks":
            self._record.remarks = "" if value is None else str(value)
        elif name == "aadhar_number":
            digits = _NON_DIGITS.sub("", "" if value is None else str(value))
            self._record.applicant.aadhar_number = digits
        elif name in _APPLICANT_FIELDS:
            self._record.applicant.set(name, value)
        elif name.startswith("father_"):
            self._record.father.set(name.removeprefix("father_"), value)
        elif name.startswith("mother_"):
            self._record.mother.set(name.removeprefix("mother_"), value)
        elif name.startswith("husband_"):
            household = self._record.household
            if not isinstance(household, WifeHousehold):
                raise FieldNotApplicableError(name, self._hof_label())
            household.husband.set(name.removeprefix("husband_"), value)
        else:
            raise UnknownFieldError(name)

    def set_head_of_family(self, value: Any) -> None:
        target = parse_label(HeadOfFamily, value)
        current = self._record.household
        if target == self._record.head_of_family:
            return

        if current is not None:
            self._parked[current.head_of_family] = current

        if target is None:
            branch = None
        elif target in self._parked:
            branch = self._parked.pop(target)
        elif target == HeadOfFamily.HUSBAND:
            branch = HusbandHousehold()
        else:
            branch = WifeHousehold()

        self._record.household = branch
        logger.debug("head_of_family_changed", head_of_family=self._hof_label())

    # ------------------------------------------------------------------
    # Spouses
    # ------------------------------------------------------------------

    def set_spouse_count(self, count: int) -> None:
        """Resize the spouse list to ``count`` entries.

        Growing appends blank spouses, shrinking drops entries from the tail.
        Retained entries are left untouched.
        """
        household = self._husband_household("spouse_count")
        if not 1 <= count <= self._max_spouses:
            raise InvalidSpouseCountError(count, self._max_spouses)

        spouses = household.spouses
        if count > len(spouses):
            spouses.extend(Spouse() for _ in range(count - len(spouses)))
        else:
            del spouses[count:]
        household.spouse_count = count
        logger.debug("spouse_count_changed", spouse_count=count)

    def set_spouse_field(self, index: int, field: str, value: Any) -> None:
        spouses = self._husband_household(f"spouse_{field}").spouses
        _check_index("spouses", index, len(spouses))
        spouses[index].set(field, value)

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------

    def add_child(self) -> int:
        """Append a blank child and return its index."""
        self._record.children.append(Child())
        return len(self._record.children) - 1

    def remove_child(self, index: int) -> None:
        children = self._record.children
        _check_index("children", index, len(children))
        del children[index]

    def set_child_field(self, index: int, field: str, value: Any) -> None:
        children = self._record.children
        _check_index("children", index, len(children))
        children[index].set(field, value)

    def mother_options(self) -> list[MotherOption]:
        """Choices for a child's mother reference."""
        household = self._record.household
        if isinstance(household, HusbandHousehold):
            options = []
            for position, spouse in enumerate(household.spouses, start=1):
                label = spouse.name.strip() or f"Wife {position}"
                if spouse.status is not None:
                    label = f"{label} ({spouse.status.value})"
                options.append(MotherOption(value=f"Wife {position}", label=label))
            return options
        if isinstance(household, WifeHousehold):
            return [MotherOption(value="Self", label="Self")]
        return []

    # ------------------------------------------------------------------
    # Photo
    # ------------------------------------------------------------------

    def set_photo(
        self,
        data: bytes,
        content_type: str = "application/octet-stream",
        filename: str | None = None,
    ) -> Photo:
        photo = Photo(data=bytes(data), content_type=content_type, filename=filename)
        self._record.photo = photo
        return photo

    # ------------------------------------------------------------------

    def _husband_household(self, field: str) -> HusbandHousehold:
        household = self._record.household
        if not isinstance(household, HusbandHousehold):
            raise FieldNotApplicableError(field, self._hof_label())
        return household

    def _hof_label(self) -> str | None:
        hof = self._record.head_of_family
        return hof.value if hof is not None else None


def _check_index(collection: str, index: int, length: int) -> None:
    if not 0 <= index < length:
        raise CollectionIndexError(collection, index, length)
