"""Pydantic v2 models for the registration API wire format."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for payload models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class SpouseDetail(WireModel):
    name: str
    date_of_birth: str | None
    occupation: str
    native: str
    caste: str
    qualification: str
    blood_group: str
    marital_status: int


class ChildDetail(WireModel):
    name: str
    gender: int
    date_of_birth: str | None
    qualification: str | None
    marital_status: int
    blood_group: str | None
    is_physically_challenged: bool


class WirePayload(WireModel):
    """Body of ``POST /api/PersonalDetails``."""

    full_name: str
    phone_number: str
    residential_status: int
    address: str
    alternate_number: str | None = None
    date_of_birth: str | None = None
    caste_group: str | None = None
    aadhar_number: str | None = None
    qualification: str | None = None
    marriage_date: str | None = None
    blood_group: str | None = None
    occupation: int | None = None
    occupation_detail: str | None = None
    monthly_income: int | None = None
    email_id: str | None = None
    father_name: str | None = None
    father_occupation: str | None = None
    father_death_year: int | None = None
    mother_name: str | None = None
    mother_occupation: str | None = None
    mother_death_year: int | None = None
    number_of_wives: int | None = 0
    number_of_children: int = 0
    feedback: str | None = None
    # Spouse details travel under the API's historical name
    spouse_details: list[SpouseDetail] = Field(
        default_factory=list, alias="wifeDetails"
    )
    child_details: list[ChildDetail] = Field(default_factory=list)


class ErrorBody(BaseModel):
    """Problem-details style body returned with a non-success status.

    Only ``errors`` is relied upon: a map of field name to messages.
    """

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    status: int | None = None
    errors: dict[str, list[str]] | None = None

    def first_error(self) -> str | None:
        if not self.errors:
            return None
        for messages in self.errors.values():
            if messages:
                return messages[0]
        return None
