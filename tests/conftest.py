from collections.abc import Callable
from typing import Any

import httpx
import pytest

from masjid_registration.api_client import RegistrationAPIClient
from masjid_registration.services.household_store import HouseholdStore

COMPLETE_SPOUSE: dict[str, str] = {
    "name": "Ayesha",
    "dob": "1990-04-02",
    "marriage_date": "2010-05-20",
    "occupation": "Teacher",
    "nativity": "Vellore",
    "caste": "Labbai",
    "qualification": "B.Ed",
    "blood_group": "B+",
    "status": "Present",
}


@pytest.fixture
def complete_spouse() -> dict[str, str]:
    return dict(COMPLETE_SPOUSE)


@pytest.fixture
def store() -> HouseholdStore:
    return HouseholdStore()


@pytest.fixture
def applicant_store(store: HouseholdStore) -> HouseholdStore:
    """Store with the required applicant fields filled in."""
    store.set_field("full_name", "Abdul Rahman")
    store.set_field("phone_number", "9876543210")
    store.set_field("house_type", "Rent House")
    store.set_field("address", "12 Mosque Street, Ambur")
    return store


@pytest.fixture
def two_wives_store(
    applicant_store: HouseholdStore, complete_spouse: dict[str, str]
) -> HouseholdStore:
    """Husband-headed household declaring two wives, describing only the first."""
    applicant_store.set_spouse_count(2)
    for field, value in complete_spouse.items():
        applicant_store.set_spouse_field(0, field, value)
    return applicant_store


@pytest.fixture
def make_api_client() -> Callable[..., RegistrationAPIClient]:
    """Build a client whose requests are answered by ``handler``."""

    def _make(handler: Callable[[httpx.Request], Any]) -> RegistrationAPIClient:
        transport = httpx.MockTransport(handler)
        client = httpx.AsyncClient(transport=transport, base_url="http://test")
        return RegistrationAPIClient(base_url="http://test", client=client)

    return _make
