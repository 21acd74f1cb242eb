"""Command-line interface for Masjid Member Registration.

A form fill is described by a JSON file and replayed through the household
store exactly as the form would do it, one operation per edit:

    {
      "head_of_family": "Husband",
      "full_name": "Abdul Rahman",
      "phone_number": "9876543210",
      "house_type": "Own House",
      "address": "12 Mosque Street",
      "spouse_count": 2,
      "spouses": [{"name": "Ayesha", "dob": "1990-04-02", ...}],
      "children": [{"name": "Yusuf", "dob": "2015-06-01"}],
      "photo": "photo.jpg"
    }
"""

import argparse
import asyncio
import json
import mimetypes
import sys
from pathlib import Path
from typing import Any

from masjid_registration import __version__
from masjid_registration.api_client import RegistrationAPIClient, SubmissionResult
from masjid_registration.config import get_settings
from masjid_registration.exceptions import RecordFileError, RegistrationError
from masjid_registration.logging_config import configure_logging
from masjid_registration.services.household_store import HouseholdStore
from masjid_registration.services.payload_mapper import build_payload
from masjid_registration.services.registration import RegistrationService
from masjid_registration.services.validation import validate_household

# Applied first and in this order so later edits land in the right branch
_STRUCTURAL_KEYS = ("head_of_family", "spouse_count")
_COLLECTION_KEYS = ("spouses", "children", "photo")


def apply_form_fill(
    store: HouseholdStore, data: dict[str, Any], base_dir: Path | None = None
) -> HouseholdStore:
    """Replay a form-fill document through the store's operations."""
    for key in _STRUCTURAL_KEYS:
        if key in data:
            store.set_field(key, data[key])

    for key, value in data.items():
        if key in _STRUCTURAL_KEYS or key in _COLLECTION_KEYS:
            continue
        store.set_field(key, value)

    spouses = data.get("spouses") or []
    if spouses and "spouse_count" not in data:
        store.set_spouse_count(len(spouses))
    for index, spouse in enumerate(spouses):
        for field, value in spouse.items():
            store.set_spouse_field(index, field, value)

    for child in data.get("children") or []:
        index = store.add_child()
        for field, value in child.items():
            store.set_child_field(index, field, value)

    if data.get("photo"):
        photo_path = Path(data["photo"])
        if base_dir is not None and not photo_path.is_absolute():
            photo_path = base_dir / photo_path
        try:
            content = photo_path.read_bytes()
        except OSError as e:
            raise RecordFileError(f"Cannot read photo {photo_path}: {e}") from e
        content_type, _ = mimetypes.guess_type(photo_path.name)
        store.set_photo(
            content,
            content_type=content_type or "application/octet-stream",
            filename=photo_path.name,
        )

    return store


def load_record_file(path: Path, max_spouses: int | None = None) -> HouseholdStore:
    """Read a form-fill JSON file into a fresh store."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise RecordFileError(f"Cannot read record file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise RecordFileError(f"Record file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise RecordFileError(f"Record file {path} must contain a JSON object")

    if max_spouses is None:
        max_spouses = get_settings().max_spouses
    store = HouseholdStore(max_spouses=max_spouses)
    return apply_form_fill(store, data, base_dir=path.parent)


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a record file without sending it."""
    try:
        store = load_record_file(Path(args.file))
    except RegistrationError as e:
        print(f"Error: {e.message}")
        return 1

    result = validate_household(store.record)
    if not result.is_valid:
        assert result.reason is not None
        print(f"Validation error: {result.reason.message}")
        return 1

    print("Record is valid.")
    return 0


def cmd_payload(args: argparse.Namespace) -> int:
    """Print the JSON payload a record file would be submitted as."""
    try:
        store = load_record_file(Path(args.file))
    except RegistrationError as e:
        print(f"Error: {e.message}")
        return 1

    result = validate_household(store.record)
    if not result.is_valid:
        assert result.reason is not None
        print(f"Validation error: {result.reason.message}")
        return 1

    payload = build_payload(store.record, result)
    print(json.dumps(payload.to_wire(), indent=2, ensure_ascii=False))
    return 0


async def _submit(
    store: HouseholdStore, base_url: str, path: str, timeout: float
) -> SubmissionResult:
    async with RegistrationAPIClient(
        base_url=base_url, registration_path=path, timeout=timeout
    ) as client:
        return await RegistrationService(client).submit(store)


def cmd_submit(args: argparse.Namespace) -> int:
    """Validate, map and POST a record file."""
    settings = get_settings()
    try:
        store = load_record_file(Path(args.file), max_spouses=settings.max_spouses)
    except RegistrationError as e:
        print(f"Error: {e.message}")
        return 1

    base_url = (args.api_url or settings.api_base_url).rstrip("/")
    result = asyncio.run(
        _submit(store, base_url, settings.registration_path, settings.request_timeout)
    )

    print(result.message)
    if result.ok and result.body is not None:
        print(json.dumps(result.body, indent=2, ensure_ascii=False))
    return 0 if result.ok else 1


def cmd_version(args: argparse.Namespace) -> int:
    """Show version information."""
    print(f"Masjid Member Registration v{__version__}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="masjid-registration",
        description="Masjid Member Registration - household registration client",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    validate_parser = subparsers.add_parser(
        "validate", help="Check a record file against the submission rules"
    )
    validate_parser.add_argument("file", help="Form-fill JSON file")
    validate_parser.set_defaults(func=cmd_validate)

    payload_parser = subparsers.add_parser(
        "payload", help="Print the API payload for a record file"
    )
    payload_parser.add_argument("file", help="Form-fill JSON file")
    payload_parser.set_defaults(func=cmd_payload)

    submit_parser = subparsers.add_parser(
        "submit", help="Submit a record file to the registration API"
    )
    submit_parser.add_argument("file", help="Form-fill JSON file")
    submit_parser.add_argument(
        "--api-url",
        default=None,
        help="Override the API base URL (default: MREG_API_BASE_URL)",
    )
    submit_parser.set_defaults(func=cmd_submit)

    version_parser = subparsers.add_parser("version", help="Show version")
    version_parser.set_defaults(func=cmd_version)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging()
    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
