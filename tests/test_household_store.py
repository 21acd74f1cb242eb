import pytest

from masjid_registration.domain.households import (
    Child,
    HusbandHousehold,
    Spouse,
    WifeHousehold,
)
from masjid_registration.domain.value_objects import (
    BloodGroup,
    HeadOfFamily,
    HouseType,
    ParentStatus,
    PhysicallyChallenged,
    SpouseStatus,
)
from masjid_registration.exceptions import (
    CollectionIndexError,
    FieldNotApplicableError,
    InvalidSpouseCountError,
    UnknownFieldError,
)
from masjid_registration.services.household_store import HouseholdStore, MotherOption


class TestInitialRecord:
    def test_starts_husband_headed_with_one_blank_spouse(self, store):
        record = store.record

        assert record.head_of_family == HeadOfFamily.HUSBAND
        assert isinstance(record.household, HusbandHousehold)
        assert record.household.spouse_count == 1
        assert record.household.spouses == [Spouse()]
        assert record.children == []
        assert record.photo is None


class TestSetField:
    def test_applicant_text_field(self, store):
        store.set_field("full_name", "Abdul Rahman")

        assert store.record.applicant.full_name == "Abdul Rahman"

    def test_applicant_enum_field(self, store):
        store.set_field("house_type", "Own House")

        assert store.record.applicant.house_type == HouseType.OWN

    def test_blank_enum_selection_unsets(self, store):
        store.set_field("house_type", "Own House")
        store.set_field("house_type", "")

        assert store.record.applicant.house_type is None

    def test_aadhar_keeps_only_digits(self, store):
        store.set_field("aadhar_number", "12a3 4b")

        assert store.record.applicant.aadhar_number == "1234"

    def test_aadhar_formatted_input(self, store):
        store.set_field("aadhar_number", "1234-5678 9012")

        assert store.record.applicant.aadhar_number == "123456789012"

    def test_aadhar_all_letters_becomes_empty(self, store):
        store.set_field("aadhar_number", "abcd")

        assert store.record.applicant.aadhar_number == ""

    def test_parent_fields(self, store):
        store.set_field("father_name", "Mohammed Ismail")
        store.set_field("father_status", "Late")
        store.set_field("father_death_year", "2004")
        store.set_field("mother_status", "Alive")

        assert store.record.father.name == "Mohammed Ismail"
        assert store.record.father.status == ParentStatus.LATE
        assert store.record.father.death_year == "2004"
        assert store.record.mother.status == ParentStatus.ALIVE

    def test_remarks(self, store):
        store.set_field("remarks", "Moved from Chennai")

        assert store.record.remarks == "Moved from Chennai"

    def test_unknown_field(self, store):
        with pytest.raises(UnknownFieldError):
            store.set_field("favourite_colour", "green")

    def test_unknown_parent_field(self, store):
        with pytest.raises(UnknownFieldError):
            store.set_field("father_shoe_size", "9")

    def test_husband_field_requires_wife_branch(self, store):
        with pytest.raises(FieldNotApplicableError):
            store.set_field("husband_name", "Ibrahim")

    def test_husband_fields_in_wife_branch(self, store):
        store.set_field("head_of_family", "Wife")
        store.set_field("husband_name", "Ibrahim")
        store.set_field("husband_blood_group", "O-")

        household = store.record.household
        assert isinstance(household, WifeHousehold)
        assert household.husband.name == "Ibrahim"
        assert household.husband.blood_group == BloodGroup.O_NEGATIVE

    def test_spouse_count_through_set_field(self, store):
        store.set_field("spouse_count", "3")

        assert len(store.record.household.spouses) == 3

    def test_non_numeric_spouse_count(self, store):
        with pytest.raises(InvalidSpouseCountError):
            store.set_field("spouse_count", "two")


class TestHeadOfFamily:
    def test_switch_to_wife(self, store):
        store.set_head_of_family("Wife")

        assert store.head_of_family == HeadOfFamily.WIFE
        assert isinstance(store.record.household, WifeHousehold)

    def test_unset(self, store):
        store.set_head_of_family("")

        assert store.head_of_family is None
        assert store.record.household is None

    def test_switching_back_restores_spouses(self, store):
        store.set_spouse_count(2)
        store.set_spouse_field(0, "name", "Ayesha")

        store.set_head_of_family("Wife")
        store.set_field("husband_name", "Ibrahim")
        store.set_head_of_family("Husband")

        household = store.record.household
        assert isinstance(household, HusbandHousehold)
        assert household.spouse_count == 2
        assert household.spouses[0].name == "Ayesha"

        store.set_head_of_family("Wife")
        assert store.record.household.husband.name == "Ibrahim"

    def test_same_value_is_noop(self, store):
        household = store.record.household

        store.set_head_of_family("Husband")

        assert store.record.household is household


class TestSpouseCount:
    @pytest.mark.parametrize("count", [1, 2, 3, 4])
    def test_length_matches_count(self, store, count):
        store.set_spouse_count(count)

        household = store.record.household
        assert household.spouse_count == count
        assert len(household.spouses) == count

    def test_growing_preserves_existing_entries(self, store, complete_spouse):
        for field, value in complete_spouse.items():
            store.set_spouse_field(0, field, value)
        before = Spouse(**vars(store.record.household.spouses[0]))

        store.set_spouse_count(3)

        spouses = store.record.household.spouses
        assert spouses[0] == before
        assert spouses[1:] == [Spouse(), Spouse()]

    def test_shrinking_truncates_tail(self, store):
        store.set_spouse_count(4)
        for index, name in enumerate(["A", "B", "C", "D"]):
            store.set_spouse_field(index, "name", name)
        kept = store.record.household.spouses[:2]

        store.set_spouse_count(2)

        spouses = store.record.household.spouses
        assert [s.name for s in spouses] == ["A", "B"]
        assert spouses[0] is kept[0]
        assert spouses[1] is kept[1]

    @pytest.mark.parametrize("count", [0, 5, -1])
    def test_out_of_range(self, store, count):
        with pytest.raises(InvalidSpouseCountError):
            store.set_spouse_count(count)

        assert len(store.record.household.spouses) == 1

    def test_custom_maximum(self):
        store = HouseholdStore(max_spouses=2)

        with pytest.raises(InvalidSpouseCountError):
            store.set_spouse_count(3)

    def test_not_applicable_for_wife_branch(self, store):
        store.set_head_of_family("Wife")

        with pytest.raises(FieldNotApplicableError):
            store.set_spouse_count(2)


class TestSpouseField:
    def test_sets_single_field(self, store):
        store.set_spouse_count(2)
        store.set_spouse_field(1, "status", "Divorced")

        spouses = store.record.household.spouses
        assert spouses[1].status == SpouseStatus.DIVORCED
        assert spouses[0].status is None

    def test_index_out_of_range(self, store):
        with pytest.raises(CollectionIndexError):
            store.set_spouse_field(1, "name", "Ayesha")

    def test_unknown_spouse_field(self, store):
        with pytest.raises(UnknownFieldError):
            store.set_spouse_field(0, "salary", "1000")


class TestChildren:
    def test_add_child_appends_blank(self, store):
        index = store.add_child()

        assert index == 0
        assert store.record.children == [Child()]

    def test_set_child_field(self, store):
        store.add_child()
        store.set_child_field(0, "physically_challenged", "Yes")

        assert store.record.children[0].physically_challenged == PhysicallyChallenged.YES

    def test_remove_child_shifts_down(self, store):
        for name in ["Yusuf", "Maryam", "Zainab"]:
            index = store.add_child()
            store.set_child_field(index, "name", name)

        store.remove_child(1)

        assert [c.name for c in store.record.children] == ["Yusuf", "Zainab"]

    def test_remove_child_out_of_range(self, store):
        with pytest.raises(CollectionIndexError):
            store.remove_child(0)

    def test_negative_index_rejected(self, store):
        store.add_child()

        with pytest.raises(CollectionIndexError):
            store.set_child_field(-1, "name", "Yusuf")


class TestMotherOptions:
    def test_husband_branch_lists_each_wife(self, store):
        store.set_spouse_count(2)
        store.set_spouse_field(0, "name", "Ayesha")
        store.set_spouse_field(0, "status", "Expired")

        assert store.mother_options() == [
            MotherOption(value="Wife 1", label="Ayesha (Expired)"),
            MotherOption(value="Wife 2", label="Wife 2"),
        ]

    def test_wife_branch_is_self(self, store):
        store.set_head_of_family("Wife")

        assert store.mother_options() == [MotherOption(value="Self", label="Self")]

    def test_unset_branch_has_none(self, store):
        store.set_head_of_family(None)

        assert store.mother_options() == []


class TestPhotoAndSnapshot:
    def test_set_photo_keeps_bytes_opaque(self, store):
        photo = store.set_photo(b"\x89PNG\r\n", content_type="image/png", filename="me.png")

        assert store.record.photo is photo
        assert photo.data == b"\x89PNG\r\n"
        assert photo.preview_data_url() == "data:image/png;base64,iVBORw0K"

    def test_snapshot_is_detached(self, store):
        store.add_child()
        snapshot = store.snapshot()

        snapshot.children[0].name = "Changed"
        snapshot.children.append(Child())

        assert store.record.children == [Child()]
