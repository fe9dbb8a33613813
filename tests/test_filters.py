"""Tests for Selection, FilterSet predicate and upstream payload."""

import pytest

from admitpulse.domain.filters import UNRESTRICTED, FilterSet, Selection, is_all_sentinel

from tests.test_record import _record


class TestSentinel:
    @pytest.mark.parametrize("value", [None, "", "   ", "All Cities", "all dates", "ALL MODES", "All"])
    def test_all_values_are_unrestricted(self, value) -> None:
        assert is_all_sentinel(value)
        assert Selection.parse(value) == UNRESTRICTED

    def test_concrete_value_is_restricted(self) -> None:
        selection = Selection.parse("08")
        assert selection.restricted
        assert selection.value == "08"


class TestSelection:
    def test_unrestricted_admits_anything(self) -> None:
        assert UNRESTRICTED.admits("08")
        assert UNRESTRICTED.admits("")

    def test_exact_match_only(self) -> None:
        selection = Selection.of("FN")
        assert selection.admits("FN")
        assert not selection.admits("fn")
        assert not selection.admits("FN ")


class TestFromRaw:
    def test_empty_mapping_is_unrestricted(self) -> None:
        assert FilterSet.from_raw({}).is_unrestricted
        assert FilterSet.from_raw(None) == FilterSet()

    def test_all_cities_equals_absent_centre(self) -> None:
        assert FilterSet.from_raw({"centreId": "All Cities"}) == FilterSet.from_raw({})

    def test_camel_and_snake_keys(self) -> None:
        camel = FilterSet.from_raw({"subCentreId": "002"})
        snake = FilterSet.from_raw({"sub_centre_id": "002"})
        assert camel == snake
        assert camel.sub_centre_id.value == "002"

    def test_exam_code_prefix_stripped(self) -> None:
        assert FilterSet.from_raw({"examCode": "PT CMS-2024"}).exam_code.value == "CMS-2024"
        assert FilterSet.from_raw({"examCode": "Mains IFS-2024"}).exam_code.value == "IFS-2024"
        assert FilterSet.from_raw({"examCode": " PT CMS-2024 "}).exam_code.value == "CMS-2024"

    def test_other_values_are_not_trimmed(self) -> None:
        assert Selection.parse(" FN ").value == " FN "
        filters = FilterSet.from_raw({"session": "FN "})
        assert filters.session.value == "FN "
        assert not filters.matches(_record(exam_session="FN"))

    def test_centre_display_label_reduced_to_code(self) -> None:
        assert FilterSet.from_raw({"centreId": "Delhi (08)"}).centre_id.value == "08"

    def test_filter_sets_are_hashable(self) -> None:
        a = FilterSet.from_raw({"centreId": "08"})
        b = FilterSet.from_raw({"centreId": "08"})
        assert {a: 1}[b] == 1


class TestMatches:
    def test_unrestricted_matches_everything(self) -> None:
        assert FilterSet().matches(_record())

    def test_single_dimension(self) -> None:
        filters = FilterSet.from_raw({"centreId": "08"})
        assert filters.matches(_record(centre_id="08"))
        assert not filters.matches(_record(centre_id="06"))

    def test_all_dimensions_are_anded(self) -> None:
        filters = FilterSet.from_raw({"centreId": "08", "verificationMode": "M"})
        assert filters.matches(_record(centre_id="08", verification_mode="M"))
        assert not filters.matches(_record(centre_id="08", verification_mode="A"))
        assert not filters.matches(_record(centre_id="06", verification_mode="M"))

    def test_every_dimension_checked(self) -> None:
        record = _record()
        for key, other in [
            ("examCode", "ESE-2024"),
            ("examDate", "06-06-2024"),
            ("session", "AN"),
            ("centreId", "06"),
            ("subCentreId", "999"),
            ("verificationMode", "M"),
        ]:
            assert not FilterSet.from_raw({key: other}).matches(record), key


class TestPayload:
    def test_unrestricted_dimensions_omitted(self) -> None:
        assert FilterSet().to_payload() == {}

    def test_field_names(self) -> None:
        filters = FilterSet.from_raw({
            "examCode": "PT CMS-2024",
            "examDate": "05-06-2024",
            "session": "FN",
            "centreId": "Delhi (08)",
            "subCentreId": "001",
            "verificationMode": "A",
        })
        assert filters.to_payload() == {
            "upsc_exam_code": "CMS-2024",
            "exam_date": "05-06-2024",
            "exam_session": "FN",
            "centre_id": "08",
            "sub_centre_id": "001",
            "verification_mode": "A",
        }

    def test_all_values_not_sent(self) -> None:
        filters = FilterSet.from_raw({"session": "All Sessions", "centreId": "08"})
        assert filters.to_payload() == {"centre_id": "08"}

    def test_query_echo_is_camel_case(self) -> None:
        assert FilterSet.from_raw({"centreId": "08"}).to_query() == {"centreId": "08"}
