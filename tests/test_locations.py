import pytest

from tampayang.errors import ValidationError
from tampayang.locations import (
    INVALID_TYPE_MESSAGE,
    CreateLocationRequest,
    LocationListRequest,
    LocationType,
    parse_location_list_query,
    parse_location_type,
    require_location_ref,
    require_query_param,
    resolve_province_id,
    validate_location_requirements,
)


@pytest.mark.parametrize("name", ["province", "regency", "district", "village"])
def test_parse_location_type_round_trip(name):
    assert parse_location_type(name).value == name


def test_parse_location_type_missing():
    with pytest.raises(ValidationError) as info:
        parse_location_type("")
    assert info.value.field == "type"
    assert info.value.message == "Location type is required"


def test_parse_location_type_invalid():
    with pytest.raises(ValidationError) as info:
        parse_location_type("city")
    assert info.value.message == INVALID_TYPE_MESSAGE


def test_province_with_parent_rejected():
    req = CreateLocationRequest(LocationType.PROVINCE, "P", parent_id="1")
    with pytest.raises(ValidationError) as info:
        validate_location_requirements(req)
    assert info.value.field == "location_type"
    assert info.value.message == "province should not have parent_id"


def test_province_without_parent_accepted():
    req = CreateLocationRequest(LocationType.PROVINCE, "P")
    assert validate_location_requirements(req) is None


@pytest.mark.parametrize(
    "req, message",
    [
        (CreateLocationRequest(LocationType.REGENCY, "R"), "regency requires parent_id (province_id)"),
        (
            CreateLocationRequest(LocationType.REGENCY, "R", parent_id="1"),
            "regency requires regency_type (kabupaten or kota)",
        ),
        (CreateLocationRequest(LocationType.DISTRICT, "D"), "district requires parent_id (regency_id)"),
        (CreateLocationRequest(LocationType.VILLAGE, "V"), "village requires parent_id (district_id)"),
        (
            CreateLocationRequest(LocationType.VILLAGE, "V", parent_id="1"),
            "village requires village_type (desa or kelurahan)",
        ),
    ],
)
def test_requirements_errors(req, message):
    with pytest.raises(ValidationError) as info:
        validate_location_requirements(req)
    assert info.value.message == message


@pytest.mark.parametrize(
    "req",
    [
        CreateLocationRequest(LocationType.REGENCY, "R", parent_id="1", regency_type="kota"),
        CreateLocationRequest(LocationType.DISTRICT, "D", parent_id="1"),
        CreateLocationRequest(LocationType.VILLAGE, "V", parent_id="1", village_type="desa"),
    ],
)
def test_requirements_satisfied(req):
    assert validate_location_requirements(req) is None


def test_list_query_defaults():
    assert parse_location_list_query({}) == LocationListRequest()


def test_list_query_empty_values_take_defaults():
    result = parse_location_list_query({"page": "", "sort_by": "", "limit": ""})
    assert result.page == 1
    assert result.limit == 10
    assert result.sort_by == "name"


def test_list_query_values():
    result = parse_location_list_query(
        {
            "page": "3",
            "limit": "25",
            "type": "district",
            "parent_id": "p1",
            "search": "kota",
            "sort_by": "code",
            "sort_order": "desc",
            "is_active": "true",
        }
    )
    assert result == LocationListRequest(
        page=3,
        limit=25,
        type=LocationType.DISTRICT,
        parent_id="p1",
        search="kota",
        sort_by="code",
        sort_order="desc",
        is_active=True,
    )


def test_list_query_non_integer_page_is_zero():
    result = parse_location_list_query({"page": "abc", "limit": "1.5"})
    assert (result.page, result.limit) == (0, 0)


@pytest.mark.parametrize("text, expected", [("0", False), ("F", False), ("1", True), ("yes", None)])
def test_list_query_is_active(text, expected):
    assert parse_location_list_query({"is_active": text}).is_active is expected


def test_list_query_invalid_type():
    with pytest.raises(ValidationError) as info:
        parse_location_list_query({"type": "city"})
    assert info.value.field == "type"


def test_require_location_ref():
    assert require_location_ref("42", "village") == ("42", LocationType.VILLAGE)


def test_require_location_ref_missing_id():
    with pytest.raises(ValidationError) as info:
        require_location_ref("", "village")
    assert info.value.field == "id"


def test_require_location_ref_bad_type():
    with pytest.raises(ValidationError) as info:
        require_location_ref("42", "")
    assert info.value.field == "type"


def test_require_query_param():
    assert require_query_param("abc", "lov001") == "abc"
    with pytest.raises(ValidationError) as info:
        require_query_param("", "lov002")
    assert info.value.field == "lov002"


def test_resolve_province_id():
    assert resolve_province_id("", "default") == "default"
    assert resolve_province_id(None, "default") == "default"
    assert resolve_province_id("p9", "default") == "p9"