from datetime import datetime, timezone

import pytest

from tampayang.errors import ValidationError
from tampayang.reports import (
    ReportContact,
    ReportUpdate,
    StatusUpdateNotice,
    format_report_number,
    normalize_pagination,
    status_update_notice,
    validate_report_update,
)

NOW = datetime(2024, 5, 17, 8, 30, tzinfo=timezone.utc)


def _contact(**overrides):
    values = dict(
        report_number="TMP-2024-000001",
        reporter_name="Budi",
        reporter_phone="+620000000000",
        reporter_email="budi@example.com",
        village_name="Sukamaju",
    )
    values.update(overrides)
    return ReportContact(**values)


def _update(**overrides):
    values = dict(status="diproses", pic_name="Andi", pic_phone="+620000000001")
    values.update(overrides)
    return ReportUpdate(**values)


def test_report_number_zero_padded():
    assert format_report_number(2024, 42, NOW) == "TMP-2024-000043"


def test_report_number_first_of_year():
    assert format_report_number(2025, 0, NOW) == "TMP-2025-000001"


def test_report_number_wider_than_padding():
    assert format_report_number(2024, 1234567, NOW) == "TMP-2024-1234568"


def test_report_number_year_defaults_to_now():
    assert format_report_number(None, 9, NOW).startswith("TMP-2024-")


def test_report_number_fallback_on_lookup_failure():
    number = format_report_number(2024, None, NOW)
    prefix = "TMP-2024-ERR"
    assert number.startswith(prefix)
    suffix = number[len(prefix):]
    assert suffix.isdigit()
    assert int(suffix) == int(NOW.timestamp())


@pytest.mark.parametrize(
    "page, limit, expected",
    [
        (1, 10, (1, 10)),
        (3, 25, (3, 25)),
        (0, 0, (1, 10)),
        (-5, -1, (1, 10)),
        ("2", "50", (2, 50)),
        ("abc", "", (1, 10)),
        (None, None, (1, 10)),
    ],
)
def test_normalize_pagination(page, limit, expected):
    assert normalize_pagination(page, limit) == expected


def test_validate_update_passes_complete_update():
    update = _update()
    assert validate_report_update(update) is update


@pytest.mark.parametrize(
    "overrides, field, code",
    [
        ({"status": ""}, "status", "rpt020"),
        ({"pic_name": ""}, "pic_name", "rpt021"),
        ({"pic_phone": ""}, "pic_phone", "rpt022"),
        ({"status": "", "pic_name": "", "pic_phone": ""}, "status", "rpt020"),
        ({"pic_name": "", "pic_phone": ""}, "pic_name", "rpt021"),
    ],
)
def test_validate_update_reports_first_missing_field(overrides, field, code):
    with pytest.raises(ValidationError) as info:
        validate_report_update(_update(**overrides))
    assert info.value.field == field
    assert info.value.message == code


def test_notice_carries_contact_and_update():
    notice = status_update_notice(_contact(), _update(admin_notes="Sedang dikerjakan"))
    assert notice == StatusUpdateNotice(
        report_number="TMP-2024-000001",
        reporter_name="Budi",
        reporter_phone="+620000000000",
        status="diproses",
        admin_notes="Sedang dikerjakan",
        village_name="Sukamaju",
        email="budi@example.com",
    )
    assert notice.send_email is True


def test_notice_without_admin_notes_uses_empty_text():
    notice = status_update_notice(_contact(), _update())
    assert notice.admin_notes == ""


def test_notice_without_email_skips_email():
    notice = status_update_notice(_contact(reporter_email=""), _update())
    assert notice.email is None
    assert notice.send_email is False
    assert notice.reporter_phone == "+620000000000"


@pytest.mark.parametrize("overrides", [{"reporter_name": ""}, {"reporter_phone": ""}])
def test_notice_skipped_when_contact_incomplete(overrides):
    assert status_update_notice(_contact(**overrides), _update()) is None