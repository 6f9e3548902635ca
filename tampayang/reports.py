"""Report numbering, listing defaults, update checks and status-change notices."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from .errors import ValidationError

REPORT_NUMBER_PREFIX = "TMP"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

STATUS_REQUIRED = "rpt020"
PIC_NAME_REQUIRED = "rpt021"
PIC_PHONE_REQUIRED = "rpt022"


@dataclass(frozen=True)
class ReportUpdate:
    """An administrator's change to a report's status and person in charge."""

    status: str
    pic_name: str
    pic_phone: str
    admin_notes: str | None = None


@dataclass(frozen=True)
class ReportContact:
    """The reporter details stored with a report, used for notifications."""

    report_number: str
    reporter_name: str
    reporter_phone: str
    reporter_email: str = ""
    village_name: str = ""


@dataclass(frozen=True)
class StatusUpdateNotice:
    """What to tell a reporter after their report's status changed.

    ``email`` is None when the reporter left no address, in which case only
    the phone message is sent.
    """

    report_number: str
    reporter_name: str
    reporter_phone: str
    status: str
    admin_notes: str
    village_name: str
    email: str | None = None

    @property
    def send_email(self) -> bool:
        return self.email is not None


def format_report_number(
    year: int | None,
    last_sequence: int | None,
    now: datetime | None = None,
) -> str:
    """Return the next report number for ``year``.

    ``last_sequence`` is the highest sequence already used that year, or
    None when it could not be looked up; then a fallback number built from
    the current Unix time is returned instead.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if year is None:
        year = now.year
    if last_sequence is None:
        return f"{REPORT_NUMBER_PREFIX}-{year}-ERR{int(now.timestamp())}"
    return f"{REPORT_NUMBER_PREFIX}-{year}-{last_sequence + 1:06d}"


def _to_int(value: int | str | None) -> int:
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    try:
        return int(value.strip() or "0")
    except ValueError:
        return 0


def normalize_pagination(
    page: int | str | None = DEFAULT_PAGE, limit: int | str | None = DEFAULT_LIMIT
) -> tuple[int, int]:
    """Return a usable (page, limit); values below 1 or unparsable fall back to 1 and 10."""
    page_number = _to_int(page)
    page_size = _to_int(limit)
    if page_number < 1:
        page_number = DEFAULT_PAGE
    if page_size < 1:
        page_size = DEFAULT_LIMIT
    return page_number, page_size


def validate_report_update(update: ReportUpdate) -> ReportUpdate:
    """Check that status, PIC name and PIC phone are all given.

    Raises ValidationError whose message is the message code for the first
    missing field.
    """
    if not update.status:
        raise ValidationError("status", STATUS_REQUIRED)
    if not update.pic_name:
        raise ValidationError("pic_name", PIC_NAME_REQUIRED)
    if not update.pic_phone:
        raise ValidationError("pic_phone", PIC_PHONE_REQUIRED)
    return update


def status_update_notice(
    contact: ReportContact, update: ReportUpdate
) -> StatusUpdateNotice | None:
    """Build the notice for a status change, or None if the reporter cannot be reached."""
    if not contact.reporter_name or not contact.reporter_phone:
        return None
    return StatusUpdateNotice(
        report_number=contact.report_number,
        reporter_name=contact.reporter_name,
        reporter_phone=contact.reporter_phone,
        status=update.status,
        admin_notes=update.admin_notes or "",
        village_name=contact.village_name,
        email=contact.reporter_email or None,
    )