# tampayang

The core of a public infrastructure damage reporting service, as a plain
Python library. Citizens file reports about damaged roads, bridges and other
public works; administrators track, update and export them. This package holds
the rules behind that service, free of any web framework:

- **Login protection** — per-IP rate limiting, account lockout after repeated
  failed passwords, and access-token claims (`tampayang.auth`).
- **Phone numbers** — cleaning and checking reporter phone numbers
  (`tampayang.phone`).
- **Locations** — province, regency, district and village rules and listing
  query parsing (`tampayang.locations`).
- **Reports** — report numbers, pagination defaults, update checks and the
  notice sent to a reporter after a status change (`tampayang.reports`).
- **Statistics** — period, date range and map level rules
  (`tampayang.statistics`).
- **Exports** — reports and statistics as CSV, Excel (`.xlsx`) or PDF
  (`tampayang.exports`, `tampayang.documents`), built on two small
  self-contained writers (`tampayang.xlsx`, `tampayang.pdf`).
- **HTTP clients** — a search-server index/document client and a users API
  client (`tampayang.elasticsearch`, `tampayang.gorest`).

Errors are raised as exceptions derived from
`tampayang.errors.TampayangError`: `ValidationError` (with `field` and
`message`), `NotFoundError`, `ElasticsearchError` (with `status_code` and
`body`), `GorestError` (with `data`) and `tampayang.auth.LoginError` (with
`code`).

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

### Guarding logins

```python
import time

from tampayang.auth import LoginError, LoginGuard

guard = LoginGuard(
    max_login_attempts=5,
    lockout_duration=15 * 60,      # seconds
    rate_limit_window=60,          # seconds
    max_requests_per_window=10,
    clock=time.monotonic,
)

try:
    guard.evaluate_login("203.0.113.7", "user-1", password_valid=True)
except LoginError as exc:
    print("login refused:", exc.code)
```

`evaluate_login` checks, in order: the IP's rate limit (`"auth010"`), whether
a user was found (`user_id=None` gives `"auth006"`), the password (a wrong one
is counted and gives `"auth006"`), and the account lock (`"auth011"`). A
successful login clears the user's failed attempts. `is_rate_limited`,
`record_failed_attempt`, `is_account_locked` and `reset` can also be called
on their own.

`build_claims(user, expire_minutes, now)` returns the claims for a
`LoginUser`: its four fields, `iat`, `exp` and a random `jti` from
`generate_jti()`.

### Phone numbers

```python
from tampayang.phone import is_valid_phone_number, sanitize_phone_number

sanitize_phone_number("(0) 12-34")   # "+621234"
sanitize_phone_number("")            # ""
is_valid_phone_number("12")          # False: too short
```

Non-digits are removed; a leading `0` is replaced by `+62`, anything else gets
a leading `+`. A number is valid when the cleaned form has 11 to 15
characters.

### Locations, reports and statistics

```python
from tampayang.locations import parse_location_list_query, require_location_ref
from tampayang.reports import format_report_number, normalize_pagination
from tampayang.statistics import map_level, validate_period

request = parse_location_list_query({"type": "regency", "page": "2"})
location_id, location_type = require_location_ref("42", "village")

format_report_number(2024, 41)        # "TMP-2024-000042"
normalize_pagination("0", "abc")      # (1, 10)
validate_period(None)                 # "30d"
map_level(None, "district-1")         # MapLevel.VILLAGE
```

Invalid input raises `ValidationError`. `validate_location_requirements`
checks the parent and sub-type each level of a `CreateLocationRequest`
needs; `validate_report_update` and `status_update_notice` handle an
administrator's `ReportUpdate`; `summary_range` resolves the dates of a
summary request.

### Exporting

```python
from datetime import date

from tampayang.documents import render_statistics
from tampayang.exports import ExportStatistics, StatusSummary

stats = ExportStatistics(status_summary=[StatusSummary("baru", 3, 60.0)])
export = render_statistics(stats, "csv", date(2024, 1, 31))

export.filename              # "tampayang-statistics-2024-01-31.csv"
export.content_type          # "text/csv"
export.content_disposition   # 'attachment; filename="tampayang-statistics-2024-01-31.csv"'
```

`render_reports` does the same for a list of `ExportReport` rows. The format
is `"csv"`, `"excel"` or `"pdf"` (or an `ExportFormat`); anything else raises
`ValidationError`. The individual renderers (`reports_to_csv`,
`statistics_to_csv`, `reports_to_xlsx`, `statistics_to_xlsx`,
`reports_to_pdf`, `statistics_to_pdf`) return bytes.

`tampayang.xlsx.Workbook` (`add_sheet`, `set_cell`, `to_bytes`) and
`tampayang.pdf.PdfDocument` (`add_page`, `set_font`, `cell`, `ln`,
`to_bytes`) can be used directly for other documents.

### Search server

```python
from tampayang.elasticsearch import ElasticsearchClient

password = "password"
client = ElasticsearchClient("http", "localhost", 9200, "elastic", password, None)

if client.ping():
    client.insert_document("reports", "report-1", {"status": "baru"})
    print(client.get_document("reports", "report-1"))
```

Methods that change data return `{"status_code": ..., "result": ...}` and
raise `ElasticsearchError` on a failed status. `ping`, `index_exists` and
`document_exists` return booleans, and `get_document` reports a missing
document in its result instead of raising.

### Users API

```python
from tampayang.gorest import GorestClient

users = GorestClient("https://api.example.com/v2/", access_token="token")
users.get_all_users()
```

`base_url` must end with `/`. `create_user` raises `GorestError` carrying the
API's error entries when the request is rejected.

## What this package does not do

It is a library, not a running service. It has no HTTP server or routes, no
database storage for users, reports or locations, and no command-line tool.
It does not hash or check passwords, does not sign tokens (`build_claims`
only builds the claims), does not store uploaded photos and does not send
WhatsApp or e-mail messages: `status_update_notice` only says what should be
sent and to whom.