"""
rNPV Valuator — Loss-of-Exclusivity Resolver

Reduces a set of Orange-Book-style records
({application_number?, product_name?, patent_expiry?, exclusivity_expiry?})
to a single LOE year: the latest calendar year among all present
patent / exclusivity expiry dates.
"""

import re
from datetime import datetime, timezone
from typing import Optional

_YEAR_PREFIX_RE = re.compile(r"^(\d{4})(?:-(\d{2}))?$")

EXPIRY_FIELDS = ("patent_expiry", "exclusivity_expiry")


def parse_expiry_year(value) -> Optional[int]:
    """
    Extracts the calendar year from an ISO date string.

    Accepts full ISO dates / datetimes ("2031-05-01", "2031-05-01T00:00:00Z")
    as well as bare "YYYY" and "YYYY-MM" forms. Returns None when the value
    does not parse.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
    if parsed is not None:
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.year
    match = _YEAR_PREFIX_RE.match(text)
    if match and (match.group(2) is None or 1 <= int(match.group(2)) <= 12):
        return int(match.group(1))
    return None


def resolve_loe_year(records) -> Optional[int]:
    """
    Returns the latest expiry year across all records, or None when the
    record set is empty or no date parses to a valid year.

    Records may be dicts or objects; both snake_case and camelCase
    (patentExpiry / exclusivityExpiry) keys are read.
    """
    latest = None
    for record in records or []:
        for field in EXPIRY_FIELDS:
            year = parse_expiry_year(_read_field(record, field))
            if year and (latest is None or year > latest):
                latest = year
    return latest


def _read_field(record, field):
    camel = re.sub(r"_([a-z])", lambda m: m.group(1).upper(), field)
    if isinstance(record, dict):
        return record.get(field, record.get(camel))
    return getattr(record, field, getattr(record, camel, None))
