"""Record splitting and date parsing shared by all git output parsers.

Contains:
- FIELD_SEPARATOR / RECORD_SEPARATOR: Control characters used in --format strings
- EPOCH: Sentinel date substituted for unparsable dates
- split_records: Split output into records of fields
- parse_iso_date: Parse a strict ISO-8601 timestamp
- parse_epoch_date: Parse a unix timestamp plus a +hhmm offset
"""

import re
from datetime import datetime, timedelta, timezone

import structlog


logger = structlog.get_logger(__name__)

# Unit and record separators cannot occur in commit subjects, author names or
# ref names, so they split git output without any quoting rules.
FIELD_SEPARATOR = "\x1f"
RECORD_SEPARATOR = "\x1e"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_ISO_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<tz>Z|[+-]\d{2}:\d{2})$"
)

_TZ_OFFSET_RE = re.compile(r"^([+-])(\d{2})(\d{2})$")


def split_records(output: str, min_fields: int) -> list[list[str]]:
    """Split separator-delimited output into records.

    Args:
        output: Raw command output using RECORD_SEPARATOR between records and
            FIELD_SEPARATOR between fields.
        min_fields: Records with fewer fields are dropped.

    Returns:
        List of records, each a list of raw (unstripped) field strings.
    """
    records: list[list[str]] = []
    for raw_record in output.split(RECORD_SEPARATOR):
        if not raw_record.strip():
            continue
        fields = raw_record.split(FIELD_SEPARATOR)
        if len(fields) < min_fields:
            logger.debug("record_dropped", fields=len(fields), expected=min_fields)
            continue
        records.append(fields)
    return records


def parse_iso_date(value: str) -> datetime:
    """Parse a strict ISO-8601 timestamp with optional fractional seconds.

    Args:
        value: A timestamp such as 2024-05-01T10:20:30+02:00 or
            2024-05-01T10:20:30.123Z.

    Returns:
        An aware datetime, or EPOCH when the value cannot be parsed.
    """
    match = _ISO_RE.match(value.strip())
    if not match:
        return EPOCH

    tz = match.group("tz")
    if tz == "Z":
        tz = "+00:00"
    try:
        parsed = datetime.fromisoformat(match.group("base") + tz)
    except ValueError:
        return EPOCH

    fraction = match.group("fraction")
    if fraction:
        parsed = parsed.replace(microsecond=int(fraction[:6].ljust(6, "0")))
    return parsed


def parse_epoch_date(seconds: str, offset: str = "+0000") -> datetime:
    """Parse a unix timestamp and a git-style +hhmm offset.

    Returns:
        An aware datetime, or EPOCH when the timestamp is not a number.
    """
    try:
        stamp = int(seconds.strip())
    except ValueError:
        return EPOCH

    tz = timezone.utc
    match = _TZ_OFFSET_RE.match(offset.strip())
    if match:
        sign = -1 if match.group(1) == "-" else 1
        delta = timedelta(hours=int(match.group(2)), minutes=int(match.group(3)))
        tz = timezone(sign * delta)
    return datetime.fromtimestamp(stamp, tz=tz)
