"""Reflog parsing.

Contains:
- REFLOG_FORMAT: The --format string whose output parse_reflog expects
- parse_reflog: Parse reflog output into ReflogEntry records
"""

from gitlane.parsing.models import ReflogEntry
from gitlane.parsing.records import parse_iso_date, split_records


# hash, selector (HEAD@{n}), reflog subject, committer date, relative date
REFLOG_FORMAT = "%H%x1F%gd%x1F%gs%x1F%cI%x1F%cr%x1E"


def parse_reflog(output: str) -> list[ReflogEntry]:
    """Parse `git reflog --format=REFLOG_FORMAT` output.

    The reflog subject has the shape "<action>: <message>", e.g.
    "checkout: moving from main to dev". Subjects without a colon are kept
    whole as the action.
    """
    entries: list[ReflogEntry] = []
    for fields in split_records(output, min_fields=5):
        commit_hash = fields[0].strip()
        if not commit_hash:
            continue

        subject = fields[2].strip()
        action, sep, message = subject.partition(": ")
        if not sep:
            action, message = subject, ""

        entries.append(
            ReflogEntry(
                hash=commit_hash,
                ref_name=fields[1].strip(),
                action=action.strip(),
                message=message.strip(),
                date=parse_iso_date(fields[3]),
                relative_date=fields[4].strip(),
            )
        )
    return entries
