"""Commit log parsing.

Contains:
- COMMIT_LOG_FORMAT: The --pretty format whose output parse_commits expects
- parse_commits: Parse git log output into ParsedCommit records
"""

from gitlane.parsing.models import ParsedCommit
from gitlane.parsing.records import parse_iso_date, split_records


# hash, parents, author, date, subject, decorations
COMMIT_LOG_FORMAT = "%H%x1F%P%x1F%an%x1F%ad%x1F%s%x1F%D%x1E"


def parse_commits(output: str) -> list[ParsedCommit]:
    """Parse git log output produced with COMMIT_LOG_FORMAT.

    Records with fewer than six fields or an empty hash are dropped.

    Args:
        output: Raw stdout of git log.

    Returns:
        List of ParsedCommit in log order.
    """
    commits: list[ParsedCommit] = []
    for fields in split_records(output, min_fields=6):
        commit_hash = fields[0].strip()
        if not commit_hash:
            continue

        decorations = tuple(
            name.strip() for name in fields[5].split(",") if name.strip()
        )
        commits.append(
            ParsedCommit(
                hash=commit_hash,
                parents=tuple(fields[1].split()),
                author=fields[2].strip(),
                date=parse_iso_date(fields[3]),
                subject=fields[4].strip(),
                decorations=decorations,
            )
        )
    return commits
