"""Porcelain blame parsing.

Contains:
- parse_blame: Parse `git blame --porcelain` output into BlameEntry records
"""

import re

import structlog

from gitlane.parsing.models import BlameEntry
from gitlane.parsing.records import parse_epoch_date


logger = structlog.get_logger(__name__)

# <hash> <orig line> <final line> [<lines in group>]
_HEADER_RE = re.compile(r"^([0-9a-f]{40,64}) (\d+) (\d+)(?: (\d+))?$")


def parse_blame(output: str) -> list[BlameEntry]:
    """Parse porcelain blame output.

    Commit metadata (author, author-time, summary, ...) is only printed the
    first time a commit appears, so it is remembered per hash and reused for
    later lines of the same commit. Lines before a valid header are skipped.

    Args:
        output: Raw stdout of git blame --porcelain.

    Returns:
        List of BlameEntry ordered by final line number.
    """
    entries: list[BlameEntry] = []
    metadata: dict[str, dict[str, str]] = {}
    current_hash = None
    final_line = 0

    for line in output.split("\n"):
        if line.startswith("\t"):
            if current_hash is None:
                continue
            info = metadata.get(current_hash, {})
            entries.append(
                BlameEntry(
                    commit_hash=current_hash,
                    author=info.get("author", ""),
                    date=parse_epoch_date(info.get("author-time", ""), info.get("author-tz", "+0000")),
                    summary=info.get("summary", ""),
                    line_number=final_line,
                    content=line[1:],
                )
            )
            current_hash = None
            continue

        header = _HEADER_RE.match(line)
        if header:
            current_hash = header.group(1)
            final_line = int(header.group(3))
            metadata.setdefault(current_hash, {})
            continue

        if current_hash is None:
            if line:
                logger.debug("blame_line_skipped", line=line[:80])
            continue

        key, _, value = line.partition(" ")
        metadata[current_hash].setdefault(key, value)

    return entries
