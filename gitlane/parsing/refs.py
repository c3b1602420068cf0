"""Branch, tag, stash and remote parsing.

Contains:
- BRANCH_REF_FORMAT: The for-each-ref format whose output parse_branch_infos expects
- parse_branch_infos: Parse for-each-ref output into BranchInfo records
- parse_tags / sort_tags_descending: Tag names, newest version first
- parse_stashes: Stash list lines
- parse_remotes: Parse `git remote -v` output
"""

import re
from functools import cmp_to_key

from gitlane.parsing.models import BranchInfo, RemoteInfo
from gitlane.parsing.records import parse_iso_date, split_records


# full ref, short name, object hash, upstream, committer date
BRANCH_REF_FORMAT = (
    "%(refname)%x1F%(refname:short)%x1F%(objectname)%x1F"
    "%(upstream:short)%x1F%(committerdate:iso-strict)%x1E"
)

_DIGITS_RE = re.compile(r"\d+")
_NATURAL_SPLIT_RE = re.compile(r"(\d+)")


def parse_branch_infos(output: str) -> list[BranchInfo]:
    """Parse `git for-each-ref` output produced with BRANCH_REF_FORMAT.

    The symbolic <remote>/HEAD ref is skipped.

    Args:
        output: Raw stdout of git for-each-ref.

    Returns:
        List of BranchInfo in output order.
    """
    branches: list[BranchInfo] = []
    for fields in split_records(output, min_fields=5):
        full_ref = fields[0].strip()
        name = fields[1].strip()
        if not full_ref or not name:
            continue

        is_remote = full_ref.startswith("refs/remotes/")
        if is_remote and (name.endswith("/HEAD") or full_ref.endswith("/HEAD")):
            continue

        branches.append(
            BranchInfo(
                name=name,
                full_ref=full_ref,
                head=fields[2].strip(),
                upstream=fields[3].strip(),
                committer_date=parse_iso_date(fields[4]),
                is_remote=is_remote,
            )
        )
    return branches


def _version_components(tag: str) -> list[int]:
    normalized = tag[1:] if tag[:1] in ("v", "V") else tag
    return [int(run) for run in _DIGITS_RE.findall(normalized)]


def _natural_key(value: str) -> list:
    return [
        (0, int(part), "") if part.isdigit() else (1, 0, part.lower())
        for part in _NATURAL_SPLIT_RE.split(value)
        if part
    ]


def _compare_tags(lhs: str, rhs: str) -> int:
    lhs_version = _version_components(lhs)
    rhs_version = _version_components(rhs)

    if lhs_version and rhs_version:
        width = max(len(lhs_version), len(rhs_version))
        lhs_padded = lhs_version + [0] * (width - len(lhs_version))
        rhs_padded = rhs_version + [0] * (width - len(rhs_version))
        if lhs_padded != rhs_padded:
            return -1 if lhs_padded > rhs_padded else 1
    elif lhs_version:
        return -1
    elif rhs_version:
        return 1

    lhs_key = _natural_key(lhs)
    rhs_key = _natural_key(rhs)
    if lhs_key == rhs_key:
        return 0
    return -1 if lhs_key > rhs_key else 1


def sort_tags_descending(tags: list[str]) -> list[str]:
    """Sort tags so the highest version comes first.

    Tags carrying numeric components sort before tags without any; ties and
    unversioned tags fall back to a descending natural order.
    """
    return sorted(tags, key=cmp_to_key(_compare_tags))


def parse_tags(output: str) -> list[str]:
    """Parse `git tag --list` output, newest version first."""
    return sort_tags_descending([line.strip() for line in output.splitlines() if line.strip()])


def parse_stashes(output: str) -> list[str]:
    """Parse `git stash list` output into its non-empty lines."""
    return [line for line in output.splitlines() if line.strip()]


def parse_remotes(output: str) -> list[RemoteInfo]:
    """Parse `git remote -v` output.

    Each remote appears twice (fetch and push); the last URL seen wins.

    Returns:
        List of RemoteInfo sorted by name.
    """
    urls: dict[str, str] = {}
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 2:
            continue
        name = parts[0].strip()
        if not name:
            continue
        url_and_kind = parts[1].split(" ")
        urls[name] = url_and_kind[0] if url_and_kind else ""
    return [RemoteInfo(name=name, url=urls[name]) for name in sorted(urls)]
