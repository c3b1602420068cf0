"""Submodule parsing.

Contains:
- parse_gitmodules_config: Parse `git config --get-regexp` output of .gitmodules
- parse_submodule_status: Parse `git submodule status` output
"""

import re
from typing import Optional

from gitlane.parsing.models import SubmoduleInfo, SubmoduleStatus


_STATUS_RE = re.compile(r"^([ +\-U])([0-9a-f]+) (.+?)(?: \((.*)\))?$")

_STATUS_BY_MARKER = {
    " ": SubmoduleStatus.UP_TO_DATE,
    "+": SubmoduleStatus.MODIFIED,
    "-": SubmoduleStatus.UNINITIALIZED,
    "U": SubmoduleStatus.CONFLICTED,
}


def parse_gitmodules_config(output: str) -> dict[str, dict[str, str]]:
    """Parse `git config --file .gitmodules --get-regexp '^submodule\\.'` output.

    Lines look like "submodule.<name>.path libs/foo". Submodule names may
    contain dots, so the key is split on its last dot.

    Returns:
        Mapping of submodule name to its settings (path, url, ...).
    """
    modules: dict[str, dict[str, str]] = {}
    for line in output.splitlines():
        key, _, value = line.partition(" ")
        if not key.startswith("submodule."):
            continue
        name, dot, setting = key[len("submodule."):].rpartition(".")
        if not dot or not name:
            continue
        modules.setdefault(name, {})[setting] = value.strip()
    return modules


def parse_submodule_status(
    output: str, modules: Optional[dict[str, dict[str, str]]] = None
) -> list[SubmoduleInfo]:
    """Parse `git submodule status` output.

    Args:
        output: Raw stdout; each line is "<marker><hash> <path> [(<describe>)]".
        modules: Result of parse_gitmodules_config, used for names and URLs.

    Returns:
        List of SubmoduleInfo in output order.
    """
    by_path = {
        settings.get("path", ""): (name, settings.get("url", ""))
        for name, settings in (modules or {}).items()
    }

    submodules: list[SubmoduleInfo] = []
    for line in output.splitlines():
        match = _STATUS_RE.match(line)
        if not match:
            continue
        path = match.group(3)
        name, url = by_path.get(path, (path, ""))
        submodules.append(
            SubmoduleInfo(
                name=name,
                path=path,
                url=url,
                hash=match.group(2),
                status=_STATUS_BY_MARKER[match.group(1)],
            )
        )
    return submodules
