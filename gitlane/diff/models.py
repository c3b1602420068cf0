"""Data models for parsed diffs.

Contains:
- LineType: Kind of a line inside a hunk
- DiffLine: One line of a hunk with its old/new line numbers
- DiffHunk: One @@ block of a unified diff
- FileDiff: Diff for a single file containing multiple hunks
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class LineType(str, Enum):
    """Kind of a hunk line, with the marker it is written with."""

    CONTEXT = "context"
    ADDITION = "addition"
    DELETION = "deletion"

    @property
    def prefix(self) -> str:
        return _PREFIXES[self]


_PREFIXES = {
    LineType.CONTEXT: " ",
    LineType.ADDITION: "+",
    LineType.DELETION: "-",
}

NO_NEWLINE_MARKER = "\\ No newline at end of file"


@dataclass(frozen=True)
class DiffLine:
    """A line of a hunk, without its leading marker."""

    type: LineType
    content: str
    old_line_number: Optional[int] = None  # Set for context and deletion lines
    new_line_number: Optional[int] = None  # Set for context and addition lines
    no_newline_at_end: bool = False

    @property
    def is_change(self) -> bool:
        return self.type is not LineType.CONTEXT

    def serialize(self) -> list[str]:
        """Render the line with its marker, plus the no-newline marker if any."""
        rendered = [self.type.prefix + self.content]
        if self.no_newline_at_end:
            rendered.append(NO_NEWLINE_MARKER)
        return rendered


@dataclass(frozen=True)
class DiffHunk:
    """One hunk of a unified diff."""

    header: str  # The @@ ... @@ line, as found in the diff
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: tuple[DiffLine, ...] = ()

    def change_line_indices(self) -> list[int]:
        """Positions of the addition and deletion lines in `lines`."""
        return [index for index, line in enumerate(self.lines) if line.is_change]

    @property
    def has_context(self) -> bool:
        return any(not line.is_change for line in self.lines)

    def serialize(self) -> list[str]:
        """Header followed by every line with its original marker."""
        rendered = [self.header]
        for line in self.lines:
            rendered.extend(line.serialize())
        return rendered


@dataclass(frozen=True)
class FileDiff:
    """Diff for a single file containing multiple hunks."""

    old_path: str
    new_path: str
    header_lines: tuple[str, ...]  # From 'diff --git' up to the first @@
    hunks: tuple[DiffHunk, ...] = field(default_factory=tuple)
    is_binary: bool = False
    is_new_file: bool = False
    is_deleted_file: bool = False

    @property
    def path(self) -> str:
        return self.new_path

    @property
    def is_renamed(self) -> bool:
        return self.old_path != self.new_path
