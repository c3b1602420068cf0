"""Working tree status parsing."""


def parse_status_lines(output: str) -> list[str]:
    """Return the non-empty lines of `git status --porcelain` output."""
    return [line for line in output.split("\n") if line.strip()]
