"""Repository snapshots, commit-graph lanes and partial staging on top of git."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("gitlane")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
