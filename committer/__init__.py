"""Commit unstaged channel changes one top-level definition at a time.

The diff is parsed with unidiff, hunks are grouped by the definition they
change, and each group is staged and committed through GitPython.
"""

from .committer import CommitOverride, Committer
from .config import CommitterConfig, load_config
from .diff_types import Hunk
from .exceptions import CommitterError, DefinitionNotFoundError
from .git_repository import GitRepository

__all__ = [
  "CommitOverride",
  "Committer",
  "CommitterConfig",
  "CommitterError",
  "DefinitionNotFoundError",
  "GitRepository",
  "Hunk",
  "load_config",
]
