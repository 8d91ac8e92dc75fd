"""Parser for the unstaged diff using unidiff."""

import logging
from io import StringIO
from typing import TYPE_CHECKING

from unidiff import PatchSet
from unidiff.errors import UnidiffParseError

from committer.diff_types import Hunk
from committer.exceptions import CommitterError

if TYPE_CHECKING:
  from committer.git_repository import GitRepository

logger = logging.getLogger(__name__)


def parse_hunks(diff_text: str) -> list[Hunk]:
  """Split a unified diff into hunks, in diff order.

  Only files modified in place are considered; added, deleted and renamed
  files cannot be staged hunk by hunk and are skipped.

  Args:
      diff_text: Output of git diff

  Returns:
      List of Hunk values

  Raises:
      CommitterError: If the diff cannot be parsed
  """
  try:
    patch_set = PatchSet(StringIO(diff_text))
  except UnidiffParseError as e:
    raise CommitterError.from_exception(
      e, "DIFF_PARSE_FAILED", "diff", context="Cannot parse diff"
    ) from e

  hunks = []
  for patched_file in patch_set:
    if patched_file.is_added_file or patched_file.is_removed_file or patched_file.is_rename:
      logger.warning(f"Skipping {patched_file.path}: not a modification in place")
      continue

    for hunk in patched_file:
      hunks.append(Hunk.from_unidiff(patched_file.path, hunk))

  logger.debug(f"Parsed {len(hunks)} hunks from {len(patch_set)} files")
  return hunks


def diff_info(repository: "GitRepository") -> list[Hunk]:
  """Read the unstaged diff of the repository and return its hunks."""
  return parse_hunks(repository.diff_text())
