"""Git operations needed by the committer, on top of GitPython."""

import logging
import tempfile
from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from committer.exceptions import CommitterError

logger = logging.getLogger(__name__)


class GitRepository:
  """Reads the unstaged diff and stages and commits hunks.

  Every git invocation blocks until the process exits; a non-zero exit
  status is turned into a CommitterError.
  """

  def __init__(self, repo_path: Path | str = ".", subtree: str = "nongnu", context_lines: int = 1):
    try:
      self.repo = Repo(repo_path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
      raise CommitterError.from_exception(
        e, "NOT_A_REPOSITORY", "diff", context=f"Not a git repository: {repo_path}"
      ) from e
    self.root = Path(self.repo.working_tree_dir)
    self.subtree = subtree
    self.context_lines = context_lines

  def diff_text(self) -> str:
    """Unstaged changes below the subtree, with explicit a/ and b/ prefixes."""
    try:
      return self.repo.git.diff(
        f"--unified={self.context_lines}",
        "--no-ext-diff",
        "--no-color",
        "--src-prefix=a/",
        "--dst-prefix=b/",
        "--",
        self.subtree,
        strip_newline_in_stdout=False,
      )
    except GitCommandError as e:
      raise CommitterError.from_exception(e, "DIFF_FAILED", "diff", context="git diff failed") from e

  def committed_text(self, file_name: str) -> str:
    """Contents of file_name as of the last commit."""
    try:
      return self.repo.git.show(f"HEAD:{file_name}", strip_newline_in_stdout=False)
    except GitCommandError as e:
      raise CommitterError.from_exception(
        e, "SHOW_FAILED", "show", context=f"Cannot read {file_name} at HEAD"
      ) from e

  def working_text(self, file_name: str) -> str:
    return (self.root / file_name).read_text(encoding="utf-8")

  def _run_with_input(self, text: str, command: str, *args: str) -> None:
    """Run a git command with text on its standard input."""
    with tempfile.TemporaryFile() as stdin:
      stdin.write(text.encode("utf-8"))
      stdin.seek(0)
      getattr(self.repo.git, command)(*args, istream=stdin)

  def apply_cached(self, patch: str) -> None:
    """Stage a patch with git apply --cached --unidiff-zero."""
    try:
      self._run_with_input(patch, "apply", "--cached", "--unidiff-zero", "-")
    except GitCommandError as e:
      raise CommitterError.from_exception(e, "APPLY_FAILED", "apply", context="Cannot apply") from e

  def commit(self, message: str) -> None:
    """Commit the index, reading the message from standard input."""
    try:
      self._run_with_input(message, "commit", "-F", "-")
    except GitCommandError as e:
      raise CommitterError.from_exception(e, "COMMIT_FAILED", "commit", context="Cannot commit") from e

  def amend(self) -> None:
    """Fold the index into the previous commit, keeping its message."""
    try:
      self.repo.git.commit("--amend", "--no-edit")
    except GitCommandError as e:
      raise CommitterError.from_exception(e, "AMEND_FAILED", "amend", context="Cannot amend") from e
