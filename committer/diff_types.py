"""Structured data types for the unstaged diff.

unidiff does the parsing; this module keeps only what staging and message
synthesis need from each hunk, in a form that can be replayed with
`git apply --cached --unidiff-zero`.
"""

from dataclasses import dataclass
from typing import Optional

from unidiff import Hunk as UnidiffHunk

DEFINITION_PREFIX = "+(define"
COPYRIGHT_PREFIX = "+;;; Copyright ©"


@dataclass(frozen=True)
class Hunk:
  """One contiguous region of the diff.

  Attributes:
      file_name: Path of the changed file, relative to the repository root
      old_line_number: Start line of the hunk in the committed revision
      new_line_number: Start line of the hunk in the working tree
      diff_lines: Hunk header followed by every marker-prefixed diff line
      definition: Whether an added line starts a new top-level definition
      copyright_line: First added copyright attribution line, if any
  """

  file_name: str
  old_line_number: int
  new_line_number: int
  diff_lines: tuple[str, ...]
  definition: bool = False
  copyright_line: Optional[str] = None

  @classmethod
  def from_unidiff(cls, file_name: str, hunk: UnidiffHunk) -> "Hunk":
    header = (
      f"@@ -{hunk.source_start},{hunk.source_length}"
      f" +{hunk.target_start},{hunk.target_length} @@"
    )
    if hunk.section_header:
      header += f" {hunk.section_header}"
    lines = (header + "\n",) + tuple(str(line) for line in hunk)

    added = [line for line in lines[1:] if line.startswith("+")]
    copyright_line = next(
      (line.rstrip("\n") for line in added if line.startswith(COPYRIGHT_PREFIX)), None
    )
    return cls(
      file_name=file_name,
      old_line_number=hunk.source_start,
      new_line_number=hunk.target_start,
      diff_lines=lines,
      definition=any(line.startswith(DEFINITION_PREFIX) for line in added),
      copyright_line=copyright_line,
    )

  @property
  def body(self) -> tuple[str, ...]:
    return self.diff_lines[1:]

  @property
  def leading_context(self) -> int:
    """Number of unchanged lines before the first added or removed line."""
    count = 0
    for line in self.body:
      if line.startswith(("+", "-")):
        break
      if line.startswith(" "):
        count += 1
    return count

  @property
  def old_change_line(self) -> int:
    return self.old_line_number + self.leading_context

  @property
  def new_change_line(self) -> int:
    return self.new_line_number + self.leading_context

  @property
  def define_line(self) -> Optional[str]:
    return next(
      (line for line in self.body if line.startswith(DEFINITION_PREFIX)), None
    )

  @property
  def definition_line(self) -> Optional[int]:
    """Working-tree line number of the first added (define line."""
    line_no = self.new_line_number
    for line in self.body:
      if line.startswith(DEFINITION_PREFIX):
        return line_no
      if line.startswith(("+", " ")):
        line_no += 1
    return None

  def to_patch(self) -> str:
    """Render the hunk as a standalone patch for git apply."""
    name = self.file_name
    header = f"diff --git a/{name} b/{name}\n--- a/{name}\n+++ b/{name}\n"
    body = "".join(line if line.endswith("\n") else line + "\n" for line in self.diff_lines)
    return header + body
