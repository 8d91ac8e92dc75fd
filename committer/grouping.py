"""Group hunks by the top-level definition they change.

Each hunk is resolved to its enclosing definition in the working tree.
Consecutive hunks resolving to the same definition form one group, which is
later staged and committed as a unit.
"""

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Literal, Optional

from committer.definitions import Definition, surrounding_definition
from committer.diff_types import Hunk
from committer.exceptions import CommitterError, DefinitionNotFoundError
from committer.sexp import SexpSyntaxError

if TYPE_CHECKING:
  from committer.git_repository import GitRepository

logger = logging.getLogger(__name__)

GroupKind = Literal["addition", "copyright", "modification"]


class FileTexts:
  """File contents read once per plan, from the working tree and from HEAD."""

  def __init__(self, repository: "GitRepository"):
    self.repository = repository
    self._working: dict[str, str] = {}
    self._committed: dict[str, str] = {}

  def working(self, file_name: str) -> str:
    if file_name not in self._working:
      self._working[file_name] = self.repository.working_text(file_name)
    return self._working[file_name]

  def committed(self, file_name: str) -> str:
    if file_name not in self._committed:
      self._committed[file_name] = self.repository.committed_text(file_name)
    return self._committed[file_name]


@dataclass
class HunkGroup:
  """Hunks sharing one post-change definition, in diff order.

  Attributes:
      new: Definition in the working tree; None for copyright-only groups
      hunks: Hunks to stage, in the order they appear in the diff
      old: Definition as of HEAD, filled in for modifications
  """

  new: Optional[Definition]
  hunks: list[Hunk] = field(default_factory=list)
  old: Optional[Definition] = None

  @property
  def file_name(self) -> str:
    return self.hunks[0].file_name

  @property
  def key(self) -> str:
    if self.new is None:
      return f"copyright:{self.file_name}"
    return self.new.serialized

  @property
  def kind(self) -> GroupKind:
    if any(hunk.definition for hunk in self.hunks):
      return "addition"
    if self.copyright_line is not None:
      return "copyright"
    return "modification"

  @property
  def copyright_line(self) -> Optional[str]:
    return next(
      (hunk.copyright_line for hunk in self.hunks if hunk.copyright_line), None
    )


def lookup_definition(text: str, file_name: str, line_no: int, revision: str) -> Definition:
  """Enclosing definition of line_no, failing loudly when there is none."""
  try:
    definition = surrounding_definition(text, line_no)
  except SexpSyntaxError as e:
    raise CommitterError.from_exception(
      e, "PARSE_FAILED", "lookup", context=f"Cannot read {file_name} ({revision})"
    ) from e
  if definition is None:
    raise DefinitionNotFoundError(file_name, line_no, revision)
  return definition


def resolve_new(hunk: Hunk, texts: FileTexts) -> Optional[Definition]:
  """Working-tree definition a hunk belongs to.

  Hunks adding a definition resolve to the added form itself. Copyright
  hunks sit above every definition and resolve to None.
  """
  if hunk.definition:
    line_no = hunk.definition_line
  elif hunk.copyright_line is not None:
    return None
  else:
    line_no = hunk.new_change_line
  return lookup_definition(texts.working(hunk.file_name), hunk.file_name, line_no, "working tree")


def group_hunks(hunks: list[Hunk], texts: FileTexts) -> list[HunkGroup]:
  """Merge consecutive hunks resolving to the same definition."""
  groups: list[HunkGroup] = []
  for hunk in hunks:
    group = HunkGroup(new=resolve_new(hunk, texts), hunks=[hunk])
    if groups and groups[-1].key == group.key:
      groups[-1].hunks.append(hunk)
    else:
      groups.append(group)
  return groups


def plan(hunks: list[Hunk], texts: FileTexts) -> list[HunkGroup]:
  """Group hunks and pair each modification with its definition at HEAD.

  Raises:
      DefinitionNotFoundError: If a modified line has no enclosing definition
      CommitterError: If a file cannot be read or parsed
  """
  groups = group_hunks(hunks, texts)
  for group in groups:
    if group.kind != "modification":
      continue
    first = group.hunks[0]
    group.old = lookup_definition(
      texts.committed(first.file_name), first.file_name, first.old_change_line, "HEAD"
    )
  logger.debug(f"Planned {len(groups)} groups from {len(hunks)} hunks")
  return groups
