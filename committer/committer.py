"""Stage and commit the unstaged diff one definition at a time."""

from dataclasses import dataclass
import logging
import time
from typing import Callable, Optional

from committer.config import CommitterConfig
from committer.diff_parser import diff_info
from committer.exceptions import CommitterError
from committer.git_repository import GitRepository
from committer.grouping import FileTexts, HunkGroup, plan
from committer.messages import (
  CommitMessage,
  add_commit_message,
  change_commit_message,
  copyright_author,
  custom_commit_message,
  define_name,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitOverride:
  """Summary and optional changelog given on the command line."""

  message: str
  changelog: Optional[str] = None


class Committer:
  """Turns the unstaged diff of the channel into one commit per definition.

  New definitions are committed first. Each commit shifts the line numbers
  of the hunks still pending, so the diff is read and grouped again from
  scratch before the remaining modifications are committed.

  Any failing git invocation aborts the run; the index is left as is.
  """

  def __init__(
    self,
    repository: GitRepository,
    config: CommitterConfig,
    override: Optional[CommitOverride] = None,
    printer: Callable[[str], None] = print,
    sleep: Callable[[float], None] = time.sleep,
  ):
    self.repository = repository
    self.config = config
    self.override = override
    self.printer = printer
    self.sleep = sleep

  def _plan(self) -> list[HunkGroup]:
    return plan(diff_info(self.repository), FileTexts(self.repository))

  def run(self) -> list[str]:
    """Commit every pending change.

    Returns:
        Summaries of the commits created, in order

    Raises:
        CommitterError: If staging, committing or definition lookup fails
    """
    hunks = diff_info(self.repository)
    if not hunks:
      logger.warning("Nothing to be done.")
      return []

    committed = []
    groups = plan(hunks, FileTexts(self.repository))
    for group in groups:
      if group.kind == "addition":
        committed.append(self._commit_addition(group))

    for group in self._plan():
      match group.kind:
        case "copyright":
          self._amend_copyright(group)
        case "modification":
          committed.append(self._commit_change(group))
        case _:
          logger.warning(f"Leaving new definition in {group.file_name} uncommitted")

    return committed

  def _stage(self, group: HunkGroup) -> None:
    for hunk in group.hunks:
      self.repository.apply_cached(hunk.to_patch())
      self.sleep(self.config.delay_seconds)

  def _commit(self, message: CommitMessage) -> str:
    text = str(message)
    self.printer(text)
    self.repository.commit(text)
    self.sleep(self.config.delay_seconds)
    return message.summary

  def _message_for(self, group: HunkGroup, name: str) -> Optional[CommitMessage]:
    if self.override is None:
      return None
    return custom_commit_message(
      group.file_name,
      name,
      self.override.message,
      self.override.changelog,
      channel=self.config.channel,
      width=self.config.wrap_width,
    )

  def _commit_addition(self, group: HunkGroup) -> str:
    define_line = next(hunk.define_line for hunk in group.hunks if hunk.definition)
    name = define_name(define_line) or group.new.name
    if name is None:
      raise CommitterError(
        description=f"Cannot tell which variable {define_line.strip()!r} defines",
        name="NAME_NOT_FOUND",
        stage="lookup",
      )
    logger.info(f"Committing new definition {name} in {group.file_name}")

    self._stage(group)
    message = self._message_for(group, name) or add_commit_message(
      group.file_name,
      name,
      group.new.version,
      channel=self.config.channel,
      width=self.config.wrap_width,
    )
    return self._commit(message)

  def _commit_change(self, group: HunkGroup) -> str:
    name = group.new.name
    logger.info(
      f"Committing {len(group.hunks)} hunk(s) changing {name} in {group.file_name}"
    )

    self._stage(group)
    message = self._message_for(group, name) or change_commit_message(
      group.file_name,
      group.old,
      group.new,
      channel=self.config.channel,
      fields=self.config.tracked_fields,
      width=self.config.wrap_width,
    )
    return self._commit(message)

  def _amend_copyright(self, group: HunkGroup) -> None:
    line = group.copyright_line
    author = copyright_author(line) or line
    logger.info(f"Amend and add copyright line for {author}")

    self._stage(group)
    self.repository.amend()
    self.sleep(self.config.delay_seconds)
