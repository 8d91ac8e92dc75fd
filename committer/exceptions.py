"""
Custom exceptions for the committer
"""

from typing import Literal, Optional


# Every place a run can fail
ErrorStage = Literal[
  "diff",  # Reading or parsing the unstaged diff
  "show",  # Reading a file at HEAD
  "apply",  # Staging a hunk with git apply --cached
  "commit",  # Creating a commit
  "amend",  # Amending the previous commit
  "lookup",  # Locating the enclosing definition of a hunk
  "config",  # Loading settings
]


class CommitterError(Exception):
  """
  Fatal error raised while turning a diff into commits.
  All failures surface as this type so the entry point can report them uniformly.
  """

  def __init__(
    self,
    description: str,
    name: str,
    stage: ErrorStage,
    caused_by: Optional[str] = None,
  ):
    """
    Initialize a committer error

    Args:
        description: Human-readable error message
        name: Unique error identifier (e.g., "APPLY_FAILED")
        stage: Which step of the run failed
        caused_by: Original error details if this wraps another error
    """
    self.description: str = description
    self.name: str = name
    self.stage: ErrorStage = stage
    self.caused_by: Optional[str] = caused_by
    super().__init__(description)

  @classmethod
  def from_exception(
    cls,
    e: Exception,
    name: str,
    stage: ErrorStage,
    context: Optional[str] = None,
  ) -> "CommitterError":
    """
    Create a CommitterError from an existing exception

    Args:
        e: The original exception
        name: Error identifier for this error
        stage: Where this error originated
        context: Additional context to prepend to the description

    Returns:
        CommitterError with original exception details preserved
    """
    original_msg = str(e).strip()
    description = f"{context}: {original_msg}" if context else original_msg

    return cls(
      description=description,
      name=name,
      stage=stage,
      caused_by=f"{e.__class__.__name__}: {original_msg}",
    )


class DefinitionNotFoundError(CommitterError):
  """No top-level definition encloses a changed line."""

  def __init__(self, file_name: str, line_no: int, revision: str):
    self.file_name = file_name
    self.line_no = line_no
    self.revision = revision
    super().__init__(
      description=(
        f"No top-level definition encloses line {line_no} of {file_name} ({revision})"
      ),
      name="DEFINITION_NOT_FOUND",
      stage="lookup",
    )
