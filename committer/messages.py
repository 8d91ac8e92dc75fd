"""ChangeLog-style commit messages.

Messages follow the channel convention:

    nongnu: foo: Update to 1.2.

    * nongnu/packages/foo.scm (foo): Update to 1.2.
    [inputs]: Remove bar; add baz.
"""

from dataclasses import dataclass
import re
import textwrap
from typing import Iterable, Optional, Sequence

from committer.definitions import Definition, FieldValue, InputList, Opaque

DEFAULT_WIDTH = 70
DEFAULT_FIELDS = ("inputs", "propagated-inputs", "native-inputs")

# A changelog that already names a location, e.g. "[inputs]: Add foo"
LOCATION_PATTERN = re.compile(r"^\S+:[ \t]")
COPYRIGHT_PATTERN = re.compile(r"^\+;;; Copyright ©[\d\s,\-–]+\s(\S.*?)\s*$")


@dataclass(frozen=True)
class CommitMessage:
  summary: str
  body: str

  def __str__(self) -> str:
    return f"{self.summary}\n\n{self.body}\n"


def wrap_text(text: str, width: int = DEFAULT_WIDTH) -> str:
  """Greedy word wrap that never splits a word.

  A word longer than width ends up alone on its own, overlong line.
  """
  return "\n".join(
    textwrap.wrap(
      text,
      width=width,
      break_long_words=False,
      break_on_hyphens=False,
    )
  )


def listify(items: Sequence[str]) -> str:
  """Join items as English prose: "a", "a and b", "a, b, and c"."""
  match items:
    case []:
      return ""
    case [one]:
      return one
    case [one, two]:
      return f"{one} and {two}"
    case [*rest, last]:
      return f"{', '.join(rest)}, and {last}"


def _items(value: FieldValue) -> list[str]:
  match value:
    case InputList(items=items):
      return list(items)
    case _:
      return []


def _difference(left: Iterable[str], right: Iterable[str]) -> list[str]:
  right = set(right)
  return [item for item in dict.fromkeys(left) if item not in right]


def field_clause(old: FieldValue, new: FieldValue) -> Optional[str]:
  """Describe how a list-valued field changed, or None if it did not.

  Args:
      old: Field value before the change
      new: Field value after the change

  Returns:
      "Add a.", "Remove a and b." or "Remove a; add b."; None when the
      entries are the same, even if reordered
  """
  if old == new:
    return None
  if isinstance(old, Opaque) or isinstance(new, Opaque):
    return "Update."

  old_items, new_items = _items(old), _items(new)
  removed = _difference(old_items, new_items)
  added = _difference(new_items, old_items)

  if removed and added:
    return f"Remove {listify(removed)}; add {listify(added)}."
  if removed:
    return f"Remove {listify(removed)}."
  if added:
    return f"Add {listify(added)}."
  return None


def add_commit_message(
  file_name: str,
  variable_name: str,
  version: Optional[str],
  channel: str = "nongnu",
  width: int = DEFAULT_WIDTH,
) -> CommitMessage:
  """Message for a hunk introducing a new definition."""
  if version:
    summary = f"{channel}: {variable_name}: Update to {version}."
    entry = f"* {file_name} ({variable_name}): Update to {version}."
  else:
    summary = f"{channel}: Add {variable_name}."
    entry = f"* {file_name} ({variable_name}): New variable."
  return CommitMessage(summary=summary, body=wrap_text(entry, width))


def change_commit_message(
  file_name: str,
  old: Optional[Definition],
  new: Definition,
  channel: str = "nongnu",
  fields: Sequence[str] = DEFAULT_FIELDS,
  width: int = DEFAULT_WIDTH,
) -> CommitMessage:
  """Message for changes to an existing definition.

  The summary names the new version; the body lists, per tracked field,
  which entries were removed and added between old and new.
  """
  name = new.name or (old.name if old else None)
  version = new.version
  if version:
    summary = f"{channel}: {name}: Update to {version}."
    entries = [f"* {file_name} ({name}): Update to {version}."]
  else:
    summary = f"{channel}: {name}: Update."
    entries = [f"* {file_name} ({name}): Update."]

  if old is not None:
    for field in fields:
      clause = field_clause(old.get_field(field), new.get_field(field))
      if clause:
        entries.append(f"[{field}]: {clause}")

  body = "\n".join(wrap_text(entry, width) for entry in entries)
  return CommitMessage(summary=summary, body=body)


def _trim(text: str) -> str:
  return text.strip().rstrip(".").rstrip()


def custom_commit_message(
  file_name: str,
  variable_name: str,
  message: str,
  changelog: Optional[str] = None,
  channel: str = "nongnu",
  width: int = DEFAULT_WIDTH,
) -> CommitMessage:
  """Message built from a summary and optional changelog given by the user.

  The changelog defaults to the summary. When it already starts with a
  location such as "[inputs]: ", it is attached directly to the entry.
  """
  message = _trim(message)
  changelog = _trim(changelog) if changelog else message

  summary = f"{channel}: {variable_name}: {message}."
  if LOCATION_PATTERN.match(changelog):
    entry = f"* {file_name} ({variable_name}){changelog}."
  else:
    entry = f"* {file_name} ({variable_name}): {changelog}."
  return CommitMessage(summary=summary, body=wrap_text(entry, width))


def define_name(define_line: str) -> Optional[str]:
  """Name defined by an added "+(define-public foo" line."""
  tokens = define_line[1:].split()
  if len(tokens) < 2:
    return None
  return tokens[1].strip("()") or None


def copyright_author(line: str) -> Optional[str]:
  """Author named by an added copyright line, e.g. "Jane Doe <jane@example.org>"."""
  match = COPYRIGHT_PATTERN.match(line.rstrip("\n"))
  return match.group(1) if match else None
