"""Top-level definitions and the fields inspected when describing a change.

A definition is the top-level form enclosing a changed line. Only a handful
of its fields matter for commit messages: the defined name, the version and
the input lists. Input lists are modelled explicitly so that a missing field
is distinguishable from an empty one.
"""

import bisect
from dataclasses import dataclass, field
from functools import cached_property
from typing import Iterator, Optional, Union

from committer.sexp import Atom, Form, Prefixed, SList, Symbol, read_form, serialize


@dataclass(frozen=True)
class Absent:
  """The field does not appear in the definition."""


@dataclass(frozen=True)
class InputList:
  """A list of inputs written as (list a b) or `(("a" ,a) ("b" ,b))."""

  items: tuple[str, ...]


@dataclass(frozen=True)
class Opaque:
  """A field value of any other shape, e.g. (modify-inputs ...)."""

  text: str


ABSENT = Absent()

FieldValue = Union[Absent, InputList, Opaque]


def _walk(form: Form) -> Iterator[SList]:
  """Depth-first iteration over every list nested in form, form included."""
  match form:
    case SList(items=items):
      yield form
      for item in items:
        yield from _walk(item)
    case Prefixed(form=inner):
      yield from _walk(inner)


def _input_name(item: Form) -> str:
  match item:
    case Symbol(name=name):
      return name
    case Prefixed(kind="unquote", form=Symbol(name=name)):
      return name
    # Legacy labelled input: ("label" ,package ["output"])
    case SList(items=(str(), Prefixed(kind="unquote", form=Symbol(name=name)))):
      return name
    case SList(
      items=(str(), Prefixed(kind="unquote", form=Symbol(name=name)), str() as output)
    ):
      return f"{name}:{output}"
    # Package with an output: `(,package "output")
    case Prefixed(
      kind="quasiquote",
      form=SList(items=(Prefixed(kind="unquote", form=Symbol(name=name)), str() as output)),
    ):
      return f"{name}:{output}"
    case _:
      return serialize(item)


def field_value(expr: Form) -> FieldValue:
  """Classify the value expression of an input field."""
  match expr:
    case SList(items=(Symbol(name="list"), *items)):
      return InputList(tuple(_input_name(item) for item in items))
    case Prefixed(kind="quasiquote" | "quote", form=SList(items=items)):
      return InputList(tuple(_input_name(item) for item in items))
    case _:
      return Opaque(serialize(expr))


def _first_string(form: Form) -> Optional[str]:
  match form:
    case str():
      return form
    case SList(items=items):
      for item in items:
        found = _first_string(item)
        if found is not None:
          return found
  return None


@dataclass(frozen=True)
class Definition:
  """A top-level form together with the line it starts on."""

  form: SList
  line: int = field(default=0, compare=False)

  @cached_property
  def serialized(self) -> str:
    return serialize(self.form)

  @property
  def kind(self) -> Optional[str]:
    return self.form.head

  @property
  def name(self) -> Optional[str]:
    """The defined variable, e.g. foo for (define-public foo ...) or (define (foo x) ...)."""
    match self.form.items:
      case (Symbol(name="define-module"), module, *_):
        return serialize(module)
      case (_, Symbol(name=name), *_):
        return name
      case (_, SList(items=(Symbol(name=name), *_)), *_):
        return name
      case (_, other, *_):
        return serialize(other)
      case _:
        return None

  def find_field(self, name: str) -> Optional[Form]:
    """Return the value of the first (name value) list anywhere in the form."""
    for candidate in _walk(self.form):
      if candidate.head == name and len(candidate.items) == 2:
        return candidate.items[1]
    return None

  @property
  def version(self) -> Optional[str]:
    value = self.find_field("version")
    match value:
      case None:
        return None
      case str():
        return value
      case Symbol(name=name) | Atom(text=name):
        return name
      case _:
        # (version (git-version "1.0" revision commit)) and similar
        return _first_string(value) or serialize(value)

  def get_field(self, name: str) -> FieldValue:
    value = self.find_field(name)
    if value is None:
      return ABSENT
    return field_value(value)


def surrounding_definition(text: str, line_no: int) -> Optional[Definition]:
  """Return the top-level definition enclosing line line_no (1-based) of text.

  Lines are scanned from the top. A line starting with "(" at column zero
  starts a top-level form, which is read in full so that its remaining lines
  are skipped. The last form starting at or above line_no wins.

  Args:
      text: Full file contents
      line_no: 1-based line number of the change

  Returns:
      The enclosing Definition, or None if no form starts at or above line_no

  Raises:
      SexpSyntaxError: If a top-level form is malformed
  """
  # Only "\n" ends a line; page breaks (^L) are common in package modules
  lines = text.split("\n")
  if lines and lines[-1] == "":
    lines.pop()
  starts = []
  offset = 0
  for line in lines:
    starts.append(offset)
    offset += len(line) + 1

  candidate = None
  current = 1
  while current <= line_no and current <= len(lines):
    if lines[current - 1].startswith("("):
      form, end = read_form(text, starts[current - 1])
      candidate = Definition(form=form, line=current)
      # Continue after the line holding the closing paren
      current = bisect.bisect_right(starts, end - 1) + 1
    else:
      current += 1
  return candidate
