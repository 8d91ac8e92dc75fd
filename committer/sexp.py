"""Minimal reader for the parenthesized forms found in package modules.

Only what is needed to locate and compare top-level definitions is supported:
lists, vectors, strings, symbols, reader abbreviations (quote, quasiquote,
unquote, gexp) and comments. Everything else is kept as an opaque atom.
"""

from dataclasses import dataclass
import re
from typing import Union


class SexpSyntaxError(ValueError):
  """Raised when the input is not a well-formed expression."""

  def __init__(self, message: str, position: int):
    self.position = position
    super().__init__(f"{message} at offset {position}")


@dataclass(frozen=True)
class Symbol:
  name: str


@dataclass(frozen=True)
class Atom:
  """Numbers, booleans, keywords, characters and other self-evaluating tokens."""

  text: str


@dataclass(frozen=True)
class Prefixed:
  """A reader abbreviation such as 'x, `x, ,x or #~x."""

  kind: str
  form: "Form"


@dataclass(frozen=True)
class SList:
  items: tuple
  opener: str = "("

  @property
  def head(self) -> str | None:
    """Name of the leading symbol, if the list starts with one."""
    if self.items and isinstance(self.items[0], Symbol):
      return self.items[0].name
    return None


Form = Union[Symbol, Atom, str, Prefixed, SList]

# Longest prefixes first so that ",@" wins over "," and "#$@" over "#$"
_PREFIXES = (
  ("#$@", "ungexp-splicing"),
  ("#$", "ungexp"),
  ("#+", "ungexp-native"),
  ("#~", "gexp"),
  ("#'", "syntax"),
  ("#`", "quasisyntax"),
  ("#,", "unsyntax"),
  (",@", "unquote-splicing"),
  (",", "unquote"),
  ("'", "quote"),
  ("`", "quasiquote"),
)
_PREFIX_BY_KIND = {kind: prefix for prefix, kind in _PREFIXES}

_OPENERS = {"(": ")", "[": "]", "#(": ")"}
_DELIMITERS = set("()[]\";")
_STRING_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "a": "\a", "0": "\0"}
_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?(/\d+)?$")


def _is_delimiter(ch: str) -> bool:
  return ch.isspace() or ch in _DELIMITERS


def skip_atmosphere(text: str, pos: int) -> int:
  """Skip whitespace and comments, returning the offset of the next datum."""
  while pos < len(text):
    ch = text[pos]
    if ch.isspace():
      pos += 1
    elif ch == ";":
      newline = text.find("\n", pos)
      pos = len(text) if newline == -1 else newline + 1
    elif text.startswith("#|", pos):
      end = text.find("|#", pos + 2)
      if end == -1:
        raise SexpSyntaxError("unterminated block comment", pos)
      pos = end + 2
    elif text.startswith("#;", pos):
      _, pos = read_form(text, pos + 2)
    else:
      break
  return pos


def _read_string(text: str, pos: int) -> tuple[str, int]:
  start = pos - 1
  chars = []
  while pos < len(text):
    ch = text[pos]
    if ch == '"':
      return "".join(chars), pos + 1
    if ch == "\\":
      if pos + 1 >= len(text):
        break
      escaped = text[pos + 1]
      if escaped == "\n":
        # Line continuation swallows the leading whitespace of the next line
        pos += 2
        while pos < len(text) and text[pos] in " \t":
          pos += 1
        continue
      chars.append(_STRING_ESCAPES.get(escaped, escaped))
      pos += 2
      continue
    chars.append(ch)
    pos += 1
  raise SexpSyntaxError("unterminated string", start)


def _read_list(text: str, pos: int, opener: str) -> tuple[SList, int]:
  start = pos - len(opener)
  closer = _OPENERS[opener]
  items = []
  while True:
    pos = skip_atmosphere(text, pos)
    if pos >= len(text):
      raise SexpSyntaxError(f"unterminated '{opener}'", start)
    ch = text[pos]
    if ch in ")]":
      if ch != closer:
        raise SexpSyntaxError(f"expected '{closer}' but found '{ch}'", pos)
      return SList(tuple(items), opener), pos + 1
    item, pos = read_form(text, pos)
    items.append(item)


def _read_token(text: str, pos: int) -> tuple[Form, int]:
  start = pos
  if text.startswith("#\\", pos):
    # The first character after #\ is always part of the literal, even "("
    pos += 3
  while pos < len(text) and not _is_delimiter(text[pos]):
    pos += 1
  token = text[start:pos]
  if token.startswith("#") or _NUMBER.match(token):
    return Atom(token), pos
  return Symbol(token), pos


def read_form(text: str, pos: int = 0) -> tuple[Form, int]:
  """Read one datum from text starting at pos.

  Args:
      text: Source text
      pos: Offset to start reading at; leading whitespace and comments are skipped

  Returns:
      Tuple of (form, offset just past the form)

  Raises:
      SexpSyntaxError: If the datum is malformed or the input ends early
  """
  pos = skip_atmosphere(text, pos)
  if pos >= len(text):
    raise SexpSyntaxError("unexpected end of input", pos)

  ch = text[pos]
  if ch in "([":
    return _read_list(text, pos + 1, ch)
  if text.startswith("#(", pos):
    return _read_list(text, pos + 2, "#(")
  if ch in ")]":
    raise SexpSyntaxError(f"unexpected '{ch}'", pos)
  if ch == '"':
    return _read_string(text, pos + 1)

  for prefix, kind in _PREFIXES:
    if text.startswith(prefix, pos):
      form, end = read_form(text, pos + len(prefix))
      return Prefixed(kind, form), end

  return _read_token(text, pos)


def read_all(text: str) -> list[Form]:
  """Read every datum in text."""
  forms = []
  pos = skip_atmosphere(text, 0)
  while pos < len(text):
    form, pos = read_form(text, pos)
    forms.append(form)
    pos = skip_atmosphere(text, pos)
  return forms


def _quote_string(value: str) -> str:
  escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
  return f'"{escaped}"'


def serialize(form: Form) -> str:
  """Render a form on a single line in canonical spacing."""
  match form:
    case str():
      return _quote_string(form)
    case Symbol(name=name):
      return name
    case Atom(text=text):
      return text
    case Prefixed(kind=kind, form=inner):
      return _PREFIX_BY_KIND[kind] + serialize(inner)
    case SList(items=items, opener=opener):
      body = " ".join(serialize(item) for item in items)
      return f"{opener}{body}{_OPENERS[opener]}"
    case _:
      raise TypeError(f"Not a form: {form!r}")
