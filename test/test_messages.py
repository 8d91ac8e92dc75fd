"""Tests for commit message synthesis"""

import pytest

from committer.definitions import ABSENT, InputList, Opaque, surrounding_definition
from committer.messages import (
  add_commit_message,
  change_commit_message,
  copyright_author,
  custom_commit_message,
  define_name,
  field_clause,
  listify,
  wrap_text,
)

MODULE = "nongnu/packages/demo.scm"


class TestListify:
  """Tests for listify"""

  @pytest.mark.parametrize(
    "items,expected",
    [
      (["a"], "a"),
      (["a", "b"], "a and b"),
      (["a", "b", "c"], "a, b, and c"),
      (["a", "b", "c", "d"], "a, b, c, and d"),
    ],
  )
  def test_listify(self, items, expected):
    assert listify(items) == expected


class TestFieldClause:
  """Tests for field_clause"""

  def test_addition(self):
    assert field_clause(InputList(("x", "y")), InputList(("x", "y", "z"))) == "Add z."

  def test_removal(self):
    assert field_clause(InputList(("x", "y", "z")), InputList(("x",))) == "Remove y and z."

  def test_removal_and_addition(self):
    assert (
      field_clause(InputList(("a", "b", "c")), InputList(("b", "d")))
      == "Remove a and c; add d."
    )

  def test_reverse_direction_swaps_clauses(self):
    assert (
      field_clause(InputList(("b", "d")), InputList(("a", "b", "c")))
      == "Remove d; add a and c."
    )

  def test_unchanged_or_reordered(self):
    assert field_clause(InputList(("a", "b")), InputList(("a", "b"))) is None
    assert field_clause(InputList(("a", "b")), InputList(("b", "a"))) is None

  def test_absent_field(self):
    assert field_clause(ABSENT, InputList(("a",))) == "Add a."
    assert field_clause(InputList(("a", "b")), ABSENT) == "Remove a and b."
    assert field_clause(ABSENT, ABSENT) is None

  def test_opaque_values(self):
    assert field_clause(Opaque("(f a)"), Opaque("(f b)")) == "Update."
    assert field_clause(Opaque("(f a)"), Opaque("(f a)")) is None


class TestWrapText:
  """Tests for wrap_text"""

  def test_lines_fit_width(self):
    text = " ".join(f"word{i}" for i in range(40))
    lines = wrap_text(text, 30).split("\n")

    assert len(lines) > 1
    assert all(len(line) <= 30 for line in lines)
    assert " ".join(lines).split() == text.split()

  def test_long_word_is_not_split(self):
    long_word = "x" * 80
    lines = wrap_text(f"short {long_word} tail", 20).split("\n")
    assert lines == ["short", long_word, "tail"]

  def test_short_text_unchanged(self):
    assert wrap_text("Add foo.", 70) == "Add foo."


class TestAddCommitMessage:
  """Tests for messages of new definitions"""

  def test_with_version(self):
    message = add_commit_message(MODULE, "foo", "1.2")
    assert str(message) == (
      "nongnu: foo: Update to 1.2.\n\n"
      "* nongnu/packages/demo.scm (foo): Update to 1.2.\n"
    )

  def test_without_version(self):
    message = add_commit_message(MODULE, "%foo-rules", None, channel="myguix")
    assert message.summary == "myguix: Add %foo-rules."
    assert message.body == "* nongnu/packages/demo.scm (%foo-rules): New variable."


class TestChangeCommitMessage:
  """Tests for messages of modified definitions"""

  def test_version_and_inputs(self, old_module, new_module):
    old = surrounding_definition(old_module, 10)
    new = surrounding_definition(new_module, 11)

    assert str(change_commit_message(MODULE, old, new)) == (
      "nongnu: foo: Update to 1.1.\n\n"
      "* nongnu/packages/demo.scm (foo): Update to 1.1.\n"
      "[inputs]: Remove baz; add quux.\n"
    )

  def test_only_tracked_fields_are_described(self, old_module, new_module):
    old = surrounding_definition(old_module, 10)
    new = surrounding_definition(new_module, 11)

    message = change_commit_message(MODULE, old, new, fields=("native-inputs",))
    assert message.body == "* nongnu/packages/demo.scm (foo): Update to 1.1."

  def test_long_clauses_are_wrapped(self):
    old = surrounding_definition("(define-public foo (package (version \"1\") (inputs (list))))", 1)
    new = surrounding_definition(
      "(define-public foo (package (version \"2\") (inputs (list "
      + " ".join(f"dependency-{i}" for i in range(12))
      + "))))",
      1,
    )

    message = change_commit_message(MODULE, old, new, width=50)
    lines = message.body.split("\n")

    assert lines[1].startswith("[inputs]: Add dependency-0,")
    assert len(lines) > 3
    assert all(len(line) <= 50 for line in lines)

  def test_without_version(self):
    old = surrounding_definition("(define %rules (list a))", 1)
    new = surrounding_definition("(define %rules (list a b))", 1)
    assert change_commit_message(MODULE, old, new).summary == "nongnu: %rules: Update."


class TestCustomCommitMessage:
  """Tests for messages given on the command line"""

  def test_message_reused_as_changelog(self):
    message = custom_commit_message(MODULE, "foo", "  Fix build.  ")
    assert str(message) == (
      "nongnu: foo: Fix build.\n\n"
      "* nongnu/packages/demo.scm (foo): Fix build.\n"
    )

  def test_changelog_with_location(self):
    message = custom_commit_message(
      MODULE, "foo", "Fix build", "[arguments]: Skip tests.."
    )
    assert message.body == "* nongnu/packages/demo.scm (foo)[arguments]: Skip tests."

  def test_changelog_without_location(self):
    message = custom_commit_message(MODULE, "foo", "Fix build", "Use new URL.")
    assert message.body == "* nongnu/packages/demo.scm (foo): Use new URL."


class TestLineHelpers:
  """Tests for define_name and copyright_author"""

  @pytest.mark.parametrize(
    "line,expected",
    [
      ("+(define-public corge\n", "corge"),
      ("+(define (helper x)\n", "helper"),
      ("+(define\n", None),
    ],
  )
  def test_define_name(self, line, expected):
    assert define_name(line) == expected

  @pytest.mark.parametrize(
    "line,expected",
    [
      (
        "+;;; Copyright © 2024 Bob Example <bob@example.org>",
        "Bob Example <bob@example.org>",
      ),
      (
        "+;;; Copyright © 2019, 2021–2023 Jane Doe <jane@example.org>\n",
        "Jane Doe <jane@example.org>",
      ),
      ("+;;; Copyright 2024 Bob", None),
    ],
  )
  def test_copyright_author(self, line, expected):
    assert copyright_author(line) == expected
