"""Shared fixtures: a small channel module before and after a change."""

import pytest

from committer.exceptions import CommitterError

MODULE = "nongnu/packages/demo.scm"

OLD_MODULE = r""";;; SPDX-License-Identifier: GPL-3.0-or-later
;;; Copyright © 2023 Alice Example <alice@example.org>

(define-module (nongnu packages demo)
  #:use-module (guix packages))

(define-public foo
  (package
    (name "foo")
    (version "1.0")
    (source #f)
    (inputs (list bar baz))
    (native-inputs (list pkg-config))
    (synopsis "Foo (with parens) \"quoted\"")
    (license #f)))

(define-public qux
  (package
    (name "qux")
    (version "2.0")
    (source #f)
    (inputs
     `(("zlib" ,zlib)
       ("openssl" ,openssl)))
    (synopsis "Qux")
    (license #f)))
"""

NEW_MODULE = r""";;; SPDX-License-Identifier: GPL-3.0-or-later
;;; Copyright © 2023 Alice Example <alice@example.org>
;;; Copyright © 2024 Bob Example <bob@example.org>

(define-module (nongnu packages demo)
  #:use-module (guix packages))

(define-public foo
  (package
    (name "foo")
    (version "1.1")
    (source #f)
    (inputs (list bar quux))
    (native-inputs (list pkg-config))
    (synopsis "Foo (with parens) \"quoted\"")
    (license #f)))

(define-public qux
  (package
    (name "qux")
    (version "2.0")
    (source #f)
    (inputs
     `(("zlib" ,zlib)
       ("openssl" ,openssl)))
    (synopsis "Qux")
    (license #f)))

(define-public corge
  (package
    (name "corge")
    (version "0.3")
    (source #f)
    (synopsis "Corge")
    (license #f)))
"""

FILE_HEADER = f"""diff --git a/{MODULE} b/{MODULE}
index 1111111..2222222 100644
--- a/{MODULE}
+++ b/{MODULE}
"""

COPYRIGHT_HUNK = """@@ -2,1 +2,2 @@
 ;;; Copyright © 2023 Alice Example <alice@example.org>
+;;; Copyright © 2024 Bob Example <bob@example.org>
"""

FOO_HUNK = """@@ -9,5 +10,5 @@
     (name "foo")
-    (version "1.0")
+    (version "1.1")
     (source #f)
-    (inputs (list bar baz))
+    (inputs (list bar quux))
     (native-inputs (list pkg-config))
"""

CORGE_HUNK = """@@ -26,1 +27,9 @@
     (license #f)))
+
+(define-public corge
+  (package
+    (name "corge")
+    (version "0.3")
+    (source #f)
+    (synopsis "Corge")
+    (license #f)))
"""

# Everything pending before the first commit
FULL_DIFF = FILE_HEADER + COPYRIGHT_HUNK + FOO_HUNK + CORGE_HUNK
# What is left once the new definition has been committed
REMAINING_DIFF = FILE_HEADER + COPYRIGHT_HUNK + FOO_HUNK


class FakeRepository:
  """Stands in for GitRepository and records every git invocation."""

  def __init__(
    self,
    diffs,
    working=None,
    committed=None,
    fail_apply_at=None,
    fail_commit_at=None,
    fail_amend=False,
  ):
    """Failures are 1-based: fail_apply_at=2 rejects the second patch."""
    self.diffs = list(diffs)
    self.working = working or {MODULE: NEW_MODULE}
    self.committed = committed or {MODULE: OLD_MODULE}
    self.fail_apply_at = fail_apply_at
    self.fail_commit_at = fail_commit_at
    self.fail_amend = fail_amend
    self.calls = []

  def diff_text(self):
    self.calls.append(("diff",))
    return self.diffs.pop(0) if self.diffs else ""

  def working_text(self, file_name):
    return self.working[file_name]

  def committed_text(self, file_name):
    return self.committed[file_name]

  def apply_cached(self, patch):
    self.calls.append(("apply", patch))
    if self.fail_apply_at is not None and len(self.applied) == self.fail_apply_at:
      raise CommitterError(
        description="Cannot apply: patch does not apply",
        name="APPLY_FAILED",
        stage="apply",
      )

  def commit(self, message):
    self.calls.append(("commit", message))
    if self.fail_commit_at is not None and len(self.messages) == self.fail_commit_at:
      raise CommitterError(
        description="Cannot commit: unable to auto-detect email address",
        name="COMMIT_FAILED",
        stage="commit",
      )

  def amend(self):
    self.calls.append(("amend",))
    if self.fail_amend:
      raise CommitterError(
        description="Cannot amend: no previous commit",
        name="AMEND_FAILED",
        stage="amend",
      )

  @property
  def applied(self):
    return [call[1] for call in self.calls if call[0] == "apply"]

  @property
  def messages(self):
    return [call[1] for call in self.calls if call[0] == "commit"]


@pytest.fixture
def old_module():
  return OLD_MODULE


@pytest.fixture
def new_module():
  return NEW_MODULE


@pytest.fixture
def make_repository():
  """Factory for FakeRepository instances."""
  return FakeRepository


@pytest.fixture
def module_name():
  return MODULE


@pytest.fixture
def full_diff():
  return FULL_DIFF


@pytest.fixture
def remaining_diff():
  return REMAINING_DIFF


@pytest.fixture
def foo_diff():
  """Only the change to foo."""
  return FILE_HEADER + FOO_HUNK


@pytest.fixture
def corge_diff():
  """Only the new corge definition."""
  return FILE_HEADER + CORGE_HUNK
