#!/usr/bin/env python3
"""Command-line entry point.

Run from a channel checkout with unstaged changes:

    nonguix-committer                      # derive every message
    nonguix-committer "Update to 2.0"      # same summary for every change
    nonguix-committer "Fix build" "[arguments]: Skip failing test"
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from committer.committer import CommitOverride, Committer
from committer.config import load_config
from committer.exceptions import CommitterError
from committer.git_repository import GitRepository

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)

parser = argparse.ArgumentParser(
  prog="nonguix-committer",
  description="Commit unstaged package changes, one top-level definition per commit",
)
parser.add_argument(
  "message",
  nargs="?",
  help="Summary used for every commit instead of the derived one",
)
parser.add_argument(
  "changelog",
  nargs="?",
  help="ChangeLog entry used with MESSAGE (default: MESSAGE itself)",
)


def main(argv: Optional[Sequence[str]] = None) -> int:
  """Parse arguments, commit every change and report failures."""
  argv = list(sys.argv[1:] if argv is None else argv)
  # Messages are free-form, so "-fPIC" is a message and not an option
  if argv[:1] not in (["-h"], ["--help"], ["--"]):
    argv = ["--", *argv]
  args = parser.parse_args(argv)
  logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

  override = CommitOverride(args.message, args.changelog) if args.message else None

  try:
    config = load_config()
    logging.getLogger().setLevel(config.log_level)

    repository = GitRepository(config.repo_path, config.subtree, config.context_lines)
    committed = Committer(repository, config, override).run()
  except CommitterError as e:
    logger.error(f"{e.name}: {e.description}")
    if e.caused_by:
      logger.debug(f"Caused by {e.caused_by}")
    return 1

  if committed:
    logger.info(f"Created {len(committed)} commit(s)")
  return 0


if __name__ == "__main__":
  sys.exit(main())
