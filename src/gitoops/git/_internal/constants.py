"""Internal git command-line constants - keeps trivia out of public modules."""

from __future__ import annotations

# Porcelain v1 status columns
STATUS_UNMODIFIED = " "
STATUS_UNTRACKED = "?"
STATUS_IGNORED = "!"
STATUS_RENAMED = "R"
STATUS_COPIED = "C"

BRANCH_HEADER_PREFIX = "## "
UNBORN_HEADER_PREFIXES = ("No commits yet on ", "Initial commit on ")
DETACHED_HEADER = "HEAD (no branch)"

# Log output: unit separator between fields, one commit per line
LOG_FIELD_SEP = "\x1f"
LOG_FORMAT = "--pretty=format:%H%x1f%s%x1f%an%x1f%aI"

# Ref namespaces
REFS_HEADS = "refs/heads/"
REFS_REMOTES = "refs/remotes/"
REF_STASH = "refs/stash"
