"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
They are safety limits and naming contracts users build recovery habits on.

For configurable values, see models.py (GitConfig, WorkflowDefaults, etc.).
"""

# =============================================================================
# Safety Limits
# =============================================================================

UNDO_MAX_COMMITS = 10
"""Hard ceiling for undo. Larger rewrites should be done by hand."""

UNDO_MIN_COMMITS = 1

# =============================================================================
# Naming Contracts
# =============================================================================

MARKER_PREFIX = "oops"
"""Recovery markers are tags named oops/<operation>-<qualifier>-<ts>-<suffix>."""

MARKER_SUFFIX_LENGTH = 6

MARKER_SUFFIX_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"

POCKET_NAMESPACE = "refs/pocket/"
"""Hidden refs outside refs/heads and refs/tags, keyed by branch name."""

ROOT_GROUP = "_root_"
"""Group key for staged files that live at the repository root."""

ROOT_GROUP_LABEL = "root"

# =============================================================================
# Display Limits
# =============================================================================

PLAN_FILES_SHOWN = 5
"""Files listed per group/category before collapsing into '... and N more'."""

SUMMARY_FILES_SHOWN = 10

SUBJECT_DISPLAY_MAX = 60
