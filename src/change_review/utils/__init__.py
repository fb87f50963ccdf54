"""Utilities for the change-review engine."""

from change_review.utils.diff_engine import (
    apply_modification,
    apply_modifications,
    compute_diff,
    diff_to_modifications,
    generate_unified_diff,
    make_file_modification,
)

__all__ = [
    "apply_modification",
    "apply_modifications",
    "compute_diff",
    "diff_to_modifications",
    "generate_unified_diff",
    "make_file_modification",
]
