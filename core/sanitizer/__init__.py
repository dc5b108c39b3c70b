"""
Sanitizer - late-stage cleanup of formatted output.
"""

from .html_normalizer import (
    HTMLNormalizer,
    SanitizationIssue,
    ValidationReport,
    split_markup,
)

__all__ = [
    "HTMLNormalizer",
    "SanitizationIssue",
    "ValidationReport",
    "split_markup",
]
