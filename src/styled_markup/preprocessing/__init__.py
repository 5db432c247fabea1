"""Textual preprocessing passes run before compilation."""

from .preprocess import (
    apply_replacers,
    preprocess,
    remove_undefined_tags,
    strip_comments,
    strip_newlines,
)

__all__ = [
    "apply_replacers",
    "preprocess",
    "remove_undefined_tags",
    "strip_comments",
    "strip_newlines",
]
