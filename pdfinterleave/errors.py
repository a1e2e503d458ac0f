"""Failure modes of an interleave run."""
from __future__ import annotations


class InterleaveError(Exception):
    """Base class; the CLI reports these and exits 1."""


class DuplicateInputError(InterleaveError):
    pass


class MissingCapabilityError(InterleaveError):
    pass


class OutputExistsError(InterleaveError):
    def __init__(self, path):
        super().__init__(f"Output file {path} already exists")
        self.path = path


class SplitFailureError(InterleaveError):
    pass


class MergeFailureError(InterleaveError):
    pass


class PageCountMismatchError(InterleaveError):
    def __init__(self, odd_count: int, even_count: int):
        super().__init__(
            f"Odd pages file has {odd_count} page(s) but even pages file has {even_count}"
        )
        self.odd_count = odd_count
        self.even_count = even_count
