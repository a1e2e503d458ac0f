"""Interleave two one-sided PDF scans into a double-sided document."""
from __future__ import annotations

from .backends import PopplerBackend, PyPDFBackend, get_backend
from .errors import (
    DuplicateInputError,
    InterleaveError,
    MergeFailureError,
    MissingCapabilityError,
    OutputExistsError,
    PageCountMismatchError,
    SplitFailureError,
)
from .interleaver import interleave, output_path_for
from .units import PageUnit, build_plan

__version__ = "0.1.0"

__all__ = [
    "DuplicateInputError",
    "InterleaveError",
    "MergeFailureError",
    "MissingCapabilityError",
    "OutputExistsError",
    "PageCountMismatchError",
    "PageUnit",
    "PopplerBackend",
    "PyPDFBackend",
    "SplitFailureError",
    "build_plan",
    "get_backend",
    "interleave",
    "output_path_for",
]
