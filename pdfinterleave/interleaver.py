"""
Interleave an odd-pages scan and an even-pages scan into one PDF.

The odd file is taken front-to-back, the even file back-to-front, which is
what a one-sided feeder produces when the stack is flipped for the backs:

    odd  = [A1, A2, A3]
    even = [B1, B2, B3]
    out  = [A1, B3, A2, B2, A3, B1]
"""
from __future__ import annotations

import contextlib
import glob
from pathlib import Path
from typing import Iterator, Optional

import structlog

from .backends import Backend, get_backend
from .errors import (
    DuplicateInputError,
    MergeFailureError,
    OutputExistsError,
    PageCountMismatchError,
)
from .units import PageUnit, build_plan, new_run_key, unit_prefix

log = structlog.get_logger("pdfinterleave")

DEFAULT_SUFFIX = ".pdf"


def output_path_for(odd: Path, even: Path) -> Path:
    odd, even = Path(odd), Path(even)
    suffix = odd.suffix or DEFAULT_SUFFIX
    return odd.parent / f"{odd.stem}-{even.stem}-interleaved{suffix}"


def _same_file(a: Path, b: Path) -> bool:
    if str(a) == str(b):
        return True
    return a.resolve() == b.resolve()


@contextlib.contextmanager
def scratch_units(
    backend: Backend, source: Path, key: str, base: Optional[str] = None
) -> Iterator[list[PageUnit]]:
    """Split `source` next to itself; every unit is removed on exit, success or not."""
    directory = source.parent
    base = base or source.stem
    units: list[PageUnit] = []
    try:
        units = backend.split(source, directory, base, key)
        yield units
    finally:
        # A split that died halfway may have left files we never got back.
        leftovers = {u.path for u in units}
        leftovers.update(directory.glob(glob.escape(unit_prefix(base, key)) + "*.pdf"))
        for path in leftovers:
            path.unlink(missing_ok=True)
        log.debug("scratch_removed", source=str(source), count=len(leftovers))


def interleave(
    odd: Path,
    even: Path,
    *,
    output: Optional[Path] = None,
    backend: Optional[Backend] = None,
    reverse_even: bool = True,
    strict: bool = False,
    key: Optional[str] = None,
) -> Path:
    """
    Interleave `odd` and `even` into `output` (derived from both names when
    not given) and return the output path.

    Preconditions are checked before anything touches the filesystem:
    distinct inputs, a usable backend, and a free output path. With unequal
    page counts the surplus of the longer file is dropped with a warning, or
    PageCountMismatchError is raised when `strict` is set.
    """
    odd, even = Path(odd), Path(even)
    if _same_file(odd, even):
        raise DuplicateInputError("Odd pages file and even pages file must be different.")

    backend = backend or get_backend()
    backend.check()

    output = Path(output) if output is not None else output_path_for(odd, even)
    if output.exists():
        raise OutputExistsError(output)

    key = key or new_run_key()
    log.info("interleave_start", odd=str(odd), even=str(even), output=str(output), backend=backend.name, key=key)

    # Both scratch sets share a directory namespace when the inputs sit side by side.
    even_base = even.stem
    if even.stem == odd.stem and even.parent.resolve() == odd.parent.resolve():
        even_base = f"{even.stem}-even"

    with scratch_units(backend, odd, key) as odd_units, \
            scratch_units(backend, even, key, base=even_base) as even_units:
        n, m = len(odd_units), len(even_units)
        if n != m:
            if strict:
                raise PageCountMismatchError(n, m)
            log.warning("page_count_mismatch", odd_pages=n, even_pages=m, dropped=abs(n - m))

        plan = build_plan(odd_units, even_units, reverse_even=reverse_even)
        if not plan:
            raise MergeFailureError(f"Nothing to interleave: {odd} has {n} page(s), {even} has {m}")

        backend.merge(plan, output)

    log.info("interleave_done", output=str(output), pages=len(plan))
    return output
