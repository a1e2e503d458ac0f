"""
Page units and the interleave plan.

A page unit is a one-page PDF cut out of a source document. Its name embeds
the source stem, the per-run key and a zero-padded extraction index:

    scan-odd-QzKpWmRa-0003.pdf

Ordering always goes through the parsed integer index, so "10" never sorts
before "2" even for names written by tools that don't pad.
"""
from __future__ import annotations

import dataclasses as dc
import re
import secrets
import string
from pathlib import Path
from typing import Iterable, Optional, Sequence

KEY_LENGTH = 8
FIRST_INDEX = 1


@dc.dataclass(frozen=True)
class PageUnit:
    path: Path
    index: int


def new_run_key() -> str:
    return "".join(secrets.choice(string.ascii_letters) for _ in range(KEY_LENGTH))


def unit_prefix(base: str, key: str) -> str:
    return f"{base}-{key}-"


def unit_name(base: str, key: str, index: int) -> str:
    return f"{unit_prefix(base, key)}{index:04d}.pdf"


def parse_index(path: Path, base: str, key: str) -> Optional[int]:
    m = re.fullmatch(re.escape(unit_prefix(base, key)) + r"(\d+)\.pdf", Path(path).name)
    return int(m.group(1)) if m else None


def ordered(units: Iterable[PageUnit]) -> list[PageUnit]:
    return sorted(units, key=lambda u: u.index)


def build_plan(
    odd_units: Sequence[PageUnit],
    even_units: Sequence[PageUnit],
    *,
    reverse_even: bool = True,
) -> list[PageUnit]:
    """
    Pair odd unit i with even unit m-i+1 (or unit i when reverse_even is off).

    The plan holds 2 * min(n, m) units; surplus pages of the longer source
    are never referenced.
    """
    odd = ordered(odd_units)
    even = ordered(even_units)
    if reverse_even:
        even.reverse()
    plan: list[PageUnit] = []
    for o, e in zip(odd, even):
        plan.append(o)
        plan.append(e)
    return plan
