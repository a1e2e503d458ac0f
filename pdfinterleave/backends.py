"""
Split / merge capabilities.

Two interchangeable backends:
  pypdf    in-process, PyPDF2 (default)
  poppler  pdfseparate(1) + pdfunite(1) from poppler-utils

Env:
  PDFSEPARATE_PATH, PDFUNITE_PATH  override the poppler executables
"""
from __future__ import annotations

import glob
import os
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Protocol, Sequence

import structlog
from PyPDF2 import PdfReader, PdfWriter
from PyPDF2.errors import PdfReadError

from .errors import MergeFailureError, MissingCapabilityError, OutputExistsError, SplitFailureError
from .units import FIRST_INDEX, PageUnit, ordered, parse_index, unit_name, unit_prefix

log = structlog.get_logger("pdfinterleave.backends")

DEFAULT_BACKEND = "pypdf"


class Backend(Protocol):
    name: str

    def check(self) -> None: ...

    def split(self, source: Path, directory: Path, base: str, key: str) -> list[PageUnit]: ...

    def merge(self, units: Sequence[PageUnit], output: Path) -> None: ...


# ---------- PyPDF2 ----------

class PyPDFBackend:
    name = "pypdf"

    def check(self) -> None:
        # PyPDF2 is a hard dependency; nothing to probe.
        return None

    def split(self, source: Path, directory: Path, base: str, key: str) -> list[PageUnit]:
        try:
            reader = PdfReader(str(source))
            if reader.is_encrypted:
                raise SplitFailureError(f"{source} is password-protected")
            units = []
            for i, page in enumerate(reader.pages, start=FIRST_INDEX):
                writer = PdfWriter()
                writer.add_page(page)
                path = directory / unit_name(base, key, i)
                with open(path, "xb") as fh:
                    writer.write(fh)
                units.append(PageUnit(path=path, index=i))
        except (PdfReadError, OSError) as e:
            raise SplitFailureError(f"Failed to split {source}: {e}") from e
        log.debug("split_done", backend=self.name, source=str(source), pages=len(units))
        return units

    def merge(self, units: Sequence[PageUnit], output: Path) -> None:
        writer = PdfWriter()
        try:
            for u in units:
                for page in PdfReader(str(u.path)).pages:
                    writer.add_page(page)
        except (PdfReadError, OSError) as e:
            raise MergeFailureError(f"Failed to read page units for {output}: {e}") from e
        try:
            fh = open(output, "xb")
        except FileExistsError as e:
            raise OutputExistsError(output) from e
        except OSError as e:
            raise MergeFailureError(f"Failed to write {output}: {e}") from e
        # Only a file opened here is ours to remove.
        try:
            with fh:
                writer.write(fh)
        except (PdfReadError, OSError) as e:
            output.unlink(missing_ok=True)
            raise MergeFailureError(f"Failed to write {output}: {e}") from e
        except BaseException:
            output.unlink(missing_ok=True)
            raise
        log.debug("merge_done", backend=self.name, output=str(output), pages=len(units))


# ---------- poppler-utils ----------

def _tool(name: str) -> str:
    return os.environ.get(f"{name.upper()}_PATH") or name


def _page_pattern(directory: Path, prefix: str) -> str:
    # pdfseparate treats the name as a format string; a literal % must be %%.
    return str(directory / prefix).replace("%", "%%") + "%d.pdf"


def _run(cmd: list[str]) -> subprocess.CompletedProcess:
    log.debug("exec", cmd=shlex.join(cmd))
    return subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)


class PopplerBackend:
    name = "poppler"
    tools = ("pdfseparate", "pdfunite")

    def check(self) -> None:
        missing = [t for t in self.tools if shutil.which(_tool(t)) is None]
        if missing:
            raise MissingCapabilityError(
                "This program requires pdfunite and pdfseparate from poppler utils "
                "to be in the PATH. On Debian based systems, they are found in the "
                f"poppler-utils package (missing: {', '.join(missing)})"
            )

    def split(self, source: Path, directory: Path, base: str, key: str) -> list[PageUnit]:
        prefix = unit_prefix(base, key)
        cmd = [_tool("pdfseparate"), str(source), _page_pattern(directory, prefix)]
        p = _run(cmd)
        if p.returncode != 0:
            raise SplitFailureError(f"pdfseparate failed: {shlex.join(cmd)} :: {p.stderr.strip()}")
        # pdfseparate writes unpadded indices; recover them from the names.
        units = []
        for path in directory.glob(glob.escape(prefix) + "*.pdf"):
            idx = parse_index(path, base, key)
            if idx is not None:
                units.append(PageUnit(path=path, index=idx))
        units = ordered(units)
        log.debug("split_done", backend=self.name, source=str(source), pages=len(units))
        return units

    def merge(self, units: Sequence[PageUnit], output: Path) -> None:
        # pdfunite overwrites silently.
        if output.exists():
            raise OutputExistsError(output)
        cmd = [_tool("pdfunite"), *(str(u.path) for u in units), str(output)]
        p = _run(cmd)
        if p.returncode != 0:
            output.unlink(missing_ok=True)
            raise MergeFailureError(f"pdfunite failed: {shlex.join(cmd)} :: {p.stderr.strip()}")
        log.debug("merge_done", backend=self.name, output=str(output), pages=len(units))


BACKENDS = {b.name: b for b in (PyPDFBackend, PopplerBackend)}


def get_backend(name: str = DEFAULT_BACKEND) -> Backend:
    try:
        return BACKENDS[name]()
    except KeyError:
        raise ValueError(f"Unknown backend {name!r}; choose from {', '.join(BACKENDS)}") from None
