import subprocess
from pathlib import Path

import pytest
import structlog
from PyPDF2 import PdfReader, PdfWriter


@pytest.fixture(autouse=True)
def _reset_logging():
    # The CLI points structlog at the runner's stderr, which is closed afterwards.
    yield
    structlog.reset_defaults()


def make_pdf(path: Path, widths) -> Path:
    """Write a PDF of blank pages; each page is identified by its width."""
    writer = PdfWriter()
    for w in widths:
        writer.add_blank_page(width=w, height=100)
    with open(path, "wb") as fh:
        writer.write(fh)
    return path


def page_widths(path: Path) -> list[int]:
    return [round(float(p.mediabox.width)) for p in PdfReader(str(path)).pages]


@pytest.fixture
def odd_pdf(tmp_path):
    # A1, A2, A3
    return make_pdf(tmp_path / "odd.pdf", [101, 102, 103])


@pytest.fixture
def even_pdf(tmp_path):
    # B1, B2, B3
    return make_pdf(tmp_path / "even.pdf", [201, 202, 203])


class FakePoppler:
    """Stands in for subprocess.run; pdfseparate writes unpadded page files."""

    def __init__(self, pages=12, returncode=0, stderr=""):
        self.pages = pages
        self.returncode = returncode
        self.stderr = stderr
        self.calls = []

    def __call__(self, cmd, **kw):
        self.calls.append(cmd)
        if cmd[0].endswith("pdfseparate") and self.returncode == 0:
            template = cmd[2]
            for i in range(1, self.pages + 1):
                with open(template.replace("%d", str(i)).replace("%%", "%"), "wb") as fh:
                    fh.write(b"%PDF")
        elif cmd[0].endswith("pdfunite"):
            # pdfunite leaves a truncated file behind when it fails.
            with open(cmd[-1], "wb") as fh:
                fh.write(b"%PDF")
        return subprocess.CompletedProcess(cmd, self.returncode, stdout="", stderr=self.stderr)
