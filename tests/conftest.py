"""Shared fixtures for mht parser tests."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from src.mht.parser import parse_file
from src.mht.result import ParseResult

ROOT = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT / "config" / "mht.yaml"
SAMPLE_PATH = ROOT / "config" / "sample.mht"

KITCHEN_LINE = "switch|Kitchen_Light|Kitchen Light|lightbulb|1.2.3:bool"


# ── Helper: build an in-memory mht byte stream ─────────────────────────────


def mht(*lines: str) -> io.BytesIO:
    return io.BytesIO(("\n".join(lines) + "\n").encode("utf-8"))


def write_mht(path: Path, *lines: str) -> Path:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture(scope="module")
def sample_result() -> ParseResult:
    return parse_file(SAMPLE_PATH)
