from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]

SAMPLE_SRC = """\
nop +0
acc +1
jmp +4
acc +3
jmp -3
acc -99
acc +1
jmp -4
acc +6
"""


def pytest_configure() -> None:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def sample_src() -> str:
    return SAMPLE_SRC


@pytest.fixture()
def sample_program():
    from handheld.parser import parse_program

    return parse_program(SAMPLE_SRC)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("HANDHELD_MAX_CONCURRENCY", "HANDHELD_LOG_LEVEL"):
        # Set first so teardown also undoes values written straight into os.environ.
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
