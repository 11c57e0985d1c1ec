from __future__ import annotations

import shutil
import sys
from collections.abc import Iterator
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# pytest may run without installing the project; ensure repo root is importable.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from minichain.core.config import Config  # noqa: E402
from minichain.core.database import Database  # noqa: E402
from minichain.core.models import Block  # noqa: E402
from minichain.core.store import MemoryBlockStore  # noqa: E402


@pytest.fixture()
def temp_dir(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture()
def test_config(temp_dir: Path) -> Config:
    """Config fixture that points data_dir to a temp directory."""

    cfg_dst_dir = temp_dir / "config"
    cfg_dst_dir.mkdir(parents=True, exist_ok=True)
    shutil.copy2(REPO_ROOT / "config" / "default.yaml", cfg_dst_dir / "default.yaml")

    c = Config.from_yaml(cfg_dst_dir / "default.yaml")
    return c.model_copy(update={"data_dir": temp_dir / "data"})


@pytest.fixture()
def db(temp_dir: Path) -> Iterator[Database]:
    d = Database(temp_dir / "data" / "blockchain.db")
    try:
        yield d
    finally:
        d.close()


class StepClock:
    """Deterministic clock: starts at a fixed instant, advances one second per call."""

    def __init__(self, start: datetime = datetime(2025, 1, 1, 12, 0, 0)):
        self._next = start

    def __call__(self) -> datetime:
        now = self._next
        self._next = now + timedelta(seconds=1)
        return now


@pytest.fixture()
def clock() -> StepClock:
    return StepClock()


class TamperableStore(MemoryBlockStore):
    """In-memory store that lets a test overwrite a stored record in place."""

    def overwrite(self, block: Block) -> None:
        for i, b in enumerate(self._blocks):
            if b.sequence == block.sequence:
                self._blocks[i] = block
                return
        raise KeyError(block.sequence)


@pytest.fixture()
def tamperable_store() -> TamperableStore:
    return TamperableStore()
