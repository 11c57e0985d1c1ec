"""minichain.core.store

The ordered record store contract.

The chain engine asks three things of its store: take one more record, give
back everything in order, and tell me who came last.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from minichain.core.exceptions import BlockStoreError
from minichain.core.models import Block


@runtime_checkable
class BlockStore(Protocol):
    def insert(self, block: Block) -> None: ...

    def select_all(self) -> list[Block]: ...

    def select_last(self) -> Block | None: ...


class MemoryBlockStore:
    """List-backed store. Lives as long as the process."""

    def __init__(self, blocks: list[Block] | None = None):
        self._blocks: list[Block] = sorted(blocks or [], key=lambda b: b.sequence)

    def insert(self, block: Block) -> None:
        if any(b.sequence == block.sequence for b in self._blocks):
            raise BlockStoreError(f"duplicate block sequence: {block.sequence}")
        self._blocks.append(block)
        self._blocks.sort(key=lambda b: b.sequence)

    def select_all(self) -> list[Block]:
        return list(self._blocks)

    def select_last(self) -> Block | None:
        return self._blocks[-1] if self._blocks else None
