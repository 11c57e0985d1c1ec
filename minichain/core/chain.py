"""minichain.core.chain

The chain engine.

Appending reads the tail, derives the next block, and writes it. Verifying
replays every digest from stored fields and walks the links. Nothing is cached;
nothing is repaired. Corruption is reported, never healed.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence

from minichain import GENESIS
from minichain.core.models import Block, block_digest, recompute_digest
from minichain.core.store import BlockStore
from minichain.core.time import Clock, format_block_ts, local_now
from minichain.core.types import CorruptionKind, VerificationResult


def verify_blocks(blocks: Sequence[Block]) -> VerificationResult:
    """Verify an ordered block sequence (genesis first).

    For each block after the first, compared against its predecessor:
    1. the stored digest must equal the digest recomputed from stored fields;
    2. the stored predecessor digest must equal the predecessor's stored digest.

    The scan stops at the first failure; ``blocks_checked`` then counts the
    blocks up to and including the failing one. The digest check runs before the
    linkage check, so a block whose fields and digest were rewritten together
    is reported as a broken link.
    """

    n = len(blocks)
    if n < 2:
        return VerificationResult.ok(n)

    # 1-based index of ``block``, i.e. blocks scanned so far.
    for position, (prev, block) in enumerate(zip(blocks, blocks[1:]), start=2):
        expected = recompute_digest(block)
        if expected != block.digest:
            return VerificationResult.corrupt_at(
                sequence=block.sequence,
                kind=CorruptionKind.HASH_MISMATCH,
                expected=expected,
                actual=block.digest,
                blocks_checked=position,
            )
        if block.predecessor_digest != prev.digest:
            return VerificationResult.corrupt_at(
                sequence=block.sequence,
                kind=CorruptionKind.LINK_BROKEN,
                expected=prev.digest,
                actual=block.predecessor_digest,
                blocks_checked=position,
            )

    return VerificationResult.ok(n)


class Blockchain:
    """Append-only ledger over an ordered record store.

    Single writer. Read-last + insert runs under an in-process lock; anything
    beyond one process must serialize appends itself.
    """

    def __init__(
        self,
        store: BlockStore,
        *,
        clock: Clock = local_now,
        logger: logging.Logger | None = None,
    ):
        self.store = store
        self.clock = clock
        self.logger = logger or logging.getLogger("minichain")
        self._lock = threading.Lock()

    def append(self, payload: str) -> Block:
        """Append one block carrying ``payload``. Store failures propagate."""

        with self._lock:
            last = self.store.select_last()

            sequence = 1 if last is None else last.sequence + 1
            created_at = format_block_ts(self.clock())
            predecessor = GENESIS if last is None else last.digest

            block = Block(
                sequence=sequence,
                created_at=created_at,
                payload=payload,
                predecessor_digest=predecessor,
                digest=block_digest(
                    sequence=sequence,
                    created_at=created_at,
                    payload=payload,
                    predecessor_digest=predecessor,
                ),
            )
            self.store.insert(block)

        self.logger.info(
            "block_appended",
            extra={"sequence": block.sequence, "digest": block.digest},
        )
        return block

    def list_blocks(self) -> list[Block]:
        """All blocks, genesis first. Fully materialized."""

        return list(self.store.select_all())

    def verify(self) -> VerificationResult:
        result = verify_blocks(self.list_blocks())
        if result.valid:
            self.logger.info("chain_verified", extra={"blocks": result.blocks_checked})
        else:
            c = result.corruption
            self.logger.warning(
                "chain_corrupt",
                extra={
                    "sequence": c.sequence if c else None,
                    "blocks": result.blocks_checked,
                    "kind": str(c.kind) if c else None,
                },
            )
        return result
