"""minichain.core.models

Core domain models.

A block is immutable. The ledger's memory is append-only.
"""

from __future__ import annotations

from pydantic import BaseModel

from minichain.core.digest import digest


class Block(BaseModel):
    """Immutable ledger record.

    Fields are taken as stored. Shape checks on ``digest`` would make a tampered
    ledger unreadable, and an unreadable ledger cannot be verified.
    """

    sequence: int
    created_at: str
    payload: str
    predecessor_digest: str
    digest: str

    model_config = {"frozen": True}

    @property
    def is_genesis(self) -> bool:
        return self.sequence == 1


def block_digest(
    *,
    sequence: int,
    created_at: str,
    payload: str,
    predecessor_digest: str,
) -> str:
    """Compute the canonical block digest.

    Digest = sha256(sequence || created_at || payload || predecessor_digest)

    Plain concatenation, no separators, in exactly this order. Stored ledgers
    are only reproducible if this never changes.
    """

    return digest(f"{sequence}{created_at}{payload}{predecessor_digest}")


def recompute_digest(block: Block) -> str:
    return block_digest(
        sequence=block.sequence,
        created_at=block.created_at,
        payload=block.payload,
        predecessor_digest=block.predecessor_digest,
    )
