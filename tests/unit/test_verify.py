from __future__ import annotations

from minichain import GENESIS
from minichain.core.chain import Blockchain, verify_blocks
from minichain.core.models import Block, recompute_digest
from minichain.core.types import CorruptionKind, VerificationStatus


def _chain(store, clock, payloads: list[str]) -> Blockchain:
    chain = Blockchain(store, clock=clock)
    for p in payloads:
        chain.append(p)
    return chain


def _reseal(block: Block, **changes: object) -> Block:
    """Apply ``changes`` and recompute the digest so the block is self-consistent."""

    tampered = block.model_copy(update=changes)
    return tampered.model_copy(update={"digest": recompute_digest(tampered)})


def test_empty_sequence_is_valid() -> None:
    r = verify_blocks([])
    assert r.status is VerificationStatus.VALID
    assert r.blocks_checked == 0


def test_pure_function_matches_engine(tamperable_store, clock) -> None:
    chain = _chain(tamperable_store, clock, ["a", "b", "c"])
    assert verify_blocks(tamperable_store.select_all()) == chain.verify()


def test_stops_at_first_corruption(tamperable_store, clock) -> None:
    chain = _chain(tamperable_store, clock, ["a", "b", "c", "d"])
    blocks = tamperable_store.select_all()
    tamperable_store.overwrite(blocks[1].model_copy(update={"payload": "B"}))
    tamperable_store.overwrite(blocks[3].model_copy(update={"payload": "D"}))

    r = chain.verify()
    assert r.corruption is not None
    assert r.corruption.sequence == 2
    assert r.blocks_checked == 2


def test_blocks_checked_counts_up_to_the_failing_block(tamperable_store, clock) -> None:
    chain = _chain(tamperable_store, clock, ["a", "b", "c", "d", "e"])
    blocks = tamperable_store.select_all()
    tamperable_store.overwrite(blocks[3].model_copy(update={"payload": "D"}))

    r = chain.verify()
    assert r.corruption is not None
    assert r.corruption.sequence == 4
    assert r.blocks_checked == 4
    assert chain.list_blocks()[-1].sequence == 5


def test_resealed_block_is_caught_by_its_successor(tamperable_store, clock) -> None:
    chain = _chain(tamperable_store, clock, ["a", "b", "c"])
    blocks = tamperable_store.select_all()
    tamperable_store.overwrite(_reseal(blocks[1], payload="B"))

    r = chain.verify()
    assert r.corruption is not None
    assert r.corruption.sequence == 3
    assert r.corruption.kind is CorruptionKind.LINK_BROKEN
    assert r.blocks_checked == 3


def test_digest_check_runs_before_link_check(tamperable_store, clock) -> None:
    chain = _chain(tamperable_store, clock, ["a", "b", "c"])
    blocks = tamperable_store.select_all()
    # Both the link and the digest are wrong on block 3; digest wins.
    tamperable_store.overwrite(blocks[2].model_copy(update={"predecessor_digest": "f" * 64}))

    r = chain.verify()
    assert r.corruption is not None
    assert r.corruption.sequence == 3
    assert r.corruption.kind is CorruptionKind.HASH_MISMATCH


def test_deleted_block_breaks_the_link(tamperable_store, clock) -> None:
    _chain(tamperable_store, clock, ["a", "b", "c"])
    blocks = tamperable_store.select_all()
    r = verify_blocks([blocks[0], blocks[2]])
    assert r.corruption is not None
    assert r.corruption.kind is CorruptionKind.LINK_BROKEN
    assert r.corruption.expected == blocks[0].digest
    assert r.corruption.actual == blocks[1].digest


def test_genesis_block_is_only_checked_through_its_successor(tamperable_store, clock) -> None:
    chain = _chain(tamperable_store, clock, ["a"])
    tamperable_store.overwrite(tamperable_store.select_all()[0].model_copy(update={"payload": "edited"}))
    # A lone genesis block cannot violate linkage.
    assert chain.verify().valid

    chain.append("b")
    resealed = _reseal(tamperable_store.select_all()[0], payload="edited-again")
    tamperable_store.overwrite(resealed)
    r = chain.verify()
    assert r.corruption is not None
    assert r.corruption.sequence == 2
    assert r.corruption.kind is CorruptionKind.LINK_BROKEN
    assert resealed.predecessor_digest == GENESIS
