"""minichain.core.types

Lightweight dataclasses for verification outcomes.

Pydantic models own IO boundaries; dataclasses keep results lean.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class VerificationStatus(StrEnum):
    UNCHECKED = "unchecked"
    VALID = "valid"
    CORRUPT = "corrupt"


class CorruptionKind(StrEnum):
    HASH_MISMATCH = "hash_mismatch"  # stored digest != recomputed digest
    LINK_BROKEN = "link_broken"  # predecessor_digest != previous block's digest


@dataclass(frozen=True, slots=True)
class Corruption:
    sequence: int
    kind: CorruptionKind
    expected: str
    actual: str


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Outcome of one full chain scan.

    ``UNCHECKED`` exists so callers can hold a result before the first scan.
    A scan only ever ends in ``VALID`` or ``CORRUPT``. ``blocks_checked`` is the
    chain length when valid, and the 1-based position of the failing block when
    corrupt.
    """

    status: VerificationStatus
    blocks_checked: int = 0
    corruption: Corruption | None = None

    @classmethod
    def unchecked(cls) -> VerificationResult:
        return cls(status=VerificationStatus.UNCHECKED)

    @classmethod
    def ok(cls, blocks_checked: int) -> VerificationResult:
        return cls(status=VerificationStatus.VALID, blocks_checked=blocks_checked)

    @classmethod
    def corrupt_at(
        cls,
        *,
        sequence: int,
        kind: CorruptionKind,
        expected: str,
        actual: str,
        blocks_checked: int,
    ) -> VerificationResult:
        return cls(
            status=VerificationStatus.CORRUPT,
            blocks_checked=blocks_checked,
            corruption=Corruption(sequence=sequence, kind=kind, expected=expected, actual=actual),
        )

    @property
    def valid(self) -> bool:
        return self.status is VerificationStatus.VALID

    def describe(self) -> str:
        if self.status is VerificationStatus.UNCHECKED:
            return "Chain not verified yet."
        if self.corruption is None:
            return f"Chain intact: {self.blocks_checked} block(s) verified."
        c = self.corruption
        if c.kind is CorruptionKind.HASH_MISMATCH:
            return (
                f"Hash mismatch at block {c.sequence}: "
                f"expected {c.expected}, stored {c.actual}."
            )
        return (
            f"Broken link at block {c.sequence}: "
            f"expected predecessor {c.expected}, found {c.actual}."
        )
