"""minichain.core

Core primitives.

If a module needs to exist, it should probably depend only on this package.
"""

from .chain import Blockchain, verify_blocks
from .config import Config
from .database import Database
from .digest import digest
from .exceptions import MinichainError
from .models import Block, block_digest
from .store import BlockStore, MemoryBlockStore
from .types import Corruption, CorruptionKind, VerificationResult, VerificationStatus

__all__ = [
    "Block",
    "BlockStore",
    "Blockchain",
    "Config",
    "Corruption",
    "CorruptionKind",
    "Database",
    "MemoryBlockStore",
    "MinichainError",
    "VerificationResult",
    "VerificationStatus",
    "block_digest",
    "digest",
    "verify_blocks",
]
