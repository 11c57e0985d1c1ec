"""minichain — a hash-linked, append-only ledger.

Every block remembers the one before it. Change the past and the chain says so.
"""

from __future__ import annotations

__all__ = [
    "__version__",
    "GENESIS",
]

__version__ = "1.0.0"

# Predecessor reference of the first block. Not a digest; never 64 hex chars.
GENESIS = "GENESIS"
