"""minichain.core.digest

The digest function. One primitive, resolved once.

If the runtime cannot give us SHA-256 we refuse to start. A ledger hashed with
something weaker is not the same ledger.
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Callable
from typing import Any

from minichain.core.exceptions import HashAlgorithmUnavailableError

DIGEST_ALGORITHM = "sha256"
DIGEST_HEX_LENGTH = 64

_DIGEST_RE = re.compile(r"^[0-9a-f]{64}$")


def load_hash_algorithm(name: str) -> Callable[..., Any]:
    """Return a hashlib constructor for ``name``.

    Raises:
        HashAlgorithmUnavailableError: if the runtime does not provide it.
    """

    try:
        hashlib.new(name)
    except (ValueError, TypeError) as e:
        raise HashAlgorithmUnavailableError(f"hash algorithm unavailable: {name}") from e

    def _ctor(data: bytes = b"") -> Any:
        return hashlib.new(name, data)

    return _ctor


# Resolved at import: a missing primitive is a startup failure, not a per-call one.
_sha256 = load_hash_algorithm(DIGEST_ALGORITHM)


def digest(text: str) -> str:
    """SHA-256 of the UTF-8 encoding of ``text`` as 64 lowercase hex chars.

    Lone surrogates are encoded as-is (``surrogatepass``) so every ``str`` has a
    digest; well-formed text hashes exactly as plain UTF-8.
    """

    return _sha256(text.encode("utf-8", errors="surrogatepass")).hexdigest()


def is_digest(value: str) -> bool:
    return bool(_DIGEST_RE.match(value))
