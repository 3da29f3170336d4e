"""Business-key generation (order, invoice, payment and customer codes).

Keys follow ``<PREFIX>-<8 upper-case hex>``; transaction ids use 12 hex
digits.  Uniqueness is backed by the unique index on each column; the
generator only re-rolls when the candidate is already taken.
"""

from __future__ import annotations

import secrets
from typing import Callable

CODE_MAX_RETRIES = 5
CODE_HEX_LENGTH = 8
TRANSACTION_HEX_LENGTH = 12


def random_code(prefix: str, length: int = CODE_HEX_LENGTH) -> str:
    """Return ``PREFIX-`` followed by ``length`` upper-case hex digits."""
    return f"{prefix}-{secrets.token_hex((length + 1) // 2)[:length].upper()}"


def generate_unique_code(
    prefix: str,
    exists: Callable[[str], bool],
    length: int = CODE_HEX_LENGTH,
) -> str:
    """Generate a code for which ``exists(code)`` is ``False``.

    Raises:
        RuntimeError: no free code after ``CODE_MAX_RETRIES`` attempts.
    """
    for _ in range(CODE_MAX_RETRIES):
        candidate = random_code(prefix, length)
        if not exists(candidate):
            return candidate
    raise RuntimeError(
        f"Failed to generate unique {prefix} code after "
        f"{CODE_MAX_RETRIES} attempts"
    )


def transaction_id() -> str:
    return random_code("TXN", TRANSACTION_HEX_LENGTH)
