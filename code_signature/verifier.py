"""
Code Signature Verification

Checks a document's embedded ``@sha256sum`` against its content and
recovers the claimed signer from its embedded ``@eip191signature``.

The checksum is the only pass/fail gate. A recovered address says who
signed the bare body; it does not by itself make the document valid.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .canonicalization import CanonicalContent, canonicalize
from .hashing import sha256_hash
from .markers import DEFAULT_PREFIX, Extraction
from .signing import recover_address

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifyResult:
    """Result of verifying one document."""
    content: str
    without_integrity: Extraction
    without_either: Extraction
    computed_hash: str
    claimed_hash: Optional[str]
    hash_valid: bool
    recovered_address: Optional[str]
    prefix: str = DEFAULT_PREFIX

    @property
    def claimed_signature(self) -> Optional[str]:
        return self.without_either.value

    def is_valid(self) -> bool:
        return self.hash_valid


def verify_canonical(canonical: CanonicalContent, prefix: str = DEFAULT_PREFIX) -> VerifyResult:
    """Verify already-canonicalized content."""
    computed_hash = sha256_hash(canonical.hash_input)
    claimed_hash = canonical.claimed_hash

    recovered = None
    if canonical.claimed_signature is not None:
        recovered = recover_address(canonical.bare_body, canonical.claimed_signature)

    hash_valid = claimed_hash == computed_hash
    logger.debug(
        "checksum claimed=%s computed=%s valid=%s signer=%s",
        claimed_hash, computed_hash, hash_valid, recovered,
    )

    return VerifyResult(
        content=canonical.content,
        without_integrity=canonical.without_integrity,
        without_either=canonical.without_either,
        computed_hash=computed_hash,
        claimed_hash=claimed_hash,
        hash_valid=hash_valid,
        recovered_address=recovered,
        prefix=prefix,
    )


def verify(content: str, prefix: str = DEFAULT_PREFIX) -> VerifyResult:
    """
    Verify a document.

    Args:
        content: The full document text, markers included
        prefix: Configured comment prefix for marker lines

    Returns:
        VerifyResult; ``hash_valid`` is the pass/fail gate
    """
    return verify_canonical(canonicalize(content, prefix), prefix)
