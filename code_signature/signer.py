"""
Code Signature Signer

Re-stamps a document that failed verification:

1. Resolve the signing account (generating a mnemonic if none is given).
2. Sign the bare body.
3. Write the ``@eip191signature`` marker into the original content,
   in place if present, otherwise as a new first line.
4. Hash that content with the ``@sha256sum`` line stripped.
5. Write the ``@sha256sum`` marker the same way.

For a document with neither marker, the rendered layout is always the
integrity line, the provenance line, then the original body.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from .canonicalization import strip_integrity
from .hashing import sha256_hash
from .markers import INTEGRITY_KEY, PROVENANCE_KEY, marker_line, upsert
from .signing import SigningAccount, resolve_account
from .verifier import VerifyResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignResult:
    """Outcome of signing one document."""
    signer_address: str
    new_signature: Optional[str] = None
    new_hash: Optional[str] = None
    rendered_content: Optional[str] = None
    generated_mnemonic: Optional[str] = field(default=None, repr=False)

    def has_content(self) -> bool:
        return self.rendered_content is not None


def render_markers(sign_result: SignResult, prefix: str) -> str:
    """Render the two marker lines of a signing result, integrity first."""
    return "\n".join([
        marker_line(INTEGRITY_KEY, sign_result.new_hash, prefix),
        marker_line(PROVENANCE_KEY, sign_result.new_signature, prefix),
    ])


def sign_with_account(verify_result: VerifyResult, account: SigningAccount) -> SignResult:
    """Sign ``verify_result`` with an already resolved account."""
    prefix = verify_result.prefix

    signature = account.sign(verify_result.without_either.content)
    signed = upsert(verify_result.content, PROVENANCE_KEY, signature, prefix)

    new_hash = sha256_hash(strip_integrity(signed, prefix).content)
    rendered = upsert(signed, INTEGRITY_KEY, new_hash, prefix)

    logger.debug("Signed document as %s, checksum %s", account.address, new_hash)
    return SignResult(
        signer_address=account.address,
        new_signature=signature,
        new_hash=new_hash,
        rendered_content=rendered,
    )


def sign(verify_result: VerifyResult, mnemonic: Optional[str] = None) -> SignResult:
    """
    Produce a newly signed rendering of a verified document.

    Args:
        verify_result: Result of verifying the original content
        mnemonic: BIP-39 phrase for the signing key; generated when omitted

    Returns:
        SignResult. ``generated_mnemonic`` is set only when a new key was made.

    Raises:
        SigningError: if key derivation or signing fails
    """
    account, generated = resolve_account(mnemonic)
    result = sign_with_account(verify_result, account)
    if generated is None:
        return result

    return replace(result, generated_mnemonic=generated)
