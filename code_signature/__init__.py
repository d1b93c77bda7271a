"""
Code Signature

Self-verifying text files: a SHA-256 checksum and an EIP-191 signature
embedded as two comment lines at the top of the file itself.

    // @sha256sum 0x<64 hex>
    // @eip191signature 0x<130 hex>

The signature covers the bare body (both marker lines removed). The
checksum covers the body plus the signature line, so changing either
the body or the signature breaks the checksum.

Usage:
    from code_signature import verify, sign, derive_account

    result = verify(content)
    if not result.hash_valid:
        signed = sign(result, mnemonic)
        content = signed.rendered_content

    result = verify(content)
    assert result.recovered_address == derive_account(mnemonic).address
"""

__version__ = "0.2.0"
__license__ = "Apache-2.0"

# Marker lines
from .markers import (
    INTEGRITY_KEY,
    PROVENANCE_KEY,
    DEFAULT_PREFIX,
    Extraction,
    extract,
    upsert,
    marker_line,
)

# Canonicalization and hashing
from .canonicalization import CanonicalContent, canonicalize, strip_integrity
from .hashing import sha256_hash, verify_hash

# Keys and signatures
from .signing import (
    SigningAccount,
    SigningError,
    derive_account,
    generate_mnemonic,
    mnemonic_from_entropy,
    recover_address,
)

# Verifier
from .verifier import VerifyResult, verify

# Signer
from .signer import SignResult, sign, sign_with_account, render_markers

# Pipeline
from .pipeline import (
    Outcome,
    PipelineOptions,
    PipelineResult,
    PipelineState,
    SignaturePipeline,
    run_pipeline,
)


__all__ = [
    # Version
    "__version__",

    # Markers
    "INTEGRITY_KEY",
    "PROVENANCE_KEY",
    "DEFAULT_PREFIX",
    "Extraction",
    "extract",
    "upsert",
    "marker_line",

    # Canonicalization
    "CanonicalContent",
    "canonicalize",
    "strip_integrity",

    # Hashing
    "sha256_hash",
    "verify_hash",

    # Signing
    "SigningAccount",
    "SigningError",
    "derive_account",
    "generate_mnemonic",
    "mnemonic_from_entropy",
    "recover_address",

    # Verifier
    "VerifyResult",
    "verify",

    # Signer
    "SignResult",
    "sign",
    "sign_with_account",
    "render_markers",

    # Pipeline
    "Outcome",
    "PipelineOptions",
    "PipelineResult",
    "PipelineState",
    "SignaturePipeline",
    "run_pipeline",
]
