"""
Code Signature Canonicalization

Derives the content variants that get hashed and signed.

The order of stripping matters:

1. ``without_integrity``: only the ``@sha256sum`` line is removed. This is
   the hash input, so the checksum covers the signature line.
2. ``without_either``: the ``@eip191signature`` line is removed from (1).
   This is the bare body, the exact text that gets signed.

The signature never covers the checksum.
"""

from dataclasses import dataclass

from .markers import DEFAULT_PREFIX, INTEGRITY_KEY, PROVENANCE_KEY, Extraction, extract


@dataclass(frozen=True)
class CanonicalContent:
    """The canonical variants of one document."""
    content: str
    without_integrity: Extraction
    without_either: Extraction

    @property
    def hash_input(self) -> str:
        return self.without_integrity.content

    @property
    def bare_body(self) -> str:
        return self.without_either.content

    @property
    def claimed_hash(self):
        return self.without_integrity.value

    @property
    def claimed_signature(self):
        return self.without_either.value


def strip_integrity(content: str, prefix: str = DEFAULT_PREFIX) -> Extraction:
    """Remove the integrity marker, keeping the provenance marker."""
    return extract(content, INTEGRITY_KEY, prefix)


def canonicalize(content: str, prefix: str = DEFAULT_PREFIX) -> CanonicalContent:
    """Build the hash-input and signature-input variants of ``content``."""
    without_integrity = strip_integrity(content, prefix)
    without_either = extract(without_integrity.content, PROVENANCE_KEY, prefix)
    return CanonicalContent(
        content=content,
        without_integrity=without_integrity,
        without_either=without_either,
    )
