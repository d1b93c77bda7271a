"""
Code Signature Hashing

The integrity checksum is SHA-256 over the UTF-8 bytes of the hash-input
content, rendered as ``0x`` followed by 64 lowercase hex characters.
"""

import hashlib
from typing import Optional, Union


def sha256_hash(data: Union[bytes, str]) -> str:
    """
    Compute the SHA-256 checksum in marker format.

    Returns:
        Hash string in format "0xabcdef..."
    """
    if isinstance(data, str):
        data = data.encode('utf-8')

    return "0x" + hashlib.sha256(data).hexdigest().lower()


def verify_hash(declared_hash: Optional[str], data: Union[bytes, str]) -> bool:
    """
    Check a declared checksum against data.

    A missing declaration never verifies.
    """
    if declared_hash is None:
        return False
    return sha256_hash(data) == declared_hash
