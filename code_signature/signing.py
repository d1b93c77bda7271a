"""
Code Signature Cryptographic Signing

EIP-191 personal-message signatures over secp256k1, with keys derived
from a BIP-39 mnemonic on the standard Ethereum path (m/44'/60'/0'/0/0).
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from eth_account import Account
from eth_account.hdaccount import ETHEREUM_DEFAULT_PATH
from eth_account.hdaccount.mnemonic import Mnemonic
from eth_account.messages import encode_defunct
from eth_keys.exceptions import BadSignature, ValidationError as KeyValidationError
from eth_utils import ValidationError

logger = logging.getLogger(__name__)

# mnemonic derivation is gated behind an explicit opt-in in eth-account
Account.enable_unaudited_hdwallet_features()

SIGNATURE_LENGTH = 65
MNEMONIC_ENTROPY_BITS = 256
_WORDS_PER_ENTROPY_BITS = {128: 12, 160: 15, 192: 18, 224: 21, 256: 24}


class SigningError(Exception):
    """Key derivation or signature generation failed."""


def _to_text(message: Union[bytes, str]) -> str:
    if isinstance(message, bytes):
        return message.decode('utf-8')
    return message


@dataclass(frozen=True)
class SigningAccount:
    """
    An address together with the ability to sign messages for it.

    ``sign`` returns the 65-byte r||s||v signature as 0x-prefixed hex.
    """
    address: str
    _account: object = field(repr=False, compare=False)

    def sign(self, message: Union[bytes, str]) -> str:
        try:
            signed = self._account.sign_message(encode_defunct(text=_to_text(message)))
        except (ValueError, TypeError) as e:
            raise SigningError(f"Failed to sign message: {e}") from e
        return "0x" + bytes(signed.signature).hex()


def generate_mnemonic(entropy_bits: int = MNEMONIC_ENTROPY_BITS) -> str:
    """Generate a fresh English BIP-39 mnemonic."""
    num_words = _WORDS_PER_ENTROPY_BITS.get(entropy_bits)
    if num_words is None:
        raise SigningError(f"Unsupported mnemonic entropy size: {entropy_bits} bits")
    return Mnemonic().generate(num_words=num_words)


def mnemonic_from_entropy(entropy: bytes) -> str:
    """Deterministically encode raw entropy bytes as an English BIP-39 mnemonic."""
    try:
        return Mnemonic().to_mnemonic(entropy)
    except (ValueError, ValidationError) as e:
        raise SigningError(f"Invalid mnemonic entropy: {e}") from e


def derive_account(mnemonic: str, account_path: str = ETHEREUM_DEFAULT_PATH) -> SigningAccount:
    """
    Derive a signing account from a mnemonic.

    Raises:
        SigningError: if the mnemonic is not a valid BIP-39 phrase
    """
    try:
        account = Account.from_mnemonic(mnemonic, account_path=account_path)
    except (ValueError, TypeError, ValidationError) as e:
        raise SigningError(f"Failed to derive account from mnemonic: {e}") from e
    return SigningAccount(address=account.address, _account=account)


def resolve_account(mnemonic: Optional[str] = None) -> Tuple[SigningAccount, Optional[str]]:
    """
    Resolve the signing account for a run.

    Without a mnemonic a new one is generated. The generated phrase is
    returned as the second element so the caller can surface it; it is
    None when the mnemonic was supplied.
    """
    generated = None
    if not mnemonic:
        generated = generate_mnemonic()
        mnemonic = generated

    account = derive_account(mnemonic)
    if generated is not None:
        logger.info("Generated new signing key for %s", account.address)
    return account, generated


def decode_signature(signature: Optional[str]) -> Optional[bytes]:
    """Decode a 0x-hex signature, or return None if it is not 65 bytes of hex."""
    if signature is None or not signature.startswith("0x"):
        return None
    try:
        raw = bytes.fromhex(signature[2:])
    except ValueError:
        return None
    if len(raw) != SIGNATURE_LENGTH:
        return None
    return raw


def recover_address(message: Union[bytes, str], signature: Optional[str]) -> Optional[str]:
    """
    Recover the checksummed address that produced ``signature`` over ``message``.

    Recovery succeeds for any well-formed signature; the result is only the
    claimed signer. Undecodable signatures yield None.
    """
    raw = decode_signature(signature)
    if raw is None:
        logger.debug("Signature is not a %d-byte hex value", SIGNATURE_LENGTH)
        return None

    try:
        return Account.recover_message(encode_defunct(text=_to_text(message)), signature=raw)
    except (ValueError, BadSignature, KeyValidationError) as e:
        logger.warning("Could not recover signer from signature: %s", e)
        return None
