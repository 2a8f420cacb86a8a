"""
Owner identities and key management
"""

import hashlib
import logging
from ecdsa import SigningKey, SECP256k1, VerifyingKey, BadSignatureError
from ecdsa.errors import MalformedPointError
from typing import Tuple, Optional

logger = logging.getLogger(__name__)

# 20-byte zero address
NULL_IDENTITY = "0x" + "0" * 40


def is_null_identity(identity: Optional[str]) -> bool:
    """Check whether identity is the null/zero identity"""
    if not identity:
        return True
    if not isinstance(identity, str):
        return False

    digits = identity[2:] if identity.lower().startswith("0x") else identity
    if not digits:
        return True

    return all(c == "0" for c in digits)


class OwnerKey:
    """SECP256k1 key whose compressed public key is the owner identity"""

    def __init__(self, private_key: bytes = None):
        if private_key:
            self.private_key = SigningKey.from_string(private_key, curve=SECP256k1)
        else:
            self.private_key = SigningKey.generate(curve=SECP256k1)

        self.public_key = self.private_key.get_verifying_key()

    @property
    def identity(self) -> str:
        """Compressed public key in hex format"""
        return self.public_key.to_string("compressed").hex()

    def sign(self, message: bytes) -> str:
        """Sign message and return signature in hex"""
        return self.private_key.sign(message, hashfunc=hashlib.sha256).hex()

    @classmethod
    def from_hex(cls, private_hex: str) -> 'OwnerKey':
        return cls(bytes.fromhex(private_hex))

    @staticmethod
    def generate_key_pair() -> Tuple[str, str]:
        """Generate new key pair and return (private_key_hex, identity)"""
        key = OwnerKey()
        return key.private_key.to_string().hex(), key.identity


def verify_signature(identity: str, message: bytes, signature_hex: str) -> bool:
    """Verify signature against message and a public key identity.

    Accepts compressed (33 byte) and uncompressed (64/65 byte) keys.
    """
    try:
        vk = VerifyingKey.from_string(bytes.fromhex(identity), curve=SECP256k1)
        signature = bytes.fromhex(signature_hex)
    except (ValueError, TypeError, MalformedPointError) as e:
        logger.warning(f"Malformed key or signature for {str(identity)[:8]}...: {e}")
        return False

    try:
        return vk.verify(signature, message, hashfunc=hashlib.sha256)
    except BadSignatureError:
        return False
