"""
Wallet Key Encryption Service

Business layer over ECIESEngine: accepts wallet keys as hex strings or
bytes, converts text to and from UTF-8 and produces the concatenated hex
payload stored by legacy eccrypto clients.

Key handling:
- public keys: 33 byte compressed or 65 byte uncompressed, hex (optional 0x) or bytes
- private keys: 32 bytes, hex (optional 0x) or bytes
- raw 64 byte coordinates are passed through unchanged and rejected by the engine

Author: ECIES Core Project
Date: October 2026
"""

from typing import Union

from protocols.ecies import ECIESEngine, EncryptedPayload, InvalidKeyError
from protocols.ecies import codec
from utils.encoding import BytesLike, ensure_bytes
from utils.logger import ECIESLogger

KeyInput = Union[str, BytesLike]


def _process_key(key: KeyInput, kind: str) -> bytes:
    try:
        data = ensure_bytes(key)
    except ValueError as e:
        raise InvalidKeyError(f"Invalid {kind} key encoding: {e}", cause=e) from e
    if not data:
        raise InvalidKeyError(f"{kind.capitalize()} key cannot be empty")
    return data


def process_wallet_public_key(public_key: KeyInput) -> bytes:
    """
    Decode a wallet public key to bytes.

    No 0x04 prefix is added to raw 64 byte coordinates; normalization and
    validation are left to ECIESEngine.normalize_public_key.

    Raises:
        InvalidKeyError: Empty key or invalid hex
    """
    return _process_key(public_key, "public")


def process_wallet_private_key(private_key: KeyInput) -> bytes:
    """
    Decode a wallet private key to bytes.

    Raises:
        InvalidKeyError: Empty key or invalid hex
    """
    return _process_key(private_key, "private")


class WalletKeyEncryptionService:
    """
    Encrypt/decrypt data for a wallet key pair.

    Separates key and data format handling from the ECIES primitives,
    which are delegated to the engine passed in.
    """

    def __init__(self, engine: ECIESEngine):
        self.engine = engine
        self.logger = ECIESLogger.get_logger(
            "WalletKeyService",
            log_dir=engine.settings.log_dir,
            level=engine.settings.log_level,
        )

    def encrypt_with_wallet_public_key(self, data: str, public_key: KeyInput) -> str:
        """
        Encrypt a string for a wallet owner.

        Args:
            data: Plaintext message
            public_key: Recipient wallet public key

        Returns:
            Hex payload (iv || ephemeral_public_key || ciphertext || mac), no 0x prefix

        Raises:
            InvalidKeyError: Invalid public key
            EncryptionFailedError: Encryption failure
        """
        payload = self.engine.encrypt_string(process_wallet_public_key(public_key), data)
        return codec.serialize(payload)

    def decrypt_with_wallet_private_key(self, encrypted_data: str, private_key: KeyInput) -> str:
        """
        Decrypt a hex payload produced by encrypt_with_wallet_public_key
        or by a legacy eccrypto client.

        Raises:
            InvalidKeyError: Invalid private key or ephemeral key
            DecryptionFailedError: Malformed payload or non UTF-8 plaintext
            MacMismatchError: Tampered payload or wrong key
        """
        private_key_bytes = process_wallet_private_key(private_key)
        payload = codec.deserialize(encrypted_data)
        self.logger.debug(f"Decrypting wallet payload ({payload.wire_length} bytes)")
        return self.engine.decrypt_string(private_key_bytes, payload)

    def encrypt_binary(self, data: BytesLike, public_key: KeyInput) -> EncryptedPayload:
        """Encrypt raw bytes; returns the structured payload."""
        return self.engine.encrypt(process_wallet_public_key(public_key), data)

    def decrypt_binary(self, encrypted: EncryptedPayload, private_key: KeyInput) -> bytes:
        """Decrypt a structured payload to raw bytes."""
        return self.engine.decrypt(process_wallet_private_key(private_key), encrypted)

    def get_engine(self) -> ECIESEngine:
        return self.engine
