"""
ECIES Engine (secp256k1, eccrypto-compatible)

Orchestrates encryption and decryption on top of a CryptoPrimitives backend.
The engine owns every piece of protocol logic; backends only wrap libraries.

Encryption Flow:
1. Normalize recipient public key to 65 bytes (0x04 || X || Y)
2. Generate ephemeral key pair (redraw until the scalar is valid)
3. ECDH: raw X coordinate of ephemeral_sk * recipient_pk
4. KDF: SHA-512(shared_x) -> encryption_key (32B) || mac_key (32B)
5. AES-256-CBC(encryption_key, random iv, message) with PKCS#7
6. MAC: HMAC-SHA256(mac_key, iv || ephemeral_pk || ciphertext)  (encrypt-then-MAC)

Decryption verifies the MAC in constant time before any ciphertext byte is
decrypted. Derived secrets live in bytearrays and are wiped on every exit path.

Author: ECIES Core Project
Date: October 2026
"""

import hmac
import time
from typing import Optional, Union

from config.ecies_config import ECIES_SETTINGS, ECIESSettings
from interfaces.crypto_interfaces import CryptoPrimitives, RandomSource
from utils.encoding import BytesLike, is_bytes_like
from utils.key_cache import PublicKeyValidationCache
from utils.logger import ECIESLogger
from utils.metrics import MetricsCollector, get_metrics_collector
from utils.zeroize import wipe_all

from . import codec
from .constants import CIPHER, CURVE, KDF, MAC
from .errors import (
    DecryptionFailedError,
    ECIESError,
    EcdhFailedError,
    EncryptionFailedError,
    InvalidKeyError,
    MacMismatchError,
)
from .payload import EncryptedPayload, is_encrypted_payload


def generate_private_key(backend: CryptoPrimitives) -> bytearray:
    """
    Genera uno scalare secp256k1 valido dalla sorgente random del backend.

    Restituisce un bytearray: il chiamante lo azzera con wipe_all quando
    non serve più.
    """
    # A random 32 byte string is >= n with probability ~2^-128; redraw until valid
    while True:
        candidate = bytearray(backend.random_bytes(CURVE.PRIVATE_KEY_LENGTH))
        if backend.is_valid_private_key(bytes(candidate)):
            return candidate
        wipe_all(candidate)


class ECIESEngine:
    """
    Platform-independent ECIES engine.

    Args:
        backend: Crypto primitive implementation (native or software)
        settings: Runtime settings (defaults to ECIES_SETTINGS)
        cache_size: Override for the public key validation cache size
        metrics: Collector to record operations in (defaults to the global
            collector when settings.metrics_enabled)

    Example:
        >>> from protocols.backends import NativeSecp256k1Backend
        >>> engine = ECIESEngine(NativeSecp256k1Backend())
        >>> payload = engine.encrypt(recipient_public_key, b"grant document")
        >>> engine.decrypt(recipient_private_key, payload)
        b'grant document'
    """

    def __init__(
        self,
        backend: CryptoPrimitives,
        settings: Optional[ECIESSettings] = None,
        cache_size: Optional[int] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        if not isinstance(backend, CryptoPrimitives):
            raise TypeError(f"backend must implement CryptoPrimitives, got {type(backend).__name__}")

        self.settings = settings or ECIES_SETTINGS
        self.backend = backend
        self._key_cache = PublicKeyValidationCache(
            self.settings.validation_cache_size if cache_size is None else cache_size
        )
        if metrics is None and self.settings.metrics_enabled:
            metrics = get_metrics_collector(self.settings.metrics_max_samples)
        self._metrics = metrics
        self.logger = ECIESLogger.get_logger(
            "ECIESEngine",
            log_dir=self.settings.log_dir,
            level=self.settings.log_level,
        )
        # Cached by name: the level follows the newest engine, log_dir stays the first one
        ECIESLogger.set_level("ECIESEngine", self.settings.log_level)

    # ------------------------------------------------------------------
    # Public key normalization
    # ------------------------------------------------------------------

    def normalize_public_key(self, public_key: BytesLike) -> bytes:
        """
        Normalize a public key to 65 byte uncompressed form.

        - 65 bytes, prefix 0x04: validated on-curve, returned as-is
        - 33 bytes, prefix 0x02/0x03: validated and decompressed
        - anything else (including raw 64 byte coordinates): InvalidKeyError

        Results for immutable bytes objects are cached by object identity.

        Raises:
            InvalidKeyError: Wrong length, prefix or off-curve point
        """
        if not is_bytes_like(public_key):
            raise InvalidKeyError(f"Public key must be bytes, got {type(public_key).__name__}")

        cached = self._key_cache.get(public_key)
        if cached is not None:
            self.logger.debug("Public key validation cache hit")
            return cached

        key = bytes(public_key)
        length = len(key)

        if length == CURVE.UNCOMPRESSED_PUBLIC_KEY_LENGTH:
            if key[0] != CURVE.PREFIX.UNCOMPRESSED:
                raise InvalidKeyError(
                    f"Invalid uncompressed public key: expected 0x04 prefix, got 0x{key[0]:02x}"
                )
            if not self.backend.is_valid_public_key(key):
                raise InvalidKeyError("Invalid uncompressed public key: point is not on the secp256k1 curve")
            normalized = key

        elif length == CURVE.COMPRESSED_PUBLIC_KEY_LENGTH:
            if key[0] not in CURVE.COMPRESSED_PREFIXES:
                raise InvalidKeyError(
                    f"Invalid compressed public key: expected 0x02 or 0x03 prefix, got 0x{key[0]:02x}"
                )
            if not self.backend.is_valid_public_key(key):
                raise InvalidKeyError("Invalid compressed public key: point is not on the secp256k1 curve")
            normalized = self.backend.decompress_public_key(key)
            if (
                normalized is None
                or len(normalized) != CURVE.UNCOMPRESSED_PUBLIC_KEY_LENGTH
                or normalized[0] != CURVE.PREFIX.UNCOMPRESSED
            ):
                raise InvalidKeyError("Failed to decompress public key")
            normalized = bytes(normalized)

        else:
            raise InvalidKeyError(
                f"Invalid public key format: expected {CURVE.COMPRESSED_PUBLIC_KEY_LENGTH} (compressed) "
                f"or {CURVE.UNCOMPRESSED_PUBLIC_KEY_LENGTH} (uncompressed) bytes, got {length}"
            )

        self._key_cache.put(public_key, normalized)
        return normalized

    normalize_to_uncompressed = normalize_public_key

    # ------------------------------------------------------------------
    # Encryption
    # ------------------------------------------------------------------

    def encrypt(self, public_key: BytesLike, message: BytesLike) -> EncryptedPayload:
        """
        Encrypt `message` to `public_key`.

        Args:
            public_key: Recipient key, 33 byte compressed or 65 byte uncompressed
            message: Data to encrypt (may be empty)

        Returns:
            EncryptedPayload with a 65 byte ephemeral key

        Raises:
            InvalidKeyError: If the public key is invalid
            EcdhFailedError: If key agreement fails
            EncryptionFailedError: Any other failure
        """
        start = time.perf_counter()
        try:
            payload = self._encrypt(public_key, message)
        except ECIESError as e:
            self._record("encrypt", start, e)
            raise
        self._record("encrypt", start)
        return payload

    def encrypt_string(self, public_key: BytesLike, message: str) -> EncryptedPayload:
        """Encrypt a UTF-8 string."""
        if not isinstance(message, str):
            raise EncryptionFailedError(f"Message must be a string, got {type(message).__name__}")
        return self.encrypt(public_key, message.encode("utf-8"))

    def _encrypt(self, public_key: BytesLike, message: BytesLike) -> EncryptedPayload:
        if not is_bytes_like(public_key):
            raise InvalidKeyError(f"Public key must be bytes, got {type(public_key).__name__}")
        if not is_bytes_like(message):
            raise EncryptionFailedError(f"Message must be bytes, got {type(message).__name__}")
        if len(public_key) == 0:
            raise InvalidKeyError("Public key cannot be empty")

        recipient_key = self.normalize_public_key(public_key)

        ephemeral_private_key = shared_x = kdf = encryption_key = mac_key = None
        try:
            ephemeral_private_key = generate_private_key(self.backend)

            ephemeral_public_key = self.backend.derive_public_key(bytes(ephemeral_private_key), compressed=False)
            if (
                ephemeral_public_key is None
                or len(ephemeral_public_key) != CURVE.UNCOMPRESSED_PUBLIC_KEY_LENGTH
                or ephemeral_public_key[0] != CURVE.PREFIX.UNCOMPRESSED
            ):
                raise EncryptionFailedError("Failed to generate ephemeral public key")
            ephemeral_public_key = bytes(ephemeral_public_key)

            shared_x = self._shared_x(recipient_key, ephemeral_private_key)
            kdf, encryption_key, mac_key = self._derive_keys(shared_x)

            iv = self.backend.random_bytes(CIPHER.IV_LENGTH)
            ciphertext = bytes(self.backend.aes256cbc_encrypt(bytes(encryption_key), iv, bytes(message)))

            mac = bytes(self.backend.hmac_sha256(bytes(mac_key), iv + ephemeral_public_key + ciphertext))

            self.logger.debug(
                f"Encrypted {len(message)} bytes with backend={self.backend.name} "
                f"(ciphertext {len(ciphertext)} bytes)"
            )
            return EncryptedPayload(
                iv=iv,
                ephemeral_public_key=ephemeral_public_key,
                ciphertext=ciphertext,
                mac=mac,
            )
        except ECIESError:
            raise
        except Exception as e:
            raise EncryptionFailedError(f"Encryption failed: {e}", cause=e) from e
        finally:
            wipe_all(ephemeral_private_key, shared_x, kdf, encryption_key, mac_key)

    def _shared_x(self, public_key: bytes, private_key: Union[bytes, bytearray]) -> bytearray:
        shared_x = bytearray(self.backend.ecdh_x_coordinate(public_key, bytes(private_key)))
        if len(shared_x) != CURVE.COORDINATE_LENGTH:
            wipe_all(shared_x)
            raise EcdhFailedError(
                f"ECDH returned {len(shared_x)} bytes, expected {CURVE.COORDINATE_LENGTH}"
            )
        return shared_x

    def _derive_keys(self, shared_x: bytearray):
        """SHA-512 KDF. Returns (kdf, encryption_key, mac_key) as wipeable bytearrays."""
        kdf = bytearray(self.backend.sha512(bytes(shared_x)))
        if len(kdf) != KDF.OUTPUT_LENGTH:
            wipe_all(kdf)
            raise ValueError(f"KDF returned {len(kdf)} bytes, expected {KDF.OUTPUT_LENGTH}")
        encryption_key = kdf[KDF.ENCRYPTION_KEY_OFFSET:KDF.ENCRYPTION_KEY_OFFSET + KDF.ENCRYPTION_KEY_LENGTH]
        mac_key = kdf[KDF.MAC_KEY_OFFSET:KDF.MAC_KEY_OFFSET + KDF.MAC_KEY_LENGTH]
        return kdf, encryption_key, mac_key

    # ------------------------------------------------------------------
    # Decryption
    # ------------------------------------------------------------------

    def decrypt(self, private_key: BytesLike, payload: EncryptedPayload) -> bytes:
        """
        Decrypt a payload produced by encrypt() or by legacy eccrypto.

        The MAC is checked over the ephemeral key bytes exactly as received,
        and no decryption is attempted if it does not match.

        Args:
            private_key: Recipient private key (32 bytes)
            payload: EncryptedPayload (or any object with the same four fields)

        Returns:
            Plaintext bytes

        Raises:
            InvalidKeyError: Invalid private key or ephemeral public key
            DecryptionFailedError: Malformed payload or padding failure
            MacMismatchError: Authentication failure (tampering or wrong key)
            EcdhFailedError: If key agreement fails
        """
        start = time.perf_counter()
        try:
            plaintext = self._decrypt(private_key, payload)
        except ECIESError as e:
            self._record("decrypt", start, e)
            raise
        self._record("decrypt", start)
        return plaintext

    def decrypt_string(self, private_key: BytesLike, payload: EncryptedPayload) -> str:
        """Decrypt and decode as UTF-8."""
        plaintext = self.decrypt(private_key, payload)
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionFailedError(f"Decrypted data is not valid UTF-8: {e}", cause=e) from e

    def _decrypt(self, private_key: BytesLike, payload: EncryptedPayload) -> bytes:
        if not is_bytes_like(private_key):
            raise InvalidKeyError(f"Private key must be bytes, got {type(private_key).__name__}")
        if len(private_key) != CURVE.PRIVATE_KEY_LENGTH:
            raise InvalidKeyError(
                f"Invalid private key length: expected {CURVE.PRIVATE_KEY_LENGTH} bytes, got {len(private_key)}"
            )
        if not self.backend.is_valid_private_key(bytes(private_key)):
            raise InvalidKeyError("Invalid private key")

        if not is_encrypted_payload(payload):
            raise DecryptionFailedError("Invalid encrypted data structure")
        iv, ephemeral_public_key, ciphertext, mac = self._validate_payload_structure(payload)

        recipient_view_key = self.normalize_public_key(payload.ephemeral_public_key)

        shared_x = kdf = encryption_key = mac_key = None
        try:
            shared_x = self._shared_x(recipient_view_key, private_key)
            kdf, encryption_key, mac_key = self._derive_keys(shared_x)

            # MAC over the key bytes as transmitted, not the normalized form
            expected_mac = self.backend.hmac_sha256(bytes(mac_key), iv + ephemeral_public_key + ciphertext)
            if not hmac.compare_digest(bytes(expected_mac), mac):
                self.logger.warning(f"MAC verification failed (backend={self.backend.name})")
                raise MacMismatchError("MAC verification failed")

            try:
                plaintext = self.backend.aes256cbc_decrypt(bytes(encryption_key), iv, ciphertext)
            except ValueError as e:
                raise DecryptionFailedError(f"Decryption failed: {e}", cause=e) from e

            self.logger.debug(f"Decrypted {len(plaintext)} bytes with backend={self.backend.name}")
            return bytes(plaintext)
        except ECIESError:
            raise
        except Exception as e:
            raise DecryptionFailedError(f"Decryption failed: {e}", cause=e) from e
        finally:
            wipe_all(shared_x, kdf, encryption_key, mac_key)

    @staticmethod
    def _validate_payload_structure(payload):
        """Field lengths; returns (iv, ephemeral_public_key, ciphertext, mac) as bytes."""
        iv = bytes(payload.iv)
        ephemeral_public_key = bytes(payload.ephemeral_public_key)
        ciphertext = bytes(payload.ciphertext)
        mac = bytes(payload.mac)

        if len(iv) != CIPHER.IV_LENGTH:
            raise DecryptionFailedError(f"Invalid IV length: expected {CIPHER.IV_LENGTH} bytes, got {len(iv)}")
        if len(mac) != MAC.LENGTH:
            raise DecryptionFailedError(f"Invalid MAC length: expected {MAC.LENGTH} bytes, got {len(mac)}")
        if not ciphertext or len(ciphertext) % CIPHER.BLOCK_SIZE:
            raise DecryptionFailedError(
                f"Invalid ciphertext length: {len(ciphertext)} bytes "
                f"(must be a positive multiple of {CIPHER.BLOCK_SIZE})"
            )
        if len(ephemeral_public_key) not in (
            CURVE.COMPRESSED_PUBLIC_KEY_LENGTH,
            CURVE.UNCOMPRESSED_PUBLIC_KEY_LENGTH,
        ):
            raise DecryptionFailedError(
                f"Invalid ephemeral public key length: {len(ephemeral_public_key)} bytes"
            )
        return iv, ephemeral_public_key, ciphertext, mac

    # ------------------------------------------------------------------
    # Wire format
    # ------------------------------------------------------------------

    @staticmethod
    def serialize(payload: EncryptedPayload) -> str:
        """Canonical hex (see protocols.ecies.codec.serialize)."""
        return codec.serialize(payload)

    @staticmethod
    def deserialize(data: Union[str, BytesLike]) -> EncryptedPayload:
        """Strict parse (see protocols.ecies.codec.deserialize)."""
        return codec.deserialize(data)

    # ------------------------------------------------------------------
    # Monitoring
    # ------------------------------------------------------------------

    def cache_stats(self):
        return self._key_cache.stats()

    def clear_cache(self) -> None:
        self._key_cache.clear()

    def _record(self, operation: str, start: float, error: Optional[ECIESError] = None) -> None:
        if self._metrics is None:
            return
        self._metrics.record_operation(
            operation=operation,
            backend=self.backend.name,
            success=error is None,
            latency_ms=(time.perf_counter() - start) * 1000,
            error_code=error.code.value if error is not None else None,
        )

    def __repr__(self) -> str:
        return f"ECIESEngine(backend={self.backend.name!r})"


def create_engine(
    backend: Optional[Union[str, CryptoPrimitives]] = None,
    settings: Optional[ECIESSettings] = None,
    rng: Optional[RandomSource] = None,
    **kwargs,
) -> ECIESEngine:
    """
    Build an engine from a backend name/instance and settings.

    Args:
        backend: Backend instance or name; defaults to settings.backend
        settings: Runtime settings (defaults to ECIES_SETTINGS)
        rng: Random source for a backend created by name
        **kwargs: Forwarded to ECIESEngine (cache_size, metrics)

    Raises:
        ValueError: Unknown backend name
    """
    from protocols.backends import get_backend

    settings = settings or ECIES_SETTINGS
    if backend is None:
        backend = settings.backend
    if isinstance(backend, str):
        backend = get_backend(backend, rng=rng)
    return ECIESEngine(backend, settings=settings, **kwargs)
