"""
Test per costanti di formato, tassonomia errori e data model EncryptedPayload
"""

import pytest

from protocols.ecies import (
    CIPHER,
    CURVE,
    ERROR_CLASSES,
    FORMAT,
    KDF,
    MAC,
    DecryptionFailedError,
    ECIESError,
    ECIESErrorCode,
    EcdhFailedError,
    EncryptedPayload,
    EncryptionFailedError,
    InvalidKeyError,
    MacMismatchError,
    is_encrypted_payload,
)


class TestFormatConstants:
    """Test valori del contratto wire"""

    def test_curve_sizes(self):
        assert CURVE.PRIVATE_KEY_LENGTH == 32
        assert CURVE.COMPRESSED_PUBLIC_KEY_LENGTH == 33
        assert CURVE.UNCOMPRESSED_PUBLIC_KEY_LENGTH == 65
        assert CURVE.PREFIX.UNCOMPRESSED == 0x04
        assert CURVE.COMPRESSED_PREFIXES == {0x02, 0x03}

    def test_cipher_kdf_mac(self):
        assert CIPHER.IV_LENGTH == 16
        assert CIPHER.BLOCK_SIZE == 16
        assert KDF.OUTPUT_LENGTH == 64
        assert (KDF.ENCRYPTION_KEY_OFFSET, KDF.ENCRYPTION_KEY_LENGTH) == (0, 32)
        assert (KDF.MAC_KEY_OFFSET, KDF.MAC_KEY_LENGTH) == (32, 32)
        assert MAC.LENGTH == 32

    def test_minimum_lengths(self):
        assert FORMAT.MIN_ENCRYPTED_LENGTH == 50
        assert FORMAT.MIN_UNCOMPRESSED_LENGTH == 114
        assert FORMAT.MIN_UNCOMPRESSED_LENGTH == FORMAT.IV_LENGTH + FORMAT.EPHEMERAL_KEY_LENGTH + FORMAT.MAC_LENGTH + 1

    def test_constants_are_frozen(self):
        with pytest.raises(Exception):
            CURVE.PRIVATE_KEY_LENGTH = 16


class TestErrorTaxonomy:
    """Test classi di errore e codici"""

    @pytest.mark.parametrize(
        "cls, code",
        [
            (InvalidKeyError, ECIESErrorCode.INVALID_KEY),
            (EncryptionFailedError, ECIESErrorCode.ENCRYPTION_FAILED),
            (DecryptionFailedError, ECIESErrorCode.DECRYPTION_FAILED),
            (MacMismatchError, ECIESErrorCode.MAC_MISMATCH),
            (EcdhFailedError, ECIESErrorCode.ECDH_FAILED),
        ],
    )
    def test_code_per_class(self, cls, code):
        error = cls("boom")
        assert isinstance(error, ECIESError)
        assert error.code == code
        assert error.message == "boom"
        assert ERROR_CLASSES[code] is cls

    def test_taxonomy_is_closed(self):
        assert set(ERROR_CLASSES) == set(ECIESErrorCode)

    def test_cause_is_kept(self):
        cause = ValueError("inner")
        error = DecryptionFailedError("outer", cause=cause)
        assert error.cause is cause
        assert "DECRYPTION_FAILED" in repr(error)


class TestEncryptedPayload:
    """Test data model"""

    def _payload(self):
        return EncryptedPayload(
            iv=bytearray(16),
            ephemeral_public_key=b"\x04" + bytes(64),
            ciphertext=memoryview(bytes(16)),
            mac=bytes(32),
        )

    def test_fields_are_converted_to_bytes(self):
        payload = self._payload()
        assert type(payload.iv) is bytes
        assert type(payload.ciphertext) is bytes

    def test_rejects_non_bytes_field(self):
        with pytest.raises(TypeError, match="mac must be bytes"):
            EncryptedPayload(iv=bytes(16), ephemeral_public_key=bytes(65), ciphertext=bytes(16), mac="00")

    def test_is_immutable(self):
        payload = self._payload()
        with pytest.raises(Exception):
            payload.iv = bytes(16)

    def test_dict_uses_eccrypto_field_names(self):
        data = self._payload().to_dict()
        assert set(data) == {"iv", "ephemPublicKey", "ciphertext", "mac"}
        assert data["ephemPublicKey"].startswith("04")
        assert EncryptedPayload.from_dict(data) == self._payload()

    def test_from_dict_accepts_snake_case_and_0x(self):
        data = {
            "iv": "0x" + "00" * 16,
            "ephemeral_public_key": "04" + "00" * 64,
            "ciphertext": bytes(16),
            "mac": "00" * 32,
        }
        assert EncryptedPayload.from_dict(data) == self._payload()

    def test_from_dict_missing_field(self):
        with pytest.raises(ValueError, match="Missing field: ephemPublicKey"):
            EncryptedPayload.from_dict({"iv": "00", "ciphertext": "00", "mac": "00"})

    def test_structural_type_guard(self):
        class Duck:
            iv = bytes(16)
            ephemeral_public_key = bytes(65)
            ciphertext = bytes(16)
            mac = bytes(32)

        assert is_encrypted_payload(self._payload())
        assert is_encrypted_payload(Duck())
        assert not is_encrypted_payload(object())
        assert not is_encrypted_payload({"iv": bytes(16)})
