"""
Costanti e utility condivise dai test (importabili, a differenza di conftest).
"""

KNOWN_PRIVATE_KEY = bytes.fromhex("1234567890abcdef" * 4)

# Fixed ephemeral scalar and IV for byte-exact comparisons
FIXED_EPHEMERAL_KEY = bytes.fromhex("0f" * 32)
FIXED_IV = bytes(range(16))


class ScriptedRandom:
    """
    Random source that returns predefined chunks in order.

    Each call must request exactly the length of the next chunk, which makes
    the order of random draws part of the assertion.
    """

    def __init__(self, *chunks: bytes):
        self._chunks = list(chunks)
        self.calls = []

    def __call__(self, length: int) -> bytes:
        assert self._chunks, f"Unexpected random draw of {length} bytes"
        chunk = self._chunks.pop(0)
        assert len(chunk) == length, f"Expected draw of {len(chunk)} bytes, got request for {length}"
        self.calls.append(length)
        return chunk

    @property
    def exhausted(self) -> bool:
        return not self._chunks
