"""
Best-effort secret scrubbing.

Python `bytes` are immutable: copies handed to third-party libraries cannot
be wiped. Derived secrets are therefore kept in `bytearray` buffers owned by
the engine and wiped in place on every exit path.
"""

from typing import Optional, Union


def wipe(buffer: Optional[Union[bytearray, memoryview]]) -> None:
    """Overwrite a mutable buffer with zeros in place. None and read-only views are ignored."""
    if buffer is None:
        return
    if isinstance(buffer, memoryview):
        if buffer.readonly:
            return
        buffer[:] = bytes(len(buffer))
        return
    buffer[:] = bytes(len(buffer))


def wipe_all(*buffers: Optional[Union[bytearray, memoryview]]) -> None:
    for buffer in buffers:
        wipe(buffer)
