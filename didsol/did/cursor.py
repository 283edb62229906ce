"""
Byte cursor for did:sol account data.

The program serializes accounts with Borsh conventions:
- Integers are little-endian
- Strings are a u32 byte length followed by UTF-8 bytes
- Vectors are a u32 element count followed by the elements
- Public keys are 32 raw bytes

Reads are strictly sequential. Every read checks the remaining length
first and raises DecodeError (BUFFER_UNDERRUN) instead of returning
short data.
"""

import struct
from typing import Callable, List, TypeVar

from didsol.core.config import LENGTH_PREFIX_SIZE, PUBLIC_KEY_LENGTH

from .exceptions import DecodeError
from .models import PublicKey

T = TypeVar("T")


class ByteCursor:
    """Sequential reader over an immutable byte buffer."""

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def _take(self, n: int) -> bytes:
        if n > self.remaining:
            raise DecodeError.buffer_underrun(n, self._offset, self.remaining)
        chunk = self._data[self._offset : self._offset + n]
        self._offset += n
        return chunk

    def read_bytes(self, n: int) -> bytes:
        return self._take(n)

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u32(self) -> int:
        (value,) = struct.unpack("<I", self._take(4))
        return value

    def read_u64(self) -> int:
        (value,) = struct.unpack("<Q", self._take(8))
        return value

    def read_public_key(self) -> PublicKey:
        return PublicKey(self._take(PUBLIC_KEY_LENGTH))

    def read_string(self) -> str:
        """Read a u32 length-prefixed UTF-8 string.

        Raises:
            DecodeError: BUFFER_UNDERRUN if the header or body is short,
                INVALID_UTF8 if the body does not decode.
        """
        length = self.read_u32()
        start = self._offset
        raw = self._take(length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError.invalid_utf8(start, str(e))

    def read_array(
        self,
        element_decoder: Callable[["ByteCursor"], T],
        min_element_size: int = 1,
    ) -> List[T]:
        """Read a u32 count, then call ``element_decoder`` that many times.

        Args:
            element_decoder: Reads one element from this cursor.
            min_element_size: Fewest bytes one element can occupy. A count
                whose elements cannot fit in the remaining buffer is rejected
                before any element is read. Pass 0 for zero-width elements.

        The first element failure propagates; no partial list is returned.
        """
        start = self._offset
        count = self.read_u32()
        if count * min_element_size > self.remaining:
            raise DecodeError.buffer_underrun(
                count * min_element_size, start + LENGTH_PREFIX_SIZE, self.remaining
            )
        return [element_decoder(self) for _ in range(count)]
