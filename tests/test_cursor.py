"""
Tests for the did:sol byte cursor.

These tests verify that the cursor:
- Reads little-endian integers, keys, strings and arrays in sequence
- Fails with BUFFER_UNDERRUN instead of returning short data
- Rejects invalid UTF-8 with INVALID_UTF8
"""

import struct

import pytest

from didsol.did.api_models import ErrorCode
from didsol.did.cursor import ByteCursor
from didsol.did.exceptions import DecodeError
from didsol.did.models import PublicKey


class TestFixedWidthReads:
    """Tests for integer and key reads."""

    def test_read_u8(self):
        cursor = ByteCursor(b"\x07\xff")
        assert cursor.read_u8() == 7
        assert cursor.read_u8() == 255
        assert cursor.remaining == 0

    def test_read_u32_little_endian(self):
        cursor = ByteCursor(b"\x01\x02\x00\x00")
        assert cursor.read_u32() == 0x0201
        assert cursor.offset == 4

    def test_read_u64_little_endian(self):
        cursor = ByteCursor(struct.pack("<Q", 2**40 + 5))
        assert cursor.read_u64() == 2**40 + 5

    def test_read_public_key(self):
        raw = bytes(range(32))
        cursor = ByteCursor(raw + b"\x00")
        key = cursor.read_public_key()
        assert isinstance(key, PublicKey)
        assert key.raw == raw
        assert cursor.offset == 32

    def test_short_public_key_is_underrun(self):
        """A 31-byte key is a buffer underrun, not a separate error kind."""
        with pytest.raises(DecodeError) as exc_info:
            ByteCursor(bytes(31)).read_public_key()
        assert exc_info.value.code == ErrorCode.BUFFER_UNDERRUN
        assert exc_info.value.offset == 0

    def test_underrun_does_not_advance(self):
        cursor = ByteCursor(b"\x01\x02")
        with pytest.raises(DecodeError):
            cursor.read_u32()
        assert cursor.offset == 0
        assert cursor.read_u8() == 1

    def test_empty_buffer(self):
        with pytest.raises(DecodeError) as exc_info:
            ByteCursor(b"").read_u8()
        assert exc_info.value.code == ErrorCode.BUFFER_UNDERRUN

    def test_buffer_is_copied(self):
        """Mutating the caller's buffer does not affect reads."""
        source = bytearray(b"\x05\x00\x00\x00")
        cursor = ByteCursor(source)
        source[0] = 9
        assert cursor.read_u32() == 5


class TestReadString:
    """Tests for length-prefixed strings."""

    def test_ascii(self):
        cursor = ByteCursor(b"\x03\x00\x00\x00abc")
        assert cursor.read_string() == "abc"
        assert cursor.remaining == 0

    def test_utf8(self):
        body = "schlüssel".encode("utf-8")
        cursor = ByteCursor(struct.pack("<I", len(body)) + body)
        assert cursor.read_string() == "schlüssel"

    def test_empty_string(self):
        assert ByteCursor(b"\x00\x00\x00\x00").read_string() == ""

    def test_length_past_end(self):
        """A length header longer than the buffer is an underrun, not truncation."""
        with pytest.raises(DecodeError) as exc_info:
            ByteCursor(b"\x05\x00\x00\x00abc").read_string()
        assert exc_info.value.code == ErrorCode.BUFFER_UNDERRUN
        assert exc_info.value.offset == 4

    def test_invalid_utf8(self):
        with pytest.raises(DecodeError) as exc_info:
            ByteCursor(b"\x02\x00\x00\x00\xff\xfe").read_string()
        assert exc_info.value.code == ErrorCode.INVALID_UTF8
        assert exc_info.value.offset == 4


class TestReadArray:
    """Tests for count-prefixed arrays."""

    def test_reads_count_elements(self):
        cursor = ByteCursor(b"\x03\x00\x00\x00\x0a\x0b\x0c\xff")
        assert cursor.read_array(lambda c: c.read_u8()) == [10, 11, 12]
        assert cursor.remaining == 1

    def test_empty_array(self):
        calls = []
        cursor = ByteCursor(b"\x00\x00\x00\x00")
        assert cursor.read_array(lambda c: calls.append(c)) == []
        assert calls == []

    def test_count_larger_than_buffer(self):
        """A count that cannot fit is rejected before any element is read."""
        calls = []

        def element(c):
            calls.append(c.offset)
            return c.read_u8()

        cursor = ByteCursor(b"\xff\xff\xff\xff\x01\x02")
        with pytest.raises(DecodeError) as exc_info:
            cursor.read_array(element)
        assert exc_info.value.code == ErrorCode.BUFFER_UNDERRUN
        assert calls == []

    def test_element_failure_propagates(self):
        """An element failure aborts the whole array."""
        data = b"\x02\x00\x00\x00" + b"\x01\x00\x00\x00a" + b"\x01\x00\x00\x00\xff"
        with pytest.raises(DecodeError) as exc_info:
            ByteCursor(data).read_array(lambda c: c.read_string())
        assert exc_info.value.code == ErrorCode.INVALID_UTF8

    def test_zero_width_elements(self):
        """Zero-width elements are read count times even past the buffer end."""
        cursor = ByteCursor(b"\x05\x00\x00\x00")
        assert cursor.read_array(lambda c: None, min_element_size=0) == [None] * 5
        assert cursor.remaining == 0

    def test_min_element_size_guard(self):
        """Two 32-byte elements cannot fit in 40 bytes."""
        cursor = ByteCursor(b"\x02\x00\x00\x00" + bytes(40))
        with pytest.raises(DecodeError) as exc_info:
            cursor.read_array(lambda c: c.read_public_key(), min_element_size=32)
        assert exc_info.value.code == ErrorCode.BUFFER_UNDERRUN
        assert exc_info.value.offset == 4
        assert cursor.remaining == 40
