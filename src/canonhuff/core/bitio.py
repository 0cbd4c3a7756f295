"""MSB-first bit I/O over binary streams.

The writer pads the last partial byte with zero bits on close. Padding is not
self-describing: a reader must stop at the end-of-stream symbol, not at the end
of the data.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import BinaryIO

from canonhuff.errors import CorruptPayload, InvalidArgument

FLUSH_THRESHOLD = 64 * 1024


class BitWriter:
    def __init__(self, output: BinaryIO) -> None:
        if output is None:
            raise InvalidArgument("output nullo")
        self._output = output
        self._buf = bytearray()
        self._current_byte = 0
        self._num_bits_filled = 0
        self.bits_written = 0
        self.closed = False

    def write(self, bit: int) -> None:
        if not isinstance(bit, int) or bit not in (0, 1):
            raise InvalidArgument(f"il bit deve essere 0 o 1, non {bit!r}")
        if self.closed:
            raise InvalidArgument("BitWriter già chiuso")
        self._current_byte = (self._current_byte << 1) | bit
        self._num_bits_filled += 1
        self.bits_written += 1
        if self._num_bits_filled == 8:
            self._buf.append(self._current_byte)
            self._current_byte = 0
            self._num_bits_filled = 0
            if len(self._buf) >= FLUSH_THRESHOLD:
                self._flush_buffer()

    def write_bits(self, bits: Iterable[int]) -> None:
        for bit in bits:
            self.write(bit)

    def write_uint(self, value: int, width: int) -> None:
        """Write ``value`` as ``width`` bits, most significant first."""
        if value < 0 or value >> width:
            raise InvalidArgument(f"{value} non rappresentabile su {width} bit")
        for j in range(width - 1, -1, -1):
            self.write((value >> j) & 1)

    def _flush_buffer(self) -> None:
        if self._buf:
            self._output.write(bytes(self._buf))
            self._buf.clear()

    def close(self) -> None:
        """Zero-pad to a byte boundary and flush. The sink itself stays open."""
        if self.closed:
            return
        while self._num_bits_filled != 0:
            self._current_byte <<= 1
            self._num_bits_filled += 1
            if self._num_bits_filled == 8:
                self._buf.append(self._current_byte)
                self._current_byte = 0
                self._num_bits_filled = 0
        self._flush_buffer()
        self._output.flush()
        self.closed = True

    def __enter__(self) -> "BitWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # on error the partial byte is still padded and flushed: the caller
        # owns cleanup of the partial output
        self.close()


class BitReader:
    def __init__(self, source: BinaryIO, chunk_size: int = FLUSH_THRESHOLD) -> None:
        self._source = source
        self._chunk_size = int(chunk_size)
        self._chunk = b""
        self._pos = 0
        self._current_byte = 0
        self._num_bits_remaining = 0
        self.bits_read = 0

    def _next_byte(self) -> int:
        if self._pos >= len(self._chunk):
            self._chunk = self._source.read(self._chunk_size)
            self._pos = 0
            if not self._chunk:
                return -1
        b = self._chunk[self._pos]
        self._pos += 1
        return b

    def read(self) -> int:
        """Next bit (0/1), or -1 at end of data."""
        if self._num_bits_remaining == 0:
            b = self._next_byte()
            if b == -1:
                return -1
            self._current_byte = b
            self._num_bits_remaining = 8
        self._num_bits_remaining -= 1
        self.bits_read += 1
        return (self._current_byte >> self._num_bits_remaining) & 1

    def read_no_eof(self) -> int:
        bit = self.read()
        if bit == -1:
            raise CorruptPayload("fine dei dati inattesa")
        return bit

    def read_uint(self, width: int) -> int:
        value = 0
        for _ in range(width):
            value = (value << 1) | self.read_no_eof()
        return value
