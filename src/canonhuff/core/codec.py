"""Canonical Huffman byte codec.

Wire format (positional, no magic/version/length prefix):

    [257 x u8 code length, symbols 0..256][payload bits][zero padding]

The payload is the canonical code of every input byte in order, followed by the
code of EOF_SYMBOL (256). The decoder stops at EOF_SYMBOL, so padding bits are
never interpreted.
"""

from __future__ import annotations

import io
from collections.abc import Callable
from typing import BinaryIO, Tuple

from canonhuff.core.bitio import BitReader, BitWriter
from canonhuff.core.canonical import CanonicalCode
from canonhuff.core.freq_table import EOF_SYMBOL, SYMBOL_LIMIT, FrequencyTable
from canonhuff.core.tree import CodeTree, InternalNode, Leaf
from canonhuff.errors import (
    CorruptPayload,
    FormatConstraintViolation,
    InternalInvariantViolation,
    InvalidArgument,
    TruncatedHeader,
)

LENGTH_FIELD_BITS = 8
HEADER_SIZE = SYMBOL_LIMIT * LENGTH_FIELD_BITS // 8  # 257 byte
DEFAULT_CHUNK_SIZE = 64 * 1024


# -------------------
# Header: tabella delle lunghezze
# -------------------
def write_code_length_table(out: BitWriter, canon: CanonicalCode) -> None:
    for sym in range(canon.symbol_limit):
        n = canon.get_code_length(sym)
        if n >= 1 << LENGTH_FIELD_BITS:
            raise FormatConstraintViolation(
                f"codice troppo lungo per il simbolo {sym}: {n} bit (max {(1 << LENGTH_FIELD_BITS) - 1})"
            )
        out.write_uint(n, LENGTH_FIELD_BITS)


def read_code_length_table(inp: BitReader, symbol_limit: int = SYMBOL_LIMIT) -> CanonicalCode:
    lengths = []
    for sym in range(symbol_limit):
        try:
            lengths.append(inp.read_uint(LENGTH_FIELD_BITS))
        except CorruptPayload as e:
            raise TruncatedHeader(
                f"header troncato: letti {sym} di {symbol_limit} campi lunghezza"
            ) from e
    canon = CanonicalCode(lengths)
    if not canon.is_complete():
        raise CorruptPayload(f"tabella lunghezze non valida (somma di Kraft = {canon.kraft_sum()})")
    return canon


# -------------------
# Encoder / decoder di simboli
# -------------------
class HuffmanEncoder:
    def __init__(self, output: BitWriter, code_tree: CodeTree) -> None:
        self.output = output
        self.code_tree = code_tree

    def write(self, symbol: int) -> None:
        self.output.write_bits(self.code_tree.get_code(symbol))


class HuffmanDecoder:
    def __init__(self, inp: BitReader, code_tree: CodeTree) -> None:
        self.input = inp
        self.code_tree = code_tree

    def read(self) -> int:
        node = self.code_tree.root
        while True:
            bit = self.input.read()
            if bit == -1:
                raise CorruptPayload("payload troncato: manca il simbolo di fine stream")
            nxt = node.left if bit == 0 else node.right
            if isinstance(nxt, Leaf):
                return nxt.symbol
            if not isinstance(nxt, InternalNode):
                raise InternalInvariantViolation(f"tipo di nodo illegale: {type(nxt).__name__}")
            node = nxt


# -------------------
# Pipeline
# -------------------
def count_frequencies(inp: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> FrequencyTable:
    """Count pass. EOF_SYMBOL is forced to 1 so even empty input has a code."""
    freqs = FrequencyTable.zeros(SYMBOL_LIMIT)
    while True:
        chunk = inp.read(chunk_size)
        if not chunk:
            break
        freqs.count_bytes(chunk)
    freqs.increment(EOF_SYMBOL)
    return freqs


def build_canonical_code(freqs: FrequencyTable) -> Tuple[CanonicalCode, CodeTree]:
    """histogram -> Huffman tree -> lengths -> canonical tree."""
    tree = freqs.build_code_tree()
    canon = CanonicalCode.from_code_tree(tree, freqs.symbol_limit)
    return canon, canon.to_code_tree()


def encode_stream(
    code_tree: CodeTree, inp: BinaryIO, out: BitWriter, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> None:
    """Encode pass: every input byte, then EOF_SYMBOL."""
    enc = HuffmanEncoder(out, code_tree)
    # codici precalcolati: evita get_code() per ogni byte
    codes = [code_tree.get_code(b) if code_tree.has_code(b) else None for b in range(256)]
    while True:
        chunk = inp.read(chunk_size)
        if not chunk:
            break
        for b in chunk:
            bits = codes[b]
            if bits is None:
                # l'input è cambiato tra i due passaggi
                raise InvalidArgument(f"nessun codice per il byte {b}")
            out.write_bits(bits)
    enc.write(EOF_SYMBOL)


def compress_stream(
    open_input: Callable[[], BinaryIO], output: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> int:
    """Two-pass compression.

    ``open_input`` is called once per pass and must return a fresh binary stream
    positioned at the start; each stream is closed after its pass.
    Returns the number of payload bits (EOF code included, padding excluded).
    """
    if chunk_size <= 0:
        raise InvalidArgument(f"chunk_size deve essere > 0, non {chunk_size}")

    with open_input() as inp:
        freqs = count_frequencies(inp, chunk_size)

    canon, code_tree = build_canonical_code(freqs)

    with open_input() as inp, BitWriter(output) as out:
        write_code_length_table(out, canon)
        header_bits = out.bits_written
        encode_stream(code_tree, inp, out, chunk_size)
        return out.bits_written - header_bits


def decompress_stream(inp: BinaryIO, output: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """Decode until EOF_SYMBOL. Returns the number of bytes written."""
    reader = BitReader(inp, chunk_size)
    canon = read_code_length_table(reader)
    dec = HuffmanDecoder(reader, canon.to_code_tree())

    buf = bytearray()
    total = 0
    while True:
        sym = dec.read()
        if sym == EOF_SYMBOL:
            break
        buf.append(sym)
        if len(buf) >= chunk_size:
            output.write(bytes(buf))
            total += len(buf)
            buf.clear()
    if buf:
        output.write(bytes(buf))
        total += len(buf)
    return total


def compress_bytes(data: bytes) -> bytes:
    out = io.BytesIO()
    compress_stream(lambda: io.BytesIO(data), out)
    return out.getvalue()


def decompress_bytes(blob: bytes) -> bytes:
    out = io.BytesIO()
    decompress_stream(io.BytesIO(blob), out)
    return out.getvalue()
