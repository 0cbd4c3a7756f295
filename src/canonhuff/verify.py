"""Verification of a compressed file.

Light checks always run: header present, length table Kraft-complete, full
decode reaching the end-of-stream symbol. With ``original`` the decoded bytes
are also compared (sha256) against the source file.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path

from canonhuff.core.bitio import BitReader
from canonhuff.core.codec import (
    DEFAULT_CHUNK_SIZE,
    HEADER_SIZE,
    HuffmanDecoder,
    read_code_length_table,
)
from canonhuff.core.freq_table import EOF_SYMBOL
from canonhuff.errors import CorruptPayload, HashMismatch, TruncatedHeader


@dataclass(frozen=True)
class VerifyResult:
    path: str
    compressed_size: int
    decoded_size: int
    used_symbols: int
    max_code_length: int
    padding_bits: int
    decoded_sha256: str
    original_sha256: str | None = None

    def as_dict(self) -> dict[str, object]:
        return {
            "ok": True,
            "path": self.path,
            "compressed_size": self.compressed_size,
            "decoded_size": self.decoded_size,
            "used_symbols": self.used_symbols,
            "max_code_length": self.max_code_length,
            "padding_bits": self.padding_bits,
            "decoded_sha256": self.decoded_sha256,
            "original_sha256": self.original_sha256,
        }


def _sha256_file(p: Path, chunk_size: int) -> str:
    h = hashlib.sha256()
    with p.open("rb") as f:
        while True:
            b = f.read(chunk_size)
            if not b:
                break
            h.update(b)
    return h.hexdigest()


def verify_compressed_file(
    path: str | Path,
    *,
    original: str | Path | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> VerifyResult:
    p = Path(path)
    size = p.stat().st_size
    if size < HEADER_SIZE:
        raise TruncatedHeader(f"file troppo corto: {size} byte (header = {HEADER_SIZE})")

    h = hashlib.sha256()
    n = 0
    with p.open("rb") as f:
        reader = BitReader(f, chunk_size)
        canon = read_code_length_table(reader)
        dec = HuffmanDecoder(reader, canon.to_code_tree())
        buf = bytearray()
        while True:
            sym = dec.read()
            if sym == EOF_SYMBOL:
                break
            buf.append(sym)
            if len(buf) >= chunk_size:
                h.update(buf)
                n += len(buf)
                buf.clear()
        h.update(buf)
        n += len(buf)
        padding_bits = 0
        while True:
            bit = reader.read()
            if bit == -1:
                break
            padding_bits += 1
            if bit != 0 or padding_bits >= 8:
                raise CorruptPayload("dati inattesi dopo il simbolo di fine stream")

    lengths = canon.code_lengths
    decoded_sha = h.hexdigest()

    orig_sha: str | None = None
    if original is not None:
        orig_sha = _sha256_file(Path(original), chunk_size)
        if orig_sha != decoded_sha:
            raise HashMismatch(f"dati decodificati diversi dall'originale: {original}")

    return VerifyResult(
        path=str(p),
        compressed_size=size,
        decoded_size=n,
        used_symbols=sum(1 for x in lengths if x > 0),
        max_code_length=max(lengths),
        padding_bits=padding_bits,
        decoded_sha256=decoded_sha,
        original_sha256=orig_sha,
    )
