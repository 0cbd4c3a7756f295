"""File-level compress/decompress.

The input file is opened twice (count pass, encode pass). Output files are
scoped to the call; a partial output left by a failure is not removed.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from canonhuff.core.codec import DEFAULT_CHUNK_SIZE, HEADER_SIZE, compress_stream, decompress_stream


@dataclass(frozen=True)
class CompressStats:
    input_size: int
    output_size: int
    header_size: int
    payload_bits: int

    @property
    def ratio_percent(self) -> float:
        """Output size as a percentage of input size (0.0 for empty input)."""
        if self.input_size == 0:
            return 0.0
        return self.output_size / self.input_size * 100.0


@dataclass(frozen=True)
class DecompressStats:
    input_size: int
    output_size: int


def compress_file(
    input_path: str | Path, output_path: str | Path, *, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> CompressStats:
    src = Path(input_path)
    dst = Path(output_path)
    with dst.open("wb") as out:
        payload_bits = compress_stream(lambda: src.open("rb"), out, chunk_size)
    return CompressStats(
        input_size=src.stat().st_size,
        output_size=dst.stat().st_size,
        header_size=HEADER_SIZE,
        payload_bits=payload_bits,
    )


def decompress_file(
    input_path: str | Path, output_path: str | Path, *, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> DecompressStats:
    src = Path(input_path)
    dst = Path(output_path)
    with src.open("rb") as inp, dst.open("wb") as out:
        n = decompress_stream(inp, out, chunk_size)
    return DecompressStats(input_size=src.stat().st_size, output_size=n)
