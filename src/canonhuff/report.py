"""Compression report for a single `compress` run.

Determinism note:
the report dict depends only on the input content and the run options.
We DO NOT embed timestamps or absolute paths.

Baselines (optional) compress the same input with general-purpose codecs so the
Huffman result can be put in context: stdlib zlib and zstandard.
"""

from __future__ import annotations

import zlib
from pathlib import Path
from typing import Any

import zstandard as zstd

from canonhuff.core.codec import DEFAULT_CHUNK_SIZE
from canonhuff.files import CompressStats


def _zlib_size(path: Path, level: int, chunk_size: int) -> int:
    c = zlib.compressobj(level)
    n = 0
    with path.open("rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            n += len(c.compress(chunk))
    n += len(c.flush())
    return n


def _zstd_size(path: Path, level: int, chunk_size: int) -> int:
    c = zstd.ZstdCompressor(level=int(level)).compressobj()
    n = 0
    with path.open("rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            n += len(c.compress(chunk))
    n += len(c.flush())
    return n


def measure_baselines(
    path: str | Path,
    names: tuple[str, ...] | list[str],
    *,
    zlib_level: int = 9,
    zstd_level: int = 19,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> dict[str, int]:
    """Return {baseline: compressed size in bytes}, in the requested order."""
    p = Path(path)
    out: dict[str, int] = {}
    for name in names:
        if name == "zlib":
            out[name] = _zlib_size(p, zlib_level, chunk_size)
        elif name == "zstd":
            out[name] = _zstd_size(p, zstd_level, chunk_size)
        else:
            raise ValueError(f"baseline non supportata: {name}")
    return out


def _ratio(out_size: int, in_size: int) -> float:
    return 0.0 if in_size == 0 else out_size / in_size * 100.0


def build_compress_report(
    stats: CompressStats, baselines: dict[str, int] | None = None
) -> dict[str, Any]:
    baselines = baselines or {}
    return {
        "input_size": stats.input_size,
        "output_size": stats.output_size,
        "header_size": stats.header_size,
        "payload_bits": stats.payload_bits,
        "ratio_percent": round(stats.ratio_percent, 4),
        "baselines": {
            name: {"output_size": size, "ratio_percent": round(_ratio(size, stats.input_size), 4)}
            for name, size in baselines.items()
        },
    }


def render_report_text(report: dict[str, Any]) -> str:
    """Text report. Ratios come from the raw sizes, not the rounded dict values."""
    in_size = int(report["input_size"])
    lines = [
        f"Input file size: {report['input_size']} bytes",
        f"Output file size: {report['output_size']} bytes",
        f"Compression ratio: {_ratio(int(report['output_size']), in_size):.2f}%",
    ]
    for name, b in report.get("baselines", {}).items():
        lines.append(
            f"Baseline {name}: {b['output_size']} bytes ({_ratio(int(b['output_size']), in_size):.2f}%)"
        )
    return "\n".join(lines) + "\n"
