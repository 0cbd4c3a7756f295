from __future__ import annotations

import hashlib
import os
from pathlib import Path

import pytest

from canonhuff.core.codec import HEADER_SIZE
from canonhuff.files import CompressStats, compress_file, decompress_file

pytestmark = pytest.mark.p1


def sha256_file(p: Path) -> str:
    return hashlib.sha256(p.read_bytes()).hexdigest()


def test_file_roundtrip_and_stats(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    out = tmp_path / "out.huf"
    back = tmp_path / "back.txt"
    data = ("FATTURA 1001\nRIGA ARTICOLO: vite M3 qty=10 prezzo=1.20\n" * 40).encode("utf-8")
    inp.write_bytes(data)

    st = compress_file(inp, out, chunk_size=333)
    assert st.input_size == len(data)
    assert st.output_size == out.stat().st_size
    assert st.header_size == HEADER_SIZE
    assert st.output_size == HEADER_SIZE + (st.payload_bits + 7) // 8
    assert st.output_size < st.input_size
    assert 0.0 < st.ratio_percent < 100.0

    ds = decompress_file(out, back)
    assert ds.output_size == len(data)
    assert back.read_bytes() == data


def test_empty_file(tmp_path: Path) -> None:
    inp = tmp_path / "empty.bin"
    inp.write_bytes(b"")
    out = tmp_path / "empty.huf"
    back = tmp_path / "empty.back"

    st = compress_file(inp, out)
    assert st.input_size == 0
    assert st.output_size == HEADER_SIZE + 1
    assert st.ratio_percent == 0.0

    decompress_file(out, back)
    assert back.read_bytes() == b""


def test_ratio_percent() -> None:
    st = CompressStats(input_size=200, output_size=50, header_size=HEADER_SIZE, payload_bits=0)
    assert st.ratio_percent == 25.0


def test_determinism_same_input_same_bytes(tmp_path: Path) -> None:
    inp = tmp_path / "in.bin"
    inp.write_bytes(os.urandom(2048) + b"ciao\n" * 100)

    out1 = tmp_path / "out1.huf"
    out2 = tmp_path / "out2.huf"
    compress_file(inp, out1)
    compress_file(inp, out2, chunk_size=17)
    assert sha256_file(out1) == sha256_file(out2), "output deve essere identico (determinismo)"


def test_missing_input_propagates_oserror(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        compress_file(tmp_path / "nope.bin", tmp_path / "out.huf")
