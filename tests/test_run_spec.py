from __future__ import annotations

import json
from pathlib import Path

import pytest

from canonhuff.core.codec import DEFAULT_CHUNK_SIZE
from canonhuff.run_spec import RunSpecError, RunSpecV1, load_run_spec


def test_run_spec_inline_minimal() -> None:
    spec = load_run_spec(json.dumps({"spec": "canonhuff.run.v1"}))
    assert spec == RunSpecV1()
    assert spec.chunk_size == DEFAULT_CHUNK_SIZE
    assert spec.report == "text"
    assert spec.baselines == ()


def test_run_spec_full() -> None:
    obj = {
        "spec": "canonhuff.run.v1",
        "chunk_size": 4096,
        "report": "json",
        "baselines": ["zstd", "zlib", "zstd"],
        "zlib_level": 6,
        "zstd_level": 3,
    }
    spec = load_run_spec(json.dumps(obj))
    assert spec.chunk_size == 4096
    assert spec.report == "json"
    # dedup, ordine preservato
    assert spec.baselines == ("zstd", "zlib")
    assert (spec.zlib_level, spec.zstd_level) == (6, 3)


@pytest.mark.parametrize(
    "obj",
    [
        {"spec": "canonhuff.run.v2"},
        {"chunk_size": 10},
        {"spec": "canonhuff.run.v1", "wat": 1},
        {"spec": "canonhuff.run.v1", "chunk_size": 0},
        {"spec": "canonhuff.run.v1", "chunk_size": True},
        {"spec": "canonhuff.run.v1", "chunk_size": "64k"},
        {"spec": "canonhuff.run.v1", "report": "xml"},
        {"spec": "canonhuff.run.v1", "baselines": "zlib"},
        {"spec": "canonhuff.run.v1", "baselines": ["brotli"]},
        {"spec": "canonhuff.run.v1", "zstd_level": 23},
        {"spec": "canonhuff.run.v1", "zlib_level": -1},
    ],
)
def test_run_spec_rejected(obj: dict) -> None:
    with pytest.raises(RunSpecError):
        load_run_spec(json.dumps(obj))


def test_run_spec_bad_json() -> None:
    with pytest.raises(RunSpecError, match="JSON"):
        load_run_spec("{not json")
    with pytest.raises(RunSpecError, match="oggetto"):
        load_run_spec("[1, 2]")
    with pytest.raises(RunSpecError, match="vuoto"):
        load_run_spec("   ")


def test_run_spec_from_file(tmp_path: Path) -> None:
    p = tmp_path / "run.json"
    p.write_text(json.dumps({"spec": "canonhuff.run.v1", "report": "none"}), encoding="utf-8")
    spec = load_run_spec("@" + str(p))
    assert spec.report == "none"


def test_run_spec_missing_file(tmp_path: Path) -> None:
    with pytest.raises(RunSpecError, match="non trovato"):
        load_run_spec("@" + str(tmp_path / "missing.json"))


def test_overrides() -> None:
    spec = RunSpecV1(report="none", baselines=("zlib",))
    assert spec.with_overrides().report == "none"
    got = spec.with_overrides(report="json", baselines=("zstd",))
    assert got.report == "json"
    assert got.baselines == ("zstd",)
