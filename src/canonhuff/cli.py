"""canonhuff CLI.

This is the stable CLI entrypoint (console-script: ``canonhuff``).

Thin glue only: argument parsing, reporting and exit codes. All the coding
work lives in ``canonhuff.core``.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from canonhuff.errors import (
    EXIT_GENERIC,
    EXIT_USAGE,
    CanonHuffError,
    UsageError,
    render_exit_codes_markdown,
)
from canonhuff.run_spec import BASELINES, REPORT_FORMATS, RunSpecError, RunSpecV1, load_run_spec


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")


def _load_spec(config: str | None) -> RunSpecV1:
    return load_run_spec(config) if config else RunSpecV1()


def _check_distinct_paths(input_path: Path, output_path: Path) -> None:
    # output is opened for writing before the input is read: same file => data loss
    if input_path.resolve() == output_path.resolve():
        raise UsageError(f"input e output coincidono: {input_path}")


def _compress(
    input_path: Path,
    output_path: Path,
    *,
    config: str | None,
    as_json: bool,
    report: str | None,
    baselines: list[str] | None,
) -> int:
    from canonhuff.files import compress_file
    from canonhuff.report import build_compress_report, measure_baselines, render_report_text

    _check_distinct_paths(input_path, output_path)
    spec = _load_spec(config).with_overrides(
        report="json" if as_json else report,
        baselines=tuple(dict.fromkeys(baselines)) if baselines else None,
    )

    stats = compress_file(input_path, output_path, chunk_size=spec.chunk_size)
    if spec.report == "none":
        return 0

    measured = (
        measure_baselines(
            input_path,
            spec.baselines,
            zlib_level=spec.zlib_level,
            zstd_level=spec.zstd_level,
            chunk_size=spec.chunk_size,
        )
        if spec.baselines
        else {}
    )
    rep = build_compress_report(stats, measured)
    if spec.report == "json":
        print(json.dumps(rep, sort_keys=True, separators=(",", ":")))
    else:
        sys.stdout.write(render_report_text(rep))
    return 0


def _decompress(input_path: Path, output_path: Path, *, config: str | None) -> int:
    from canonhuff.files import decompress_file

    _check_distinct_paths(input_path, output_path)
    spec = _load_spec(config)
    decompress_file(input_path, output_path, chunk_size=spec.chunk_size)
    return 0


def _verify(input_path: Path, *, against: Path | None, as_json: bool) -> int:
    from canonhuff.verify import verify_compressed_file

    res = verify_compressed_file(input_path, original=against)
    if as_json:
        print(json.dumps(res.as_dict(), sort_keys=True, separators=(",", ":")))
    else:
        print("OK")
    return 0


def _config_validate(spec_arg: str) -> int:
    # load is the validation
    load_run_spec(spec_arg)
    print("OK")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="canonhuff", description="Canonical Huffman file compressor")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_c = sub.add_parser("compress", help="Compress a file (two passes over the input)")
    p_c.add_argument("input", type=Path)
    p_c.add_argument("output", type=Path)
    p_c.add_argument(
        "--config",
        default=None,
        help="Run spec (JSON). Use '@file.json' to load from file, or pass JSON inline.",
    )
    p_c.add_argument("--json", action="store_true", help="Print the report as JSON")
    p_c.add_argument(
        "--report",
        choices=list(REPORT_FORMATS),
        default=None,
        help="Report format (overrides the run spec; --json wins)",
    )
    p_c.add_argument(
        "--baseline",
        action="append",
        choices=list(BASELINES),
        default=None,
        help="Also report the size obtained by a general-purpose codec (repeatable)",
    )
    _add_common_args(p_c)

    p_d = sub.add_parser("decompress", help="Decompress a file")
    p_d.add_argument("input", type=Path)
    p_d.add_argument("output", type=Path)
    p_d.add_argument("--config", default=None, help="Run spec (JSON, '@file.json' or inline)")
    _add_common_args(p_d)

    p_v = sub.add_parser("verify", help="Verify a compressed file (full decode)")
    p_v.add_argument("input", type=Path)
    p_v.add_argument(
        "--against", type=Path, default=None, help="Original file to compare (sha256)"
    )
    p_v.add_argument("--json", action="store_true", help="Print the result as JSON")
    _add_common_args(p_v)

    p_cv = sub.add_parser("config-validate", help="Validate a run spec (v1)")
    p_cv.add_argument("config", help="Run spec JSON (@file.json or inline JSON)")
    _add_common_args(p_cv)

    p_x = sub.add_parser("exit-codes", help="Print the exit code table (markdown)")
    _add_common_args(p_x)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    p = build_parser()
    ns = p.parse_args(argv)

    try:
        if ns.cmd == "compress":
            return _compress(
                ns.input,
                ns.output,
                config=ns.config,
                as_json=bool(ns.json),
                report=ns.report,
                baselines=ns.baseline,
            )
        if ns.cmd == "decompress":
            return _decompress(ns.input, ns.output, config=ns.config)
        if ns.cmd == "verify":
            return _verify(ns.input, against=ns.against, as_json=bool(ns.json))
        if ns.cmd == "config-validate":
            return _config_validate(str(ns.config))
        if ns.cmd == "exit-codes":
            sys.stdout.write(render_exit_codes_markdown())
            return 0
        raise AssertionError("unreachable")

    except SystemExit:
        raise
    except RunSpecError as e:
        # Treat as usage/config error.
        if getattr(ns, "debug", False):
            raise
        print(f"[canonhuff] {e}", file=sys.stderr)
        return EXIT_USAGE
    except CanonHuffError as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[canonhuff] {e}", file=sys.stderr)
        return int(getattr(e, "exit_code", EXIT_GENERIC) or EXIT_GENERIC)
    except Exception as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[canonhuff] error: {e}", file=sys.stderr)
        return EXIT_GENERIC


if __name__ == "__main__":
    raise SystemExit(main())
