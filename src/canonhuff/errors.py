"""Typed errors for canonhuff.

Single source of truth for exit codes lives here.

Policy:
- Errors are small and boring.
- The CLI maps errors to stable exit codes (see EXIT_* constants).
- docs/exit_codes.md is generated from this module (`canonhuff exit-codes`).
- Nothing is retried: every failure is deterministic for a given input.
"""

from __future__ import annotations

from dataclasses import dataclass

# -------------------------
# Exit codes (single source)
# -------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_GENERIC = 10
EXIT_FORMAT_CONSTRAINT = 11
EXIT_INTERNAL_INVARIANT = 12
EXIT_HASH_MISMATCH = 13


@dataclass(frozen=True, slots=True)
class ExitCodeInfo:
    code: int
    name: str
    description: str


EXIT_CODES: tuple[ExitCodeInfo, ...] = (
    ExitCodeInfo(EXIT_OK, "OK", "Success"),
    ExitCodeInfo(EXIT_USAGE, "USAGE", "Usage/config error (invalid args, invalid run spec, etc.)"),
    ExitCodeInfo(
        EXIT_GENERIC,
        "GENERIC",
        "Generic failure (invalid argument, corrupt stream, I/O error, unexpected error)",
    ),
    ExitCodeInfo(
        EXIT_FORMAT_CONSTRAINT,
        "FORMAT_CONSTRAINT",
        "Code length does not fit the 8-bit header field",
    ),
    ExitCodeInfo(
        EXIT_INTERNAL_INVARIANT,
        "INTERNAL_INVARIANT",
        "Internal consistency failure (Kraft violation, bad tree shape): a bug, not bad input",
    ),
    ExitCodeInfo(EXIT_HASH_MISMATCH, "HASH_MISMATCH", "Decoded data differs from the original"),
)

_EXIT_CODE_BY_CODE: dict[int, ExitCodeInfo] = {e.code: e for e in EXIT_CODES}


def exit_code_info(code: int) -> ExitCodeInfo | None:
    return _EXIT_CODE_BY_CODE.get(int(code))


def render_exit_codes_markdown() -> str:
    """Render docs/exit_codes.md content."""
    lines: list[str] = []
    lines.append("# Exit codes\n")
    lines.append("> GENERATED FILE — do not edit manually.\n")
    lines.append("> Source of truth: `src/canonhuff/errors.py` (EXIT_CODES).\n")
    lines.append("> Regenerate: `canonhuff exit-codes > docs/exit_codes.md`.\n\n")
    lines.append("These are the CLI exit codes you can rely on.\n\n")
    lines.append("| Code | Name | Meaning |\n")
    lines.append("|---:|---|---|\n")
    for e in sorted(EXIT_CODES, key=lambda x: x.code):
        lines.append(f"| {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## Notes\n")
    lines.append("- Every library error extends `CanonHuffError` and carries an `exit_code`.\n")
    lines.append("- `--debug` re-raises errors to show full stack traces.\n")
    lines.append("- I/O errors are not wrapped; the CLI reports them as `GENERIC`.\n")
    return "".join(lines)


# ---------------
# Typed exceptions
# ---------------


class CanonHuffError(Exception):
    """Base error for canonhuff."""

    exit_code: int = EXIT_GENERIC


class UsageError(CanonHuffError):
    exit_code = EXIT_USAGE


class InvalidArgument(CanonHuffError, ValueError):
    """Contract violation: bad bit value, symbol out of range, negative symbol..."""

    exit_code = EXIT_GENERIC


class CorruptPayload(CanonHuffError):
    exit_code = EXIT_GENERIC


class TruncatedHeader(CorruptPayload):
    pass


class FormatConstraintViolation(CanonHuffError):
    exit_code = EXIT_FORMAT_CONSTRAINT


class InternalInvariantViolation(CanonHuffError):
    exit_code = EXIT_INTERNAL_INVARIANT


class HashMismatch(CanonHuffError):
    exit_code = EXIT_HASH_MISMATCH
