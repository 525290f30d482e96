"""Prepare-for-upload command."""

from pathlib import Path

from gearsig.commands.common import read_input_text
from gearsig.constants import ExitCode, MAX_PAYLOAD_BYTES
from gearsig.core.errors import GearsigError, LimitExceeded
from gearsig.upload_pipeline import prepare_upload


def run(args):
    text = read_input_text(args.path)
    if text is None:
        print(f"error: file not found: {args.path}")
        return ExitCode.USAGE

    try:
        prepared = prepare_upload(text)
    except LimitExceeded as exc:
        print(f"error: over firmware limit: {exc}")
        return ExitCode.RUNTIME_ERROR
    except GearsigError as exc:
        print(f"error: {exc}")
        return ExitCode.RUNTIME_ERROR

    for warning in prepared.warnings:
        print(f"warning: {warning}")

    counts = ", ".join(f"{ch}={n}" for ch, n in prepared.edge_counts.items())
    print(f"prepare ok: {prepared.kind.value} config '{prepared.device.name}' ({counts})")
    print(f"payload: {len(prepared.payload)} / {MAX_PAYLOAD_BYTES} bytes")

    if args.out:
        Path(args.out).expanduser().write_text(prepared.payload)
        print(f"payload written: {args.out}")
    elif args.print_payload:
        print(prepared.payload)
    return ExitCode.OK
