"""Inspect command: debug view of SIG1 blobs."""

import json

from gearsig.codec.frame_codec import inspect_signal_blob
from gearsig.commands.common import read_input_text
from gearsig.constants import ExitCode, SIG1_TAG


def _collect_blobs(args):
    if args.blob:
        return {"blob": args.blob.strip()}
    text = read_input_text(args.file)
    if text is None:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return {"blob": text.strip()}
    if not isinstance(data, dict):
        return {}
    return {k: data.get(k) for k in ("CKP", "CMP1", "CMP2") if isinstance(data.get(k), str)}


def run(args):
    blobs = _collect_blobs(args)
    if blobs is None:
        print(f"error: file not found: {args.file}")
        return ExitCode.USAGE
    if not blobs:
        print(f"error: no {SIG1_TAG} blobs found")
        return ExitCode.USAGE

    report = {}
    for label, blob in blobs.items():
        info = inspect_signal_blob(blob)
        report[label] = info.summary() if info else None

    if getattr(args, "json", False):
        print(json.dumps(report, indent=2))
    else:
        for label, summary in report.items():
            if summary is None:
                print(f"- {label}: not a decodable {SIG1_TAG} blob")
                continue
            print(f"- {label}:")
            for key, value in summary.items():
                print(f"    {key}: {value}")

    all_ok = all(s is not None and s["crc_match"] for s in report.values())
    return ExitCode.OK if all_ok else ExitCode.RUNTIME_ERROR
