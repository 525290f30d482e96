"""Export command."""

import json
from pathlib import Path

from gearsig.codec.wheel_codec import generate_filename
from gearsig.constants import ExitCode
from gearsig.state.paths import exports_dir
from gearsig.state.store import load_workspace


def run(args):
    workspace = load_workspace()
    try:
        config = workspace.export_config()
    except ValueError as exc:
        print(f"error: export failed: {exc}")
        return ExitCode.RUNTIME_ERROR

    text = json.dumps(config.to_dict(), indent=2)
    if args.stdout:
        print(text)
        return ExitCode.OK

    outdir = Path(args.outdir).expanduser() if args.outdir else exports_dir()
    outdir.mkdir(parents=True, exist_ok=True)
    outpath = outdir / generate_filename(workspace.wheel("ckp"))
    outpath.write_text(text + "\n")
    print(f"export ok: {outpath}")
    return ExitCode.OK
