"""Device config command."""

import json
from pathlib import Path

from gearsig.constants import ExitCode
from gearsig.core.errors import GearsigError
from gearsig.library.manager import save_signal
from gearsig.state.store import load_workspace


def run(args):
    workspace = load_workspace()
    try:
        device = workspace.device_config(args.name)
    except GearsigError as exc:
        print(f"error: device export failed: {exc}")
        return ExitCode.RUNTIME_ERROR

    text = json.dumps(device.to_dict(), indent=2)
    if args.out:
        Path(args.out).expanduser().write_text(text + "\n")
        print(f"device config written: {args.out}")
    else:
        print(text)

    if args.save:
        try:
            filename = save_signal(device)
        except GearsigError as exc:
            print(f"error: could not save signal: {exc}")
            return ExitCode.RUNTIME_ERROR
        print(f"saved to library: {filename}")
    return ExitCode.OK
