"""Import command."""

import json

from gearsig.commands.common import read_input_text
from gearsig.constants import ExitCode
from gearsig.core.errors import GearsigError
from gearsig.core.workspace import SignalWorkspace
from gearsig.state.locks import state_lock
from gearsig.state.store import load_state, save_workspace


def run(args):
    text = read_input_text(args.path)
    if text is None:
        print(f"error: file not found: {args.path}")
        return ExitCode.USAGE

    workspace = SignalWorkspace()
    try:
        workspace.import_config(json.loads(text))
    except json.JSONDecodeError as exc:
        print(f"error: invalid JSON: {exc}")
        return ExitCode.USAGE
    except GearsigError as exc:
        print(f"error: import failed: {exc}")
        return ExitCode.RUNTIME_ERROR

    with state_lock():
        save_workspace(workspace, load_state())

    ckp = workspace.wheel("ckp")
    print(f"import ok: ckp {ckp.name} ({ckp.total_teeth} teeth)")
    return ExitCode.OK
