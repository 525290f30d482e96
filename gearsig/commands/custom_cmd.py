"""Custom crank wheel command."""

from gearsig.commands.common import tooth_count_error
from gearsig.constants import ExitCode
from gearsig.state.locks import state_lock
from gearsig.state.store import load_state, load_workspace, save_workspace


def run(args):
    error = tooth_count_error(args.teeth)
    if error:
        print(f"error: {error}")
        return ExitCode.USAGE

    with state_lock():
        state = load_state()
        workspace = load_workspace(state)
        wheel = workspace.set_ckp_custom(args.teeth, args.gap_ratio)
        save_workspace(workspace, state)

    print(f"custom ok: ckp has {wheel.total_teeth} teeth")
    return ExitCode.OK
