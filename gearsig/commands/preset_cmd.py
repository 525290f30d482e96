"""Preset command."""

from gearsig.commands.common import check_wheel_id, tooth_count_error
from gearsig.constants import ExitCode
from gearsig.state.locks import state_lock
from gearsig.state.store import load_state, load_workspace, save_workspace


def run(args):
    wheel_id = check_wheel_id(args.wheel)
    if wheel_id is None:
        print(f"error: unknown wheel: {args.wheel}")
        return ExitCode.USAGE

    if wheel_id == "ckp":
        error = tooth_count_error(args.teeth)
        missing = args.missing or []
        bad = [m for m in missing if m < 1 or m > (args.teeth or 0)]
        if not error and bad:
            error = f"missing teeth out of range 1..{args.teeth}: {bad}"
    else:
        segments = args.segments or args.teeth
        error = tooth_count_error(segments, "--segments")
    if error:
        print(f"error: {error}")
        return ExitCode.USAGE

    with state_lock():
        state = load_state()
        workspace = load_workspace(state)
        if wheel_id == "ckp":
            wheel = workspace.set_ckp_preset(args.teeth, missing, args.name)
        else:
            wheel = workspace.set_cmp_preset(wheel_id, segments)
        save_workspace(workspace, state)

    print(f"preset ok: {wheel_id} = {wheel.name}")
    return ExitCode.OK
