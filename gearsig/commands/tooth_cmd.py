"""Tooth edit command."""

from gearsig.commands.common import check_wheel_id
from gearsig.constants import ExitCode
from gearsig.state.locks import state_lock
from gearsig.state.store import load_state, load_workspace, save_workspace


def _apply(workspace, args, wheel_id):
    if args.action == "add":
        return workspace.add_tooth(wheel_id)
    if args.tooth_id is None:
        raise ValueError(f"{args.action} needs --id")
    if args.action == "toggle":
        return workspace.toggle_tooth(wheel_id, args.tooth_id)
    if args.action == "remove":
        return workspace.remove_tooth(wheel_id, args.tooth_id)
    if args.start is None or args.end is None:
        raise ValueError("update needs --start and --end")
    return workspace.update_tooth(wheel_id, args.tooth_id, args.start, args.end)


def run(args):
    wheel_id = check_wheel_id(args.wheel)
    if wheel_id is None:
        print(f"error: unknown wheel: {args.wheel}")
        return ExitCode.USAGE

    with state_lock():
        state = load_state()
        workspace = load_workspace(state)
        try:
            wheel = _apply(workspace, args, wheel_id)
        except (KeyError, ValueError) as exc:
            print(f"error: {exc}")
            return ExitCode.USAGE
        save_workspace(workspace, state)

    print(f"tooth {args.action} ok: {wheel_id} now has {wheel.total_teeth} teeth")
    return ExitCode.OK
