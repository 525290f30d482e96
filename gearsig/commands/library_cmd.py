"""Signal library command."""

from dataclasses import asdict
import json

from gearsig.commands.common import read_input_text, require_yes
from gearsig.constants import ExitCode
from gearsig.core.errors import GearsigError
from gearsig.core.models import DeviceSignalConfig
from gearsig.library.manager import delete_signal, list_signals, load_signal, save_signal
from gearsig.state.locks import state_lock
from gearsig.state.store import load_workspace


def _list(args):
    signals = list_signals()
    if getattr(args, "json", False):
        print(json.dumps([asdict(s) for s in signals], indent=2))
        return ExitCode.OK
    if not signals:
        print("library is empty")
    for s in signals:
        channels = [c for c, present in (("CKP", s.has_ckp), ("CMP1", s.has_cmp1), ("CMP2", s.has_cmp2)) if present]
        print(f"- {s.name} ({s.filename}): {' '.join(channels)}")
    return ExitCode.OK


def _save(args):
    if args.file:
        text = read_input_text(args.file)
        if text is None:
            print(f"error: file not found: {args.file}")
            return ExitCode.USAGE
        try:
            config = DeviceSignalConfig.from_dict(json.loads(text))
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as exc:
            print(f"error: not a device config: {exc}")
            return ExitCode.USAGE
    else:
        config = load_workspace().device_config(args.name)
    with state_lock("library"):
        filename = save_signal(config)
    print(f"save ok: {filename}")
    return ExitCode.OK


def _show(args):
    config = load_signal(args.filename)
    print(json.dumps(config.to_dict(), indent=2))
    return ExitCode.OK


def _delete(args):
    if not require_yes(args, f"Delete {args.filename}?"):
        print("aborted")
        return ExitCode.USAGE
    with state_lock("library"):
        delete_signal(args.filename)
    print(f"delete ok: {args.filename}")
    return ExitCode.OK


ACTIONS = {"list": _list, "save": _save, "show": _show, "delete": _delete}


def run(args):
    if args.action in ("show", "delete") and not args.filename:
        print(f"error: {args.action} needs a filename")
        return ExitCode.USAGE
    try:
        return ACTIONS[args.action](args)
    except GearsigError as exc:
        print(f"error: {exc}")
        return ExitCode.RUNTIME_ERROR
