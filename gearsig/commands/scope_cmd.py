"""Scope command: dump sampled waveforms as CSV."""

from pathlib import Path

from gearsig.constants import ExitCode
from gearsig.exporters.csv_exporter import export_csv
from gearsig.state.store import load_workspace


def run(args):
    if args.resolution < 1:
        print("error: --resolution must be positive")
        return ExitCode.USAGE

    workspace = load_workspace()
    signals = workspace.signals(resolution=args.resolution, inductive=args.inductive)
    outpath = Path(args.out).expanduser()
    outpath.parent.mkdir(parents=True, exist_ok=True)
    export_csv(signals, str(outpath))
    print(f"scope ok: {len(signals['ckp'])} samples x {len(signals)} channels -> {outpath}")
    return ExitCode.OK
