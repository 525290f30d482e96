"""CLI entry and command wiring."""

import argparse
import logging
import sys

from gearsig.commands import (
    custom_cmd,
    device_cmd,
    export_cmd,
    import_cmd,
    inspect_cmd,
    library_cmd,
    prepare_cmd,
    preset_cmd,
    scope_cmd,
    show_cmd,
    tooth_cmd,
)
from gearsig.constants import APP_NAME, ExitCode


COMMANDS = {
    "show": show_cmd.run,
    "preset": preset_cmd.run,
    "custom": custom_cmd.run,
    "tooth": tooth_cmd.run,
    "export": export_cmd.run,
    "import": import_cmd.run,
    "device": device_cmd.run,
    "prepare": prepare_cmd.run,
    "inspect": inspect_cmd.run,
    "scope": scope_cmd.run,
    "library": library_cmd.run,
}


def build_parser():
    parser = argparse.ArgumentParser(prog=APP_NAME)
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    p_show = sub.add_parser("show", help="Summarize the current wheels")
    p_show.add_argument("--teeth", action="store_true", help="List every tooth")
    p_show.add_argument("--json", action="store_true")

    p_preset = sub.add_parser("preset", help="Load a wheel preset")
    p_preset.add_argument("wheel", help="ckp, cmp1 or cmp2")
    p_preset.add_argument("--teeth", type=int, help="Crank tooth count")
    p_preset.add_argument("--missing", type=int, nargs="*", help="Missing crank teeth (1-based)")
    p_preset.add_argument("--segments", type=int, help="Cam segment count")
    p_preset.add_argument("--name")

    p_custom = sub.add_parser("custom", help="Start a custom crank wheel")
    p_custom.add_argument("--teeth", type=int, required=True)
    p_custom.add_argument("--gap-ratio", type=float, default=0.5)

    p_tooth = sub.add_parser("tooth", help="Edit a single tooth")
    p_tooth.add_argument("action", choices=["toggle", "update", "add", "remove"])
    p_tooth.add_argument("wheel", help="ckp, cmp1 or cmp2")
    p_tooth.add_argument("--id", dest="tooth_id", type=int)
    p_tooth.add_argument("--start", type=float)
    p_tooth.add_argument("--end", type=float)

    p_export = sub.add_parser("export", help="Write the protected wheel export")
    p_export.add_argument("--outdir", help="Output directory")
    p_export.add_argument("--stdout", action="store_true")

    p_import = sub.add_parser("import", help="Load a protected wheel export")
    p_import.add_argument("path", help="Export file, or - for stdin")

    p_device = sub.add_parser("device", help="Print the device (SIG1) config")
    p_device.add_argument("--name")
    p_device.add_argument("--out", help="Write to file instead of stdout")
    p_device.add_argument("--save", action="store_true", help="Also save to the signal library")

    p_prepare = sub.add_parser("prepare", help="Validate a config for upload")
    p_prepare.add_argument("path", help="Device, legacy or export JSON, or - for stdin")
    p_prepare.add_argument("--out", help="Write the upload payload to a file")
    p_prepare.add_argument("--print-payload", action="store_true")

    p_inspect = sub.add_parser("inspect", help="Debug-decode SIG1 blobs")
    p_inspect.add_argument("blob", nargs="?")
    p_inspect.add_argument("--file", help="Device JSON or raw blob file")
    p_inspect.add_argument("--json", action="store_true")

    p_scope = sub.add_parser("scope", help="Write sampled waveforms as CSV")
    p_scope.add_argument("--out", required=True)
    p_scope.add_argument("--resolution", type=int, default=1440)
    p_scope.add_argument("--inductive", action="store_true", help="Add the inductive CKP trace")

    p_library = sub.add_parser("library", help="Manage saved device configs")
    p_library.add_argument("action", choices=["list", "save", "show", "delete"])
    p_library.add_argument("filename", nargs="?")
    p_library.add_argument("--file", help="Device JSON to save instead of the workspace")
    p_library.add_argument("--name")
    p_library.add_argument("--json", action="store_true")
    p_library.add_argument("--yes", action="store_true")

    return parser


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return ExitCode.USAGE

    if args.command == "inspect" and not (args.blob or args.file):
        print("error: pass a blob or --file")
        return ExitCode.USAGE

    return COMMANDS[args.command](args)
