"""Show command."""

import json

from gearsig.commands.common import describe_wheel
from gearsig.constants import ExitCode, WHEEL_IDS
from gearsig.state.store import load_workspace


def run(args):
    workspace = load_workspace()
    edges = workspace.edges()
    payload = {"ckp_mode": workspace.ckp_mode, "wheels": {}}
    for wheel_id in WHEEL_IDS:
        entry = describe_wheel(workspace.wheel(wheel_id))
        entry["cycle_edges"] = len(edges[wheel_id])
        if getattr(args, "teeth", False):
            entry["teeth"] = [
                {
                    "id": t.id,
                    "start": round(t.start_angle, 3),
                    "end": round(t.end_angle, 3),
                    "enabled": t.enabled,
                }
                for t in workspace.wheel(wheel_id).teeth
            ]
        payload["wheels"][wheel_id] = entry

    if getattr(args, "json", False):
        print(json.dumps(payload, indent=2))
        return ExitCode.OK

    print(f"gearsig workspace (ckp mode: {payload['ckp_mode']})")
    for wheel_id, entry in payload["wheels"].items():
        missing = ",".join(str(m) for m in entry["missing_teeth"]) or "-"
        print(
            f"- {wheel_id}: {entry['name']} teeth={entry['total_teeth']} "
            f"enabled={entry['enabled_teeth']} missing={missing} edges={entry['cycle_edges']}"
        )
        for tooth in entry.get("teeth", []):
            flag = "" if tooth["enabled"] else " (off)"
            print(f"    #{tooth['id']}: {tooth['start']} -> {tooth['end']}{flag}")
    return ExitCode.OK
