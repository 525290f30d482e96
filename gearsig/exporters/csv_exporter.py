"""CSV exporter for sampled waveforms."""

import csv


def export_csv(signals, outpath):
    """Write one angle column plus one column per named signal.

    All signals must share the same sample angles.
    """
    names = list(signals)
    first = signals[names[0]]
    with open(outpath, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["angle_deg"] + names)
        for i, point in enumerate(first):
            row = [f"{point.angle:.3f}"]
            for name in names:
                row.append(f"{signals[name][i].value:.4f}")
            writer.writerow(row)
