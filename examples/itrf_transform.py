"""epochframe ITRF transform: load IERS data and move a state to the Earth-fixed frame.

Download the inputs first:
    https://datacenter.iers.org/products/eop/rapid/standard/csv/finals2000A.all.csv
    https://naif.jpl.nasa.gov/pub/naif/generic_kernels/lsk/naif0012.tls
"""

import sys

import numpy as np

from epochframe import UTC, Frame, StateVector, TimeScale, read_finals_csv, read_lsk, transform

finals = sys.argv[1] if len(sys.argv) > 1 else "finals2000A.all.csv"
kernel = sys.argv[2] if len(sys.argv) > 2 else "naif0012.tls"

leap_seconds = read_lsk(kernel)
eop = read_finals_csv(finals, leap_seconds=leap_seconds)
start, end = eop.span
print(f"EOP coverage: {start} .. {end}")

epoch = UTC.from_iso("2024-07-05T09:09:18.173", leap_seconds)
state = StateVector(
    [-5530.01774359, -3487.0895338, -1850.03476185],
    [1.29534407, -5.02456882, 5.6391936],
    epoch.to_scale(TimeScale.TDB, leap_seconds),
)

print(f"UT1:  {epoch.to_scale(TimeScale.UT1, leap_seconds, eop)}")

for name in ("ITRF", "TEME", "PEF", "TOD"):
    out = transform(state, Frame.from_name(name), eop_provider=eop)
    speed = np.linalg.norm(out.velocity_km_s)
    print(f"{name:<5} r = {np.array2string(out.position_km, precision=3)} km  |v| = {speed:.6f} km/s")
