"""epochframe Quickstart: convert a UTC epoch and look at a state in body-fixed frames."""

from epochframe import UTC, Frame, StateVector, TimeScale, transform

# Spacecraft state in the ICRF
epoch = UTC.from_iso("2024-07-05T09:09:18.173")
tdb = epoch.to_scale(TimeScale.TDB)
state = StateVector(
    [-5530.01774359, -3487.0895338, -1850.03476185],
    [1.29534407, -5.02456882, 5.6391936],
    tdb,
)

print(f"UTC:  {epoch}")
print(f"TAI:  {epoch.to_tai()}")
print(f"TT:   {epoch.to_scale(TimeScale.TT)}")
print(f"TDB:  {tdb}")

# Body-fixed frames only need the TDB epoch, no Earth orientation data
for name in ("IAU_EARTH", "IAU_MOON", "IAU_MARS"):
    fixed = transform(state, Frame.from_name(name))
    r, v = fixed.position_km, fixed.velocity_km_s
    print(f"{name:<10} r = [{r[0]:11.3f} {r[1]:11.3f} {r[2]:11.3f}] km")
    print(f"{'':<10} v = [{v[0]:11.6f} {v[1]:11.6f} {v[2]:11.6f}] km/s")

# Terrestrial frames (ITRF, TIRF, PEF) need UT1 and polar motion:
# from epochframe import read_finals_csv
# eop = read_finals_csv("finals2000A.all.csv")
# itrf = transform(state, Frame.from_name("ITRF"), eop_provider=eop)
